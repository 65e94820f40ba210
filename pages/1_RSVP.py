# pages/1_RSVP.py
# =================================================================================
# 💍 Formulario RSVP del invitado
# ---------------------------------------------------------------------------------
# 1) Resuelve el evento por slug y valida el token del convite.
# 2) Autocompletado de nombres (lista del convite + búsqueda ≥ 3 letras).
# 3) Envía POST /api/rsvp y lleva al ticket.
# Los errores de negocio (expirado, límite, etc.) llegan ya traducidos de la API.
# =================================================================================

import streamlit as st

from ui import api
from ui.lang_selector import render_lang_selector
from ui.translations import t
from ui.ui import apply_global_styles, read_event_context, render_event_header, render_side_nav

st.set_page_config(page_title="RSVP 💍", layout="centered", initial_sidebar_state="collapsed")

# --- Idioma y contexto ---
lang = render_lang_selector("lang")
net_err = t("common.net_err", lang)
slug, token = read_event_context()

if not slug:
    st.warning(t("common.missing_event", lang))
    st.stop()

# =================================================================================
# 🔄 Carga de datos (evento + convite)
# =================================================================================
ok, context, err = api.get_event(slug, lang, net_err)
if not ok:
    apply_global_styles()
    st.error(err)
    st.stop()

apply_global_styles(context.get("theme"))
render_side_nav(lang, hide=["rsvp"])
render_event_header(context["event"])

if not token:
    st.warning(t("form.token_missing", lang))
    st.stop()

ok, invite, err = api.get_invite(slug, token, lang, net_err)
if not ok:
    st.error(err)
    st.stop()

max_guests = int(invite["max_guests"])
previous = invite.get("rsvp") or {}
candidates = invite.get("guests") or []

# =================================================================================
# 🖼️ Interfaz
# =================================================================================
st.markdown(f"## {t('form.title', lang)}")
if invite.get("label"):
    st.markdown(f"👋 {t('form.hi', lang)}, **{invite['label']}**")
st.write(t("form.invite_for", lang, max_guests=max_guests, plural="" if max_guests == 1 else "s"))
if previous:
    st.info(t("form.previous", lang))

# --- Sub-bloque: Nombre (autocompletado) ---
name_options = [c["principal_name"] for c in candidates]
query = st.text_input(t("form.name_search", lang), help=t("form.name_search_hint", lang), key="name_query")
if len(query.strip()) >= 3:
    ok, found, err = api.search_guests(slug, query, token, lang, net_err)
    if ok:
        name_options = [c["principal_name"] for c in found]
        if not name_options:
            st.caption(t("form.no_matches", lang))
    else:
        st.error(err)

default_name = previous.get("guest_name")
if default_name and default_name not in name_options:
    name_options = [default_name] + name_options

# --- Sub-bloque: Asistencia (fuera del form para que el resto reaccione) ---
att_choice = st.radio(
    t("form.attending", lang),
    [t("form.yes", lang), t("form.no", lang)],
    index=1 if previous and not previous.get("attending") else 0,
    horizontal=True,
)
is_attending = att_choice == t("form.yes", lang)

with st.form("rsvp_form"):
    if name_options:
        guest_name = st.selectbox(t("form.name", lang), name_options, index=0)
    else:
        guest_name = st.text_input(t("form.name", lang), value=default_name or "")

    guests_count = 0
    if is_attending:
        guests_count = st.number_input(
            t("form.guests_count", lang),
            min_value=1,
            max_value=max_guests,
            value=min(max(int(previous.get("guests_count") or 1), 1), max_guests),
            step=1,
        )

    phone = st.text_input(t("form.phone", lang), value=previous.get("phone") or "")
    message = st.text_area(t("form.message", lang), value=previous.get("message") or "", max_chars=2000)
    submitted = st.form_submit_button(t("form.submit", lang), type="primary")

if submitted:
    payload = {
        "invite_id": invite["id"],
        "guest_name": guest_name,
        "attending": is_attending,
        "guests_count": int(guests_count),
        "phone": phone.strip() or None,
        "message": message.strip() or None,
        "lang": lang,
    }
    with st.spinner(t("form.sending", lang)):
        ok, result, err = api.submit_rsvp(payload, lang, net_err)
    if not ok:
        st.error(err or t("form.generic_error", lang))
        st.stop()

    st.session_state["rsvp_id"] = result["rsvpId"]
    st.success(result["message"])
    st.switch_page("pages/2_Ticket.py")
