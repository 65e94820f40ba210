# pages/3_Mural.py
# =================================================================================
# 💌 Mural de mensajes: mensajes del RSVP + mensajes públicos, más recientes primero.
# =================================================================================

import streamlit as st

from ui import api
from ui.lang_selector import render_lang_selector
from ui.translations import t
from ui.ui import apply_global_styles, read_event_context, render_event_header, render_side_nav

st.set_page_config(page_title="Mural 💌", layout="centered", initial_sidebar_state="collapsed")

lang = render_lang_selector("lang")
net_err = t("common.net_err", lang)
slug, _ = read_event_context()

if not slug:
    st.warning(t("common.missing_event", lang))
    st.stop()

ok, context, err = api.get_event(slug, lang, net_err)
if not ok:
    st.error(err)
    st.stop()

apply_global_styles(context.get("theme"))
render_side_nav(lang, hide=["wall"])
render_event_header(context["event"])
st.markdown(f"## {t('wall.title', lang)}")

# --- Nuevo mensaje ---
with st.form("wall_form", clear_on_submit=True):
    name = st.text_input(t("wall.name", lang), max_chars=120)
    message = st.text_area(t("wall.message", lang), max_chars=1000)
    submitted = st.form_submit_button(t("wall.submit", lang), type="primary")

if submitted:
    ok, _result, err = api.post_message(slug, name, message, lang, net_err)
    if ok:
        st.success(t("wall.success", lang))
    else:
        st.error(err)

# --- Listado ---
ok, messages, err = api.list_messages(slug, lang, net_err)
if not ok:
    st.error(err)
    st.stop()

if not messages:
    st.caption(t("wall.empty", lang))

for m in messages:
    icon = "💍" if m["type"] == "rsvp" else "💬"
    st.markdown(
        f"<div class='wall-msg'>{icon} <strong>{m['name']}</strong>"
        f"<br>{m['message']}<br><small>{m['created_at'][:10]}</small></div>",
        unsafe_allow_html=True,
    )
