# pages/2_Ticket.py

# =========================
# 🎟️ Ticket del invitado
# =========================

import streamlit as st

from ui import api
from ui.lang_selector import render_lang_selector
from ui.translations import t
from ui.ui import apply_global_styles, read_event_context, render_side_nav

st.set_page_config(page_title="Ticket 🎟️", layout="centered", initial_sidebar_state="collapsed")

lang = render_lang_selector("lang")
net_err = t("common.net_err", lang)
slug, _ = read_event_context()

# ?rsvp= permite reabrir el ticket desde un enlace guardado.
rsvp_id = st.query_params.get("rsvp") or st.session_state.get("rsvp_id")

theme = None
if slug:
    ok, context, _err = api.get_event(slug, lang, net_err)
    theme = context.get("theme") if ok else None
apply_global_styles(theme)
render_side_nav(lang, hide=["ticket"])

if not rsvp_id:
    st.info(t("ticket.empty", lang))
    st.stop()

ok, ticket, err = api.get_ticket(rsvp_id, lang, net_err)
if not ok:
    st.error(err)
    st.stop()

st.session_state["rsvp_id"] = rsvp_id
st.markdown(f"## {t('ticket.title', lang)}")

if not ticket["attending"]:
    st.warning(t("ticket.declined", lang))
    st.stop()

when = (ticket.get("event_date") or "")[:16].replace("T", " ")
where = ", ".join(p for p in (ticket.get("venue_name"), ticket.get("venue_address")) if p)

st.markdown(
    f"""
    <div class="ticket">
      <h3>{ticket['event_title']}</h3>
      <p><strong>{t('ticket.guest', lang)}:</strong> {ticket['guest_name']} · {ticket['invite_label']}</p>
      <p><strong>{t('ticket.people', lang)}:</strong> {ticket['guests_count']}</p>
      <p><strong>{t('ticket.table', lang)}:</strong> {ticket.get('table_name') or '-'}</p>
      <p><strong>{t('ticket.when', lang)}:</strong> {when or '-'}</p>
      <p><strong>{t('ticket.where', lang)}:</strong> {where or '-'}</p>
      <p style="font-size:11px;color:#999">#{ticket['rsvp_id'][:8].upper()}</p>
    </div>
    """,
    unsafe_allow_html=True,
)
