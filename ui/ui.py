# ui/ui.py
# =============================================================================
# Utilidades de UI compartidas (solo presentación visual, sin lógica de negocio)
# - Estilos globales con los colores/fuentes del tema del evento
# - Cabecera del evento (novios, fecha, lugar)
# - Menú lateral con enlaces a las páginas del invitado
# - Contexto de evento (slug/token) persistido en sesión entre páginas
# =============================================================================

from typing import Optional

import streamlit as st

from ui.translations import t

DEFAULT_COLORS = {"primary": "#D4AF37", "background": "#FFFAF7", "text": "#3E3E3E"}
DEFAULT_FONTS = {"heading": "Playfair Display", "body": "Inter"}


# ─────────────────────────────────────────────────────────────────────────────
# 1) Contexto del evento (slug + token del convite)
# ─────────────────────────────────────────────────────────────────────────────
def read_event_context() -> tuple[Optional[str], Optional[str]]:
    """
    Lee ?slug= y ?token= de la URL y los guarda en sesión: las páginas de
    Streamlit no conservan los query params al navegar con page_link.
    """
    for key in ("slug", "token"):
        value = st.query_params.get(key)
        if value:
            st.session_state[key] = value.strip().lower() if key == "slug" else value.strip().upper()
    return st.session_state.get("slug"), st.session_state.get("token")


# ─────────────────────────────────────────────────────────────────────────────
# 2) Estilos globales (tema visual + limpieza de formularios)
# ─────────────────────────────────────────────────────────────────────────────
def apply_global_styles(theme: Optional[dict] = None) -> None:
    """Inyecta CSS global usando la paleta del ThemeConfig (o la dorada por defecto)."""
    colors = {**DEFAULT_COLORS, **((theme or {}).get("colors") or {})}
    fonts = {**DEFAULT_FONTS, **((theme or {}).get("fonts") or {})}
    heading = fonts["heading"].replace(" ", "+")
    body = fonts["body"].replace(" ", "+")

    st.markdown(
        f"""
        <style>
          @import url('https://fonts.googleapis.com/css2?family={body}:wght@300;400;600&family={heading}:wght@600;700&display=swap');
          :root{{
            --primary:{colors['primary']}; --bg:{colors['background']}; --text:{colors['text']};
            --radius:12px;
          }}
          .stApp{{ background:var(--bg); color:var(--text); }}
          [data-testid="stHeader"]{{ display:none; }}
          html, body, [class*="block-container"]{{ font-family:'{fonts['body']}', sans-serif; }}
          h1, h2, h3{{ font-family:'{fonts['heading']}', serif !important; font-weight:700; }}

          /* Primario (acción principal) */
          .stButton > button[kind="primary"],
          .stFormSubmitButton > button{{
            background:var(--primary) !important; color:#FFFFFF !important; border:none !important;
            border-radius:10px !important;
          }}

          /* Sin “caja fantasma” alrededor de los formularios */
          form[data-testid="stForm"]{{ border:none !important; padding:0 !important; }}

          .ticket{{
            border:2px dashed var(--primary); border-radius:var(--radius);
            padding:24px; background:#FFFFFF; text-align:center;
          }}
          .wall-msg{{ border-left:3px solid var(--primary); padding:6px 12px; margin:10px 0; }}
        </style>
        """,
        unsafe_allow_html=True,
    )


# ─────────────────────────────────────────────────────────────────────────────
# 3) Cabecera del evento
# ─────────────────────────────────────────────────────────────────────────────
def render_event_header(event: dict) -> None:
    couple = " & ".join(n for n in (event.get("bride_name"), event.get("groom_name")) if n)
    st.markdown(f"<h1 style='text-align:center'>{couple or event.get('title', '')}</h1>", unsafe_allow_html=True)
    details = [d for d in ((event.get("date") or "")[:10], event.get("venue_name")) if d]
    if details:
        st.markdown(f"<p style='text-align:center'>{' • '.join(details)}</p>", unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────────────────────
# 4) Menú lateral del invitado
# ─────────────────────────────────────────────────────────────────────────────
def render_side_nav(lang: str, hide: list[str] | None = None) -> None:
    """Enlaces a RSVP / Ticket / Mural / Fotos (oculta los indicados en `hide`)."""
    hide = hide or []
    items = [
        ("rsvp", "pages/1_RSVP.py", "💍", "nav.rsvp"),
        ("ticket", "pages/2_Ticket.py", "🎟️", "nav.ticket"),
        ("wall", "pages/3_Mural.py", "💌", "nav.wall"),
        ("photos", "pages/4_Fotos.py", "📸", "nav.photos"),
    ]
    with st.sidebar:
        for key, page, icon, label in items:
            if key not in hide:
                st.page_link(page, label=t(label, lang), icon=icon)
