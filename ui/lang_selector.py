# ui/lang_selector.py
# =================================================================================
# 🌍 Selector de idioma con banderas (emoji).
# ---------------------------------------------------------------------------------
# - Prioridad: sesión → ?lang= de la URL → DEFAULT_LANG.
# - Al cambiar de idioma se actualiza ?lang= para que el enlace sea compartible.
# =================================================================================

from typing import Dict, Optional

import streamlit as st

from ui.translations import LANG_DISPLAY, VALID_LANGS, normalize_lang

EMOJI: Dict[str, str] = {"pt": "🇧🇷", "en": "🇬🇧", "es": "🇪🇸"}


def _read_query_lang() -> Optional[str]:
    """Lee ?lang=... desde la URL de forma segura."""
    try:
        return st.query_params.get("lang")
    except Exception:
        return None


def render_lang_selector(session_key: str = "lang") -> str:
    """Dibuja los botones de idioma y devuelve el código activo."""
    current = normalize_lang(st.session_state.get(session_key) or _read_query_lang())
    st.session_state[session_key] = current

    cols = st.columns(len(VALID_LANGS))
    selected = None
    for idx, code in enumerate(VALID_LANGS):
        with cols[idx]:
            label = f"{EMOJI[code]} {LANG_DISPLAY[code].split(' (')[0]}"
            if st.button(label, key=f"btn_{code}", use_container_width=True,
                         type="primary" if code == current else "secondary"):
                selected = code

    if selected and selected != current:
        st.session_state[session_key] = selected
        st.query_params["lang"] = selected
        st.rerun()

    return st.session_state[session_key]
