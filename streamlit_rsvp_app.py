# streamlit_rsvp_app.py                                                      # Entrypoint de la app de invitados (Streamlit multipage).
# =================================================================================
# 🚀 Punto de Entrada: App de Invitados
# Rol: leer ?slug=&token= del enlace compartido y redirigir al formulario RSVP.
# Enlace típico: /?slug=ana-e-rui&token=AB12CD34&lang=pt
# =================================================================================

# ================================================================
# 🌙 MAINTENANCE MODE (Controlado por variables)
# ================================================================
import os                                                                    # Lectura de MAINTENANCE_MODE.
import streamlit as st                                                       # Framework de la interfaz.

from ui.translations import VALID_LANGS, DEFAULT_LANG, t                     # Idiomas soportados y textos.
from ui.ui import read_event_context                                         # Persistencia de slug/token en sesión.

MAINTENANCE = os.getenv("MAINTENANCE_MODE", "0")                             # "1" = mantenimiento activo.

if MAINTENANCE == "1":
    st.set_page_config(page_title="💍 Manutenção", page_icon="💍", layout="centered")
    st.markdown(
        """
        <div style="text-align:center;margin-top:18vh">
          <div style="font-size:32px">💍</div>
          <h1>Estamos a preparar algo especial</h1>
          <p><em>Volte em breve para confirmar a sua presença.</em></p>
        </div>
        """,
        unsafe_allow_html=True,
    )
    st.stop()                                                                # Nada más se renderiza en mantenimiento.

st.set_page_config(                                                          # Configuración normal de la app.
    page_title="RSVP 💍",
    layout="centered",
    initial_sidebar_state="collapsed",
)

# --- Multipage routes (mantén estos nombres/ubicación en /pages) -------------
FORM_PAGE = "pages/1_RSVP.py"
TICKET_PAGE = "pages/2_Ticket.py"

# ==============================================================================
# ✅ Idioma inicial: ?lang= si es válido; si no, el de sesión o DEFAULT_LANG.
# ==============================================================================
query_lang = st.query_params.get("lang")
if "lang" not in st.session_state:
    st.session_state["lang"] = query_lang if query_lang in VALID_LANGS else DEFAULT_LANG

slug, token = read_event_context()                                           # Guarda slug/token antes de cambiar de página.

if not slug:                                                                 # Sin slug no hay evento que mostrar.
    st.warning(t("common.missing_event", st.session_state["lang"]))
    st.stop()

# --- Decisión de destino ------------------------------------------------------
target_page = TICKET_PAGE if st.session_state.get("rsvp_id") and not token else FORM_PAGE

try:
    st.switch_page(target_page)
except Exception:
    st.error(f"Unable to redirect to '{target_page}'.")
    st.page_link(FORM_PAGE, label=t("nav.rsvp", st.session_state["lang"]), icon="💍")
