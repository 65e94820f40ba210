# conftest.py
# -------------------------------------------------------------------------------------
# Archivo: conftest.py (raíz del proyecto)
# Propósito: preflight de la UI (Streamlit) para los tests end-to-end con Playwright.
#            Solo actúa con RUN_UI_TESTS=1; la suite de API (tests/*.py) no lo necesita.
# Variables de entorno (opcionales):
#   RUN_UI_TESTS="0|1"                              --> Activa preflight + tests de UI.
#   ENTRY_URL="http://localhost:8501"               --> URL base de la UI (Streamlit).
#   API_BASE_URL="http://127.0.0.1:8000"            --> URL base de la API (FastAPI).
#   PYTEST_PREFLIGHT_TIMEOUT="120"                  --> Segundos para esperar la UI.
#   PYTEST_PREFLIGHT_POLL="1.0"                     --> Intervalo de reintento (seg).
#   CHECK_API="0|1"                                 --> Comprueba /api/meta/health.
# -------------------------------------------------------------------------------------

from __future__ import annotations

import os
import time
from urllib.parse import urljoin

import pytest
import requests

# =========================
# Configuración por defecto
# =========================
RUN_UI_TESTS = os.getenv("RUN_UI_TESTS", "0") == "1"
ENTRY_URL = os.getenv("ENTRY_URL", "http://localhost:8501")
API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
SMOKE_PATHS = ["/", "/Ticket", "/Mural"]
PREFLIGHT_TIMEOUT = int(os.getenv("PYTEST_PREFLIGHT_TIMEOUT", "120"))
PREFLIGHT_POLL = float(os.getenv("PYTEST_PREFLIGHT_POLL", "1.0"))
CHECK_API = os.getenv("CHECK_API", "0") == "1"


# =====================
# Helpers de preflight
# =====================
def _server_is_up(base_url: str) -> bool:
    """True si alguna ruta de la UI responde < 500."""
    for path in SMOKE_PATHS:
        url = urljoin(base_url.rstrip("/") + "/", path.lstrip("/"))
        try:
            if requests.get(url, timeout=2).status_code < 500:
                return True
        except requests.RequestException:
            continue
    return False


def _wait_for_ui(base_url: str, timeout_s: int, poll_s: float) -> bool:
    deadline = time.monotonic() + timeout_s
    ok = _server_is_up(base_url)
    while not ok and time.monotonic() < deadline:
        time.sleep(poll_s)
        ok = _server_is_up(base_url)
    return ok


def _check_api(base_url: str) -> tuple[bool, str]:
    url = urljoin(base_url.rstrip("/") + "/", "api/meta/health")
    try:
        r = requests.get(url, timeout=3)
    except requests.RequestException as e:
        return False, f"{type(e).__name__}: {e}"
    return r.status_code < 500, f"HTTP {r.status_code} en /api/meta/health"


# ===========================
# Hooks de ciclo de ejecución
# ===========================
def pytest_sessionstart(session):
    """Con RUN_UI_TESTS=1 espera a que Streamlit (y opcionalmente la API) respondan."""
    if not RUN_UI_TESTS:
        return

    tr = session.config.pluginmanager.get_plugin("terminalreporter")

    def _say(msg: str, **markup) -> None:
        if tr:
            tr.write_line(msg, **markup)
        else:
            print(msg)

    _say(f"🔍 Verificando UI en {ENTRY_URL}…")
    if not _wait_for_ui(ENTRY_URL, PREFLIGHT_TIMEOUT, PREFLIGHT_POLL):
        msg = (f"❌ No pude contactar la UI en {ENTRY_URL} tras {PREFLIGHT_TIMEOUT}s.\n"
               "   Arranca Streamlit (`streamlit run streamlit_rsvp_app.py`) o ajusta ENTRY_URL.")
        _say(msg, red=True)
        raise pytest.UsageError(msg)

    if CHECK_API:
        ok, detail = _check_api(API_BASE_URL)
        _say(f"   {'✅' if ok else '⚠️ '} API: {detail}", yellow=not ok)

    _say("🟢 Preflight OK. Iniciando suite UI…")


# ===============================
# Fixtures de utilidad
# ===============================
@pytest.fixture(scope="session")
def entry_url() -> str:
    return ENTRY_URL


@pytest.fixture(scope="session")
def api_base_url() -> str:
    return API_BASE_URL
