# tests/ui/test_streamlit_rsvp.py                                                          # Pruebas end-to-end de la app de invitados (Playwright + Pytest)

# =======================
# Importaciones y setup
# =======================
import os                                                                                  # Lectura de variables de entorno (slug/token de la demo)
import re                                                                                  # Expresiones regulares para esperar URLs

import pytest                                                                              # Estructura y ejecución de los tests

if os.getenv("RUN_UI_TESTS", "0") != "1":                                                  # Solo corren con RUN_UI_TESTS=1 (Streamlit + API levantados)
    pytest.skip("UI tests desactivados (RUN_UI_TESTS != 1)", allow_module_level=True)

sync_api = pytest.importorskip("playwright.sync_api")                                      # Playwright es un extra de test; sin él, se omite el módulo
expect = sync_api.expect

# =======================
# 🔧 CONFIGURACIÓN RÁPIDA
# =======================
EVENT_SLUG = os.getenv("UI_EVENT_SLUG", "demo")                                            # Evento creado con `python create_db.py --demo`
INVITE_TOKEN = os.getenv("UI_INVITE_TOKEN", "")                                            # Token impreso en el log del seed
GUEST_NAME = os.getenv("UI_GUEST_NAME", "João Silva")                                      # Nombre principal del convite demo

ROUTES = {
    "home": "/",
    "ticket": "/Ticket",
    "wall": "/Mural",
}

TEXTS = {
    "submit": "Enviar resposta",                                                           # Botón del formulario (pt)
    "yes": "Sim, vou!",
    "no": "Infelizmente não",
    "guests_count": "Número de pessoas (incluindo você)",
    "ticket_title": "O seu bilhete",
    "declined": "Vamos sentir a sua falta",
    "wall_name": "O seu nome",
    "wall_message": "A sua mensagem",
    "wall_submit": "Publicar",
    "missing_event": "Link incompleto",
    "not_found": "não encontrado",
}

_NETWORK_IDLE_TIMEOUT = 20000                                                              # ms para red ociosa
_VISIBILITY_TIMEOUT = 8000                                                                 # ms para visibilidad de elementos


# =======================
# ⚙️ FIXTURES PLAYWRIGHT
# =======================
@pytest.fixture(scope="session")
def browser():
    with sync_api.sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        yield browser
        browser.close()


@pytest.fixture()
def page(browser):
    context = browser.new_context()                                                        # Contexto aislado: sesión de Streamlit nueva por test
    page = context.new_page()
    yield page
    context.close()


@pytest.fixture()
def invite_token():
    if not INVITE_TOKEN:
        pytest.skip("Define UI_INVITE_TOKEN con el token del convite demo")
    return INVITE_TOKEN


# =======================
# 🔁 UTILIDADES PEQUEÑAS
# =======================
def _wait_hydrated(page):
    page.wait_for_load_state("domcontentloaded")
    page.wait_for_load_state("networkidle", timeout=_NETWORK_IDLE_TIMEOUT)


def _goto(page, entry_url: str, route_key: str, **params) -> None:
    params.setdefault("lang", "pt")                                                        # Fuerza portugués para que TEXTS coincida
    query = "&".join(f"{k}={v}" for k, v in params.items())
    page.goto(f"{entry_url.rstrip('/')}{ROUTES[route_key]}?{query}", wait_until="domcontentloaded")
    _wait_hydrated(page)


def _expect_route(page, entry_url: str, route_key: str):
    target = f"{entry_url.rstrip('/')}{ROUTES[route_key]}"
    page.wait_for_url(re.compile("^" + re.escape(target) + r"(\?.*)?$"), timeout=_NETWORK_IDLE_TIMEOUT)


def _submit_rsvp(page) -> None:
    page.locator("main").get_by_role("button", name=TEXTS["submit"]).click()
    _wait_hydrated(page)


# =======================
# 🧪 TESTS
# =======================
def test_00_missing_slug_shows_warning(page, entry_url):
    _goto(page, entry_url, "home")
    expect(page.get_by_text(TEXTS["missing_event"])).to_be_visible(timeout=_VISIBILITY_TIMEOUT)


def test_01_unknown_event_shows_localized_error(page, entry_url):
    _goto(page, entry_url, "home", slug="nao-existe-xyz", token="AAAAAAAA")
    expect(page.get_by_text(TEXTS["not_found"])).to_be_visible(timeout=_VISIBILITY_TIMEOUT)


def test_02_rsvp_yes_shows_ticket(page, entry_url, invite_token):
    _goto(page, entry_url, "home", slug=EVENT_SLUG, token=invite_token)
    page.get_by_text(TEXTS["yes"], exact=True).click()
    page.get_by_label(TEXTS["guests_count"]).fill("2")
    _submit_rsvp(page)

    _expect_route(page, entry_url, "ticket")
    expect(page.get_by_text(TEXTS["ticket_title"])).to_be_visible(timeout=_VISIBILITY_TIMEOUT)
    expect(page.get_by_text(GUEST_NAME).first).to_be_visible(timeout=_VISIBILITY_TIMEOUT)


def test_03_rsvp_no_overwrites_previous_answer(page, entry_url, invite_token):
    _goto(page, entry_url, "home", slug=EVENT_SLUG, token=invite_token)
    page.get_by_text(TEXTS["no"], exact=True).click()
    _submit_rsvp(page)

    _expect_route(page, entry_url, "ticket")
    expect(page.get_by_text(TEXTS["declined"])).to_be_visible(timeout=_VISIBILITY_TIMEOUT)


def test_04_wall_message_is_listed(page, entry_url):
    _goto(page, entry_url, "wall", slug=EVENT_SLUG)
    page.get_by_label(TEXTS["wall_name"]).fill("Playwright")
    page.get_by_label(TEXTS["wall_message"]).fill("Parabéns aos noivos!")
    page.get_by_role("button", name=TEXTS["wall_submit"]).click()
    _wait_hydrated(page)

    expect(page.get_by_text("Parabéns aos noivos!").first).to_be_visible(timeout=_VISIBILITY_TIMEOUT)
