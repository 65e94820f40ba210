# ui/api.py
# =============================================================================
# Cliente HTTP mínimo para las apps de Streamlit (requests contra la API).
# - Todas las llamadas devuelven (ok, data, error) para que las páginas solo
#   decidan qué mostrar.
# - El error ya viene traducido por el backend ({"error": ...} o {"detail": ...}).
# =============================================================================

import os
from typing import Any, Optional, Tuple

import requests
from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000").rstrip("/")
TIMEOUT = 12

Result = Tuple[bool, Any, Optional[str]]


def _error_text(resp: requests.Response) -> str:
    """Extrae el mensaje legible de una respuesta de error."""
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        detail = body.get("error") or body.get("detail")
        if isinstance(detail, str):
            return detail
    return f"HTTP {resp.status_code}"


def _call(method: str, path: str, lang: str, net_err: str, **kwargs) -> Result:
    headers = kwargs.pop("headers", None) or {}
    headers.setdefault("Accept-Language", lang)
    try:
        resp = requests.request(method, f"{API_BASE_URL}{path}", headers=headers, timeout=TIMEOUT, **kwargs)
    except requests.exceptions.RequestException:
        return False, None, net_err
    if resp.status_code >= 400:
        return False, None, _error_text(resp)
    if resp.status_code == 204 or not resp.content:
        return True, None, None
    return True, resp.json(), None


# --- Invitados ---------------------------------------------------------------
def get_event(slug: str, lang: str, net_err: str) -> Result:
    return _call("GET", f"/api/events/{slug}", lang, net_err)


def get_invite(slug: str, token: str, lang: str, net_err: str) -> Result:
    return _call("GET", f"/api/events/{slug}/invite", lang, net_err, params={"token": token})


def search_guests(slug: str, query: str, token: Optional[str], lang: str, net_err: str) -> Result:
    params = {"q": query}
    if token:
        params["token"] = token
    return _call("GET", f"/api/events/{slug}/guests/search", lang, net_err, params=params)


def submit_rsvp(payload: dict, lang: str, net_err: str) -> Result:
    return _call("POST", "/api/rsvp", lang, net_err, json=payload)


def get_ticket(rsvp_id: str, lang: str, net_err: str) -> Result:
    return _call("GET", f"/api/rsvps/{rsvp_id}/ticket", lang, net_err)


def list_messages(slug: str, lang: str, net_err: str) -> Result:
    return _call("GET", f"/api/events/{slug}/messages", lang, net_err)


def post_message(slug: str, name: str, message: str, lang: str, net_err: str) -> Result:
    return _call("POST", f"/api/events/{slug}/messages", lang, net_err,
                 json={"name": name, "message": message, "lang": lang})


def list_photos(slug: str, lang: str, net_err: str) -> Result:
    return _call("GET", f"/api/events/{slug}/photos", lang, net_err)


def upload_photo(slug: str, filename: str, content: bytes, mime: str, lang: str, net_err: str) -> Result:
    return _call("POST", f"/api/events/{slug}/photos", lang, net_err,
                 files={"file": (filename, content, mime)})


# --- Panel de la pareja ------------------------------------------------------
def admin_headers(admin_key: str = "", couple_token: str = "") -> dict:
    """x-admin-key para el dueño de la plataforma, Bearer para la pareja."""
    if admin_key:
        return {"x-admin-key": admin_key}
    if couple_token:
        return {"Authorization": f"Bearer {couple_token}"}
    return {}


def admin_get(event_id: str, path: str, headers: dict, params: Optional[dict] = None) -> Result:
    return _call("GET", f"/api/admin/events/{event_id}{path}", "pt", "Sem ligação à API.",
                 headers=dict(headers), params=params)
