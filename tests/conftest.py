# tests/conftest.py
# =================================================================================
# 🧪 Fixtures de la suite de API (FastAPI TestClient + SQLite temporal)
# ---------------------------------------------------------------------------------
# El entorno se fija ANTES de importar weddingsite: db.py, auth.py, mailer.py y los
# routers leen os.getenv al importarse.
# =================================================================================

import os
import shutil
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="weddingsite-tests-")

os.environ.update({
    "DATABASE_URL": f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}",
    "FORCE_DB": "sqlite",
    "DRY_RUN": "1",
    "ADMIN_API_KEY": "owner-test-key",
    "SECRET_KEY": "test-secret",
    "STORAGE_DIR": os.path.join(_TMP_DIR, "media"),
    "PUBLIC_SITE_URL": "https://convite.example.com",
    "DEFAULT_LANG": "pt",
    "NOTIFY_EMAIL": "",
    # Límites desactivados; los tests de rate limit los activan con monkeypatch.
    "RSVP_RL_MAX": "0",
    "MESSAGES_RL_MAX": "0",
    "UPLOAD_RL_MAX": "0",
    "REQUEST_RL_MAX": "0",
    "LOGIN_RL_MAX": "0",
})

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from weddingsite import auth, models, rate_limit, storage  # noqa: E402
from weddingsite.crud import events_crud, invites_crud  # noqa: E402
from weddingsite.db import Base, SessionLocal, engine  # noqa: E402
from weddingsite.main import app  # noqa: E402
from weddingsite.utils.dates import utcnow  # noqa: E402

OWNER_KEY = "owner-test-key"


@pytest.fixture(autouse=True)
def _fresh_database():
    """Esquema limpio, media vacío y contadores de rate limit a cero en cada test."""
    Base.metadata.create_all(bind=engine)
    rate_limit.reset()
    yield
    Base.metadata.drop_all(bind=engine)
    shutil.rmtree(storage.STORAGE_DIR, ignore_errors=True)
    storage.STORAGE_DIR.mkdir(parents=True, exist_ok=True)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def event(db):
    return events_crud.create_event(db, {
        "slug": "ana-e-rui",
        "title": "Ana & Rui",
        "groom_name": "Rui",
        "bride_name": "Ana",
        "owner_email": "noivos@example.com",
        "venue_name": "Quinta do Lago",
    })


@pytest.fixture
def other_event(db):
    return events_crud.create_event(db, {"slug": "outro-casamento", "title": "Outro"})


@pytest.fixture
def invite(db, event):
    """Invitación para dos personas con un nombre simple y uno con acompañante."""
    return invites_crud.create_invite(db, event, {
        "label": "Família Silva",
        "max_guests": 2,
        "allow_plus_one": True,
        "guests": ["Ana Silva", "João Silva e esposa"],
    })


@pytest.fixture
def make_invite(db, event):
    def _make(max_guests: int = 1, label: str = None, guests=None, expires_in_days=None):
        inv = invites_crud.create_invite(db, event, {
            "label": label,
            "max_guests": max_guests,
            "guests": guests or [],
        })
        if expires_in_days is not None:
            inv.expires_at = utcnow() + timedelta(days=expires_in_days)
            db.commit()
        return inv
    return _make


@pytest.fixture
def owner_headers():
    return {"x-admin-key": OWNER_KEY}


@pytest.fixture
def couple_headers(event):
    return {"Authorization": f"Bearer {auth.create_access_token(event.id)}"}


@pytest.fixture
def submit(client):
    """Atajo para POST /api/rsvp."""
    def _submit(invite_id, guest_name="Ana Silva", attending=True, guests_count=1, **extra):
        body = {"invite_id": invite_id, "guest_name": guest_name, "attending": attending,
                "guests_count": guests_count, **extra}
        return client.post("/api/rsvp", json=body)
    return _submit


@pytest.fixture
def rsvps_of(db):
    """RSVPs actuales de una invitación, leídos de nuevo de la BD."""
    def _rows(invite_id):
        db.expire_all()
        return db.query(models.RSVP).filter(models.RSVP.invite_id == invite_id).all()
    return _rows
