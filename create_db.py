# create_db.py

# =================================================================================
# 🏗️ SCRIPT DE CREACIÓN DE LA BASE DE DATOS
# ---------------------------------------------------------------------------------
# Crea todas las tablas de weddingsite/models.py (desarrollo local / SQLite).
# En producción usar Alembic: `alembic upgrade head`.
# Con --demo además crea un evento de ejemplo con una invitación.
# =================================================================================

import argparse

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

from weddingsite.db import engine, Base, SessionLocal  # noqa: E402
from weddingsite import models  # noqa: E402,F401  (registra las tablas en Base.metadata)


def create_database_tables() -> None:
    """Crea todas las tablas asociadas a `Base`."""
    logger.info("Creando tablas en la base de datos...")
    Base.metadata.create_all(bind=engine)
    logger.info("✔️ Base de datos y tablas creadas correctamente.")


def seed_demo_event(slug: str = "demo") -> None:
    """Evento de prueba con tema por defecto y una invitación para dos personas."""
    from weddingsite.crud import events_crud, invites_crud

    db = SessionLocal()
    try:
        event = events_crud.get_by_slug(db, slug)
        if event is None:
            event = events_crud.create_event(db, {
                "slug": slug,
                "title": "Ana & Rui",
                "groom_name": "Rui",
                "bride_name": "Ana",
                "owner_email": "noivos@example.com",
            })
        invite = invites_crud.create_invite(db, event, {
            "label": "Família Silva",
            "max_guests": 2,
            "allow_plus_one": True,
            "guests": ["João Silva e esposa"],
        })
        logger.info("Demo lista → /{}/rsvp?token={}", event.slug, invite.token)
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Crea las tablas de la base de datos.")
    parser.add_argument("--demo", action="store_true", help="Crea también un evento de ejemplo.")
    args = parser.parse_args()
    create_database_tables()
    if args.demo:
        seed_demo_event()
