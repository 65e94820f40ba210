# weddingsite/crud/messages_crud.py

# =================================================================================
# 💬 Mural de mensajes
# - Une los mensajes que llegan con el RSVP y los del mural público.
# - Más recientes primero; los ids públicos llevan el prefijo 'public-'.
# - Moderación: un mensaje de RSVP se vacía (message=NULL), uno público se borra.
# =================================================================================

from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from weddingsite import models
from weddingsite.crud.errors import NotFound
from weddingsite.crud.rsvps_crud import clear_message

PUBLIC_PREFIX = "public-"
ANONYMOUS_NAME = "Convidado"


def list_messages(db: Session, event_id: str) -> List[dict]:
    rsvp_rows = (
        db.query(models.RSVP)
        .filter(
            models.RSVP.event_id == event_id,
            models.RSVP.message.isnot(None),
            func.trim(models.RSVP.message) != "",
        )
        .all()
    )
    public_rows = db.query(models.PublicMessage).filter(models.PublicMessage.event_id == event_id).all()

    items = [
        {
            "id": r.id,
            "name": (r.guest_name or "").strip() or ANONYMOUS_NAME,
            "message": r.message,
            "created_at": r.updated_at or r.created_at,
            "type": "rsvp",
        }
        for r in rsvp_rows
    ]
    items += [
        {
            "id": f"{PUBLIC_PREFIX}{m.id}",
            "name": m.name,
            "message": m.message,
            "created_at": m.created_at,
            "type": "public",
        }
        for m in public_rows
    ]
    items.sort(key=lambda x: x["created_at"], reverse=True)
    return items


def add_public_message(db: Session, event_id: str, name: str, message: str) -> models.PublicMessage:
    row = models.PublicMessage(event_id=event_id, name=name, message=message)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def delete_message(db: Session, event_id: str, message_id: str) -> str:
    """Modera un mensaje del mural. Devuelve el tipo ('rsvp' | 'public')."""
    if message_id.startswith(PUBLIC_PREFIX):
        row = db.get(models.PublicMessage, message_id[len(PUBLIC_PREFIX):])
        if row is None or row.event_id != event_id:
            raise NotFound("message.not_found")
        db.delete(row)
        db.commit()
        return "public"
    clear_message(db, event_id, message_id)
    return "rsvp"
