# weddingsite/crud/invites_crud.py

# =================================================================================
# ✉️ CRUD de invitaciones y de sus nombres sugeridos (Guest)
# - Token compartible de 8 caracteres (A-Z0-9), único, caduca a los N días.
# - Sincronización de nombres al editar (borra los quitados, inserta los nuevos).
# - Enlace para compartir + texto de WhatsApp.
# - Importación en lote: los errores por fila se acumulan, nunca abortan el lote.
# - Validación pública del token (404 desconocido / 410 caducado).
# =================================================================================

import os
import secrets
import string
from datetime import timedelta
from typing import List, Optional
from urllib.parse import quote

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.orm import Session, selectinload

from weddingsite import models
from weddingsite.crud.errors import InviteExpired, InviteNotFound, NotFound
from weddingsite.crud.rsvps_crud import is_expired
from weddingsite.schemas import ImportInviteIn
from weddingsite.utils.dates import utcnow
from weddingsite.utils.names import parse_companion_name, search_guests

TOKEN_LENGTH = 8
TOKEN_ALPHABET = string.ascii_uppercase + string.digits
INVITE_EXPIRY_DAYS = int(os.getenv("INVITE_EXPIRY_DAYS", "90"))
PUBLIC_SITE_URL = os.getenv("PUBLIC_SITE_URL", "http://localhost:8501").rstrip("/")


# ---------------------------------------------------------------------------------
# 🔑 Token
# ---------------------------------------------------------------------------------
def _random_token() -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def generate_unique_token(db: Session, max_attempts: int = 20) -> str:
    """Genera un token que no exista aún en la tabla invites."""
    for _ in range(max_attempts):
        token = _random_token()
        if not db.query(models.Invite.id).filter(models.Invite.token == token).first():
            return token
    raise RuntimeError("No se pudo generar un token de invitación único.")


def normalize_token(token: Optional[str]) -> str:
    return (token or "").strip().upper()


# ---------------------------------------------------------------------------------
# 🔎 Lectura
# ---------------------------------------------------------------------------------
def list_invites(db: Session, event_id: str) -> List[models.Invite]:
    return (
        db.query(models.Invite)
        .options(selectinload(models.Invite.guests), selectinload(models.Invite.rsvp))
        .filter(models.Invite.event_id == event_id)
        .order_by(models.Invite.created_at.desc())
        .all()
    )


def get_invite(db: Session, event_id: str, invite_id: str) -> models.Invite:
    invite = db.get(models.Invite, invite_id)
    if invite is None or invite.event_id != event_id:
        raise NotFound("invite.not_found")
    return invite


def get_by_token(db: Session, event_id: str, token: str) -> Optional[models.Invite]:
    return (
        db.query(models.Invite)
        .filter(models.Invite.event_id == event_id, models.Invite.token == normalize_token(token))
        .first()
    )


def validate_token(db: Session, event: models.Event, token: str) -> models.Invite:
    """Invitación válida para el formulario; InviteNotFound (404) o InviteExpired (410)."""
    invite = get_by_token(db, event.id, token) if token else None
    if invite is None:
        raise InviteNotFound()
    if is_expired(invite):
        raise InviteExpired()
    return invite


def guest_candidates(guests) -> List[dict]:
    """Nombres de la invitación con la separación 'principal + acompañante'."""
    out = []
    for g in guests:
        parsed = parse_companion_name(g.name)
        out.append({
            "id": g.id,
            "name": g.name,
            "principal_name": parsed.principal_name,
            "companion_allowed": parsed.companion_allowed,
            "invite_id": g.invite_id,
        })
    return out


def search_event_guests(db: Session, event: models.Event, term: str, token: Optional[str] = None) -> List[dict]:
    """Autocompletado: nombres del evento (o de una invitación si llega token)."""
    q = db.query(models.Guest).filter(models.Guest.event_id == event.id)
    if token:
        invite = validate_token(db, event, token)
        q = q.filter(models.Guest.invite_id == invite.id)
    return guest_candidates(search_guests(term, q.order_by(models.Guest.name.asc()).all()))


# ---------------------------------------------------------------------------------
# ✍️ Escritura
# ---------------------------------------------------------------------------------
def _add_guests(db: Session, invite: models.Invite, names: List[str]) -> None:
    for name in names:
        db.add(models.Guest(
            event_id=invite.event_id,
            invite_id=invite.id,
            name=name,
            type=models.GuestTypeEnum.principal,
        ))


def create_invite(db: Session, event: models.Event, data: dict) -> models.Invite:
    """Crea la invitación con token nuevo y expiración a INVITE_EXPIRY_DAYS."""
    invite = models.Invite(
        event_id=event.id,
        token=generate_unique_token(db),
        label=data.get("label"),
        max_guests=data.get("max_guests") or 1,
        allow_plus_one=bool(data.get("allow_plus_one")),
        expires_at=utcnow() + timedelta(days=INVITE_EXPIRY_DAYS),
    )
    db.add(invite)
    db.flush()
    _add_guests(db, invite, data.get("guests") or [])
    db.commit()
    db.refresh(invite)
    logger.info("Invitación creada | event={} | token={} | max={}", event.slug, invite.token, invite.max_guests)
    return invite


def sync_guests(db: Session, invite: models.Invite, names: List[str]) -> None:
    """Deja en la invitación exactamente los nombres dados (conserva los que siguen)."""
    wanted = list(names)
    current = {g.name: g for g in invite.guests}
    for name, guest in current.items():
        if name not in wanted:
            db.delete(guest)
    _add_guests(db, invite, [n for n in wanted if n not in current])


def update_invite(db: Session, invite: models.Invite, changes: dict) -> models.Invite:
    names = changes.pop("guests", None)
    for field, value in changes.items():
        if value is not None or field == "label":
            setattr(invite, field, value)
    if names is not None:
        sync_guests(db, invite, names)
    db.commit()
    db.refresh(invite)
    return invite


def delete_invite(db: Session, invite: models.Invite) -> None:
    token = invite.token
    db.delete(invite)
    db.commit()
    logger.info("Invitación borrada | token={}", token)


def share_link(event: models.Event, invite: models.Invite) -> dict:
    """URL del formulario con token + mensaje y enlace de WhatsApp."""
    url = f"{PUBLIC_SITE_URL}/{event.slug}/rsvp?token={invite.token}"
    names = " & ".join(g.name for g in invite.guests) if invite.guests else (invite.label or "Convidado")
    text = (
        f"Olá {names}! 💕\n\n"
        "Preparamos com muito carinho um convite especial para o nosso casamento.\n\n"
        "👉 Para acessar o convite e confirmar sua presença, é só clicar no link abaixo:\n"
        f"{url}\n\n"
        "Ficaremos muito felizes com a sua presença! 💖✨"
    )
    return {
        "url": url,
        "whatsapp_text": text,
        "whatsapp_url": f"https://api.whatsapp.com/send?text={quote(text)}",
    }


def import_invites(db: Session, event: models.Event, rows: List[dict]) -> dict:
    """Alta en lote. Cada fila se valida por separado; las inválidas se reportan."""
    created, skipped, errors, tokens = 0, 0, [], []
    existing_labels = {
        (lbl or "").strip().lower()
        for (lbl,) in db.query(models.Invite.label).filter(models.Invite.event_id == event.id).all()
        if lbl
    }

    for idx, raw in enumerate(rows, start=1):
        try:
            item = ImportInviteIn.model_validate(raw)
        except ValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            errors.append(f"Fila {idx}: {first.get('msg', 'inválida')}")
            continue

        if item.label and item.label.lower() in existing_labels:
            skipped += 1
            continue

        try:
            invite = create_invite(db, event, item.model_dump())
            tokens.append(invite.token)
            if item.label:
                existing_labels.add(item.label.lower())
            created += 1
        except Exception as e:
            db.rollback()
            logger.exception("Importación: fila {} falló: {}", idx, e)
            errors.append(f"Fila {idx}: {e}")

    logger.info("Importación de invitaciones | event={} | creadas={} | omitidas={} | errores={}",
                event.slug, created, skipped, len(errors))
    return {"created": created, "skipped": skipped, "errors": errors, "tokens": tokens}
