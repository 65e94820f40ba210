# weddingsite/crud/rsvps_crud.py

# =================================================================================
# 📝 CRUD de respuestas (RSVP)
# ---------------------------------------------------------------------------------
# submit_rsvp aplica el contrato del formulario público, en este orden:
#   1) campos obligatorios (invite_id, guest_name, attending) → 400
#   2) la invitación existe                                  → 404
#   3) la invitación no ha caducado                          → 410
#   4) asistiendo: guests_count coaccionado ≤ max_guests      → 400
#   5) si la invitación tiene nombres, guest_name es uno de ellos → 400
# Después: upsert por invite_id (gana la última), invitados → 'responded',
# el RSVP sale de su mesa si el nuevo número ya no cabe,
# aviso por email best-effort (un fallo nunca rompe la respuesta).
# =================================================================================

import os
import uuid
from typing import Any, List, Optional

from loguru import logger
from sqlalchemy import func, or_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session, selectinload

from weddingsite import mailer, models
from weddingsite.crud.errors import (
    GuestLimitExceeded,
    GuestNotOnInvite,
    InviteExpired,
    InviteNotFound,
    MissingField,
    NotFound,
)
from weddingsite.schemas import RSVPSubmitRequest
from weddingsite.utils.dates import utcnow
from weddingsite.utils.names import validate_guest

DEFAULT_TICKET_LABEL = "Mesa Reservada"


# ---------------------------------------------------------------------------------
# 🧮 Coacción del número de personas
# ---------------------------------------------------------------------------------
def coerce_guests_count(raw: Any) -> int:
    """Entero positivo a partir de lo que envíe el formulario; no numérico o ≤0 → 1."""
    if raw is None or isinstance(raw, bool):
        return 1
    try:
        n = int(float(str(raw).strip()))
    except (TypeError, ValueError, OverflowError):
        return 1
    return n if n > 0 else 1


def is_expired(invite: models.Invite) -> bool:
    """Caducada si expires_at existe y ya pasó (estricto: el mismo instante aún vale)."""
    return invite.expires_at is not None and invite.expires_at < utcnow()


# ---------------------------------------------------------------------------------
# 🔁 Upsert por invite_id
# ---------------------------------------------------------------------------------
def _upsert_rsvp(db: Session, values: dict) -> str:
    """
    INSERT ... ON CONFLICT (invite_id) DO UPDATE en Postgres/SQLite: la base de datos
    arbitra dos envíos simultáneos. table_id y created_at de la fila previa se conservan.
    """
    now = utcnow()
    dialect = db.get_bind().dialect.name
    update_cols = {k: v for k, v in values.items() if k != "invite_id"}
    update_cols["updated_at"] = now

    if dialect in ("postgresql", "sqlite"):
        insert_fn = pg_insert if dialect == "postgresql" else sqlite_insert
        stmt = insert_fn(models.RSVP).values(id=str(uuid.uuid4()), created_at=now, updated_at=now, **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[models.RSVP.invite_id],
            set_=update_cols,
        ).returning(models.RSVP.id)
        return db.execute(stmt).scalar_one()

    # Otros motores: select + update/insert dentro de la misma transacción.
    existing = db.query(models.RSVP).filter(models.RSVP.invite_id == values["invite_id"]).first()
    if existing:
        for k, v in update_cols.items():
            setattr(existing, k, v)
        db.flush()
        return existing.id
    rsvp = models.RSVP(**values)
    db.add(rsvp)
    db.flush()
    return rsvp.id


def _unseat_if_overflowing(db: Session, rsvp_id: str) -> None:
    """Si el nuevo guests_count ya no cabe en su mesa, el RSVP queda sin mesa."""
    rsvp = db.query(models.RSVP.table_id, models.RSVP.attending, models.RSVP.guests_count).filter(
        models.RSVP.id == rsvp_id
    ).first()
    if rsvp is None or rsvp.table_id is None or not rsvp.attending:
        return
    capacity = db.query(models.SeatingTable.capacity).filter(models.SeatingTable.id == rsvp.table_id).scalar()
    others = (
        db.query(func.coalesce(func.sum(models.RSVP.guests_count), 0))
        .filter(
            models.RSVP.table_id == rsvp.table_id,
            models.RSVP.attending.is_(True),
            models.RSVP.id != rsvp_id,
        )
        .scalar()
    ) or 0
    if capacity is not None and others + rsvp.guests_count <= capacity:
        return
    (
        db.query(models.RSVP)
        .filter(models.RSVP.id == rsvp_id)
        .update({models.RSVP.table_id: None}, synchronize_session=False)
    )
    logger.warning(
        "RSVP {} retirado de la mesa {}: {}+{} > capacidad {}",
        rsvp_id, rsvp.table_id, others, rsvp.guests_count, capacity,
    )


def _notify_owner(db: Session, invite: models.Invite, rsvp_id: str, lang: str) -> None:
    """Aviso a la pareja. Cualquier excepción se registra y se descarta."""
    try:
        event = db.get(models.Event, invite.event_id)
        to_email = (event.owner_email if event else None) or os.getenv("NOTIFY_EMAIL", "")
        if not to_email:
            logger.debug("RSVP {} sin destinatario de aviso (owner_email/NOTIFY_EMAIL vacíos).", rsvp_id)
            return
        rsvp = db.get(models.RSVP, rsvp_id)
        summary = {
            "event_title": event.title if event else None,
            "guest_name": rsvp.guest_name,
            "attending": rsvp.attending,
            "guests_count": rsvp.guests_count,
            "phone": rsvp.phone,
            "message": rsvp.message,
        }
        mailer.send_rsvp_notification_email(to_email, summary, lang)
    except Exception as e:
        logger.exception("Fallo enviando aviso de RSVP {} (se ignora): {}", rsvp_id, e)


# =================================================================================
# ✅ Envío del formulario
# =================================================================================
def submit_rsvp(db: Session, payload: RSVPSubmitRequest, lang: str = "pt") -> str:
    """Valida y guarda la respuesta de una invitación. Devuelve el id del RSVP."""
    if not payload.invite_id:
        raise MissingField("rsvp.missing_invite")
    if not payload.guest_name:
        raise MissingField("rsvp.missing_name")
    if payload.attending is None:
        raise MissingField("rsvp.missing_attending")

    invite = db.get(models.Invite, payload.invite_id)
    if invite is None:
        logger.info("RSVP rechazado: invitación inexistente {}", payload.invite_id)
        raise InviteNotFound()

    if is_expired(invite):
        logger.info("RSVP rechazado: invitación {} caducada ({})", invite.id, invite.expires_at)
        raise InviteExpired()

    if payload.attending:
        count = coerce_guests_count(payload.guests_count)
        if count > invite.max_guests:
            logger.info("RSVP rechazado: {} personas > max {} (invite={})", count, invite.max_guests, invite.id)
            raise GuestLimitExceeded(count=count, max=invite.max_guests)
    else:
        count = 0

    # Con lista de nombres, solo se acepta uno de ellos (o su nombre principal).
    if invite.guests and validate_guest(payload.guest_name, invite.guests) is None:
        logger.info("RSVP rechazado: '{}' no está en la invitación {}", payload.guest_name, invite.id)
        raise GuestNotOnInvite()

    values = {
        "invite_id": invite.id,
        "event_id": invite.event_id or payload.event_id,
        "guest_name": payload.guest_name,
        "attending": bool(payload.attending),
        "guests_count": count,
        "phone": payload.phone,
        "message": payload.message,
    }

    try:
        rsvp_id = _upsert_rsvp(db, values)
        _unseat_if_overflowing(db, rsvp_id)
        (
            db.query(models.Guest)
            .filter(models.Guest.invite_id == invite.id)
            .update({models.Guest.status: models.GuestStatusEnum.responded}, synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expire_all()
    logger.info(
        "RSVP guardado | rsvp={} | invite={} | attending={} | guests={}",
        rsvp_id, invite.id, values["attending"], count,
    )

    _notify_owner(db, invite, rsvp_id, lang)
    return rsvp_id


# =================================================================================
# 🔎 Consultas
# =================================================================================
def get_rsvp(db: Session, rsvp_id: str) -> Optional[models.RSVP]:
    return db.get(models.RSVP, rsvp_id)


def get_by_invite(db: Session, invite_id: str) -> Optional[models.RSVP]:
    return db.query(models.RSVP).filter(models.RSVP.invite_id == invite_id).first()


def list_rsvps(db: Session, event_id: str, search: Optional[str] = None, status: str = "all") -> List[models.RSVP]:
    """RSVPs del evento (más recientes primero) filtrados por nombre/label y estado."""
    q = (
        db.query(models.RSVP)
        .join(models.Invite, models.Invite.id == models.RSVP.invite_id)
        .options(selectinload(models.RSVP.invite), selectinload(models.RSVP.table))
        .filter(models.RSVP.event_id == event_id)
    )
    if search and search.strip():
        like = f"%{search.strip().lower()}%"
        q = q.filter(or_(
            func.lower(models.RSVP.guest_name).like(like),
            func.lower(func.coalesce(models.Invite.label, "")).like(like),
        ))
    if status == "attending":
        q = q.filter(models.RSVP.attending.is_(True))
    elif status == "declined":
        q = q.filter(models.RSVP.attending.is_(False))
    return q.order_by(models.RSVP.created_at.desc()).all()


def get_stats(db: Session, event_id: str) -> dict:
    """KPIs del panel: invitaciones, cupo listado, confirmados, rechazos y pendientes."""
    total_invites = db.query(func.count(models.Invite.id)).filter(models.Invite.event_id == event_id).scalar() or 0
    total_listed = (
        db.query(func.coalesce(func.sum(models.Invite.max_guests), 0))
        .filter(models.Invite.event_id == event_id)
        .scalar()
    ) or 0
    confirmed = (
        db.query(func.coalesce(func.sum(models.RSVP.guests_count), 0))
        .filter(models.RSVP.event_id == event_id, models.RSVP.attending.is_(True))
        .scalar()
    ) or 0
    declined = (
        db.query(func.count(models.RSVP.id))
        .filter(models.RSVP.event_id == event_id, models.RSVP.attending.is_(False))
        .scalar()
    ) or 0
    answered = db.query(func.count(models.RSVP.id)).filter(models.RSVP.event_id == event_id).scalar() or 0
    return {
        "total_invites": int(total_invites),
        "total_guests_listed": int(total_listed),
        "confirmed_guests": int(confirmed),
        "declined": int(declined),
        "pending_invites": max(int(total_invites) - int(answered), 0),
    }


def get_ticket(db: Session, rsvp_id: str) -> dict:
    """Datos del ticket digital de una respuesta."""
    rsvp = db.get(models.RSVP, rsvp_id)
    if rsvp is None:
        raise NotFound("rsvp.not_found")
    event = db.get(models.Event, rsvp.event_id)
    return {
        "rsvp_id": rsvp.id,
        "guest_name": rsvp.guest_name,
        "attending": rsvp.attending,
        "guests_count": rsvp.guests_count,
        "invite_label": (rsvp.invite.label if rsvp.invite and rsvp.invite.label else DEFAULT_TICKET_LABEL),
        "table_name": rsvp.table.name if rsvp.table else None,
        "event_title": event.title,
        "event_slug": event.slug,
        "event_date": event.date,
        "venue_name": event.venue_name,
        "venue_address": event.venue_address,
    }


# ---------------------------------------------------------------------------------
# 💬 Moderación de mensajes que llegan dentro del RSVP
# ---------------------------------------------------------------------------------
def clear_message(db: Session, event_id: str, rsvp_id: str) -> None:
    rsvp = db.get(models.RSVP, rsvp_id)
    if rsvp is None or rsvp.event_id != event_id:
        raise NotFound("rsvp.not_found")
    rsvp.message = None
    db.commit()


def delete_rsvp(db: Session, event_id: str, rsvp_id: str) -> None:
    """Borra la respuesta y devuelve los nombres de su invitación a 'pending'."""
    rsvp = db.get(models.RSVP, rsvp_id)
    if rsvp is None or rsvp.event_id != event_id:
        raise NotFound("rsvp.not_found")
    (
        db.query(models.Guest)
        .filter(models.Guest.invite_id == rsvp.invite_id)
        .update({models.Guest.status: models.GuestStatusEnum.pending}, synchronize_session=False)
    )
    db.delete(rsvp)
    db.commit()
