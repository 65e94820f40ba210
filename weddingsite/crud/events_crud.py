# weddingsite/crud/events_crud.py

# =================================================================================
# 💍 CRUD de eventos (tenants), tema visual y quiz
# - Resolución por slug para el sitio público.
# - Alta/edición/baja desde el panel del propietario.
# - Contenido editable por la pareja (PATCH parcial, tema, preguntas del quiz).
# =================================================================================

from typing import List, Optional

from loguru import logger
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from weddingsite import models, storage
from weddingsite.crud.errors import Conflict, NotFound


# ---------------------------------------------------------------------------------
# 🔎 Lectura
# ---------------------------------------------------------------------------------
def get_by_slug(db: Session, slug: str) -> Optional[models.Event]:
    if not slug:
        return None
    return db.query(models.Event).filter(models.Event.slug == slug.strip().lower()).first()


def get_event_or_404(db: Session, slug: str) -> models.Event:
    event = get_by_slug(db, slug)
    if event is None:
        raise NotFound("event.not_found", slug=slug)
    return event


def latest_theme(db: Session, event_id: str) -> Optional[models.ThemeConfig]:
    """Tema más reciente del evento (la relación es lógicamente 1-a-1)."""
    return (
        db.query(models.ThemeConfig)
        .filter(models.ThemeConfig.event_id == event_id)
        .order_by(models.ThemeConfig.created_at.desc())
        .first()
    )


def list_quiz(db: Session, event_id: str) -> List[models.QuizQuestion]:
    return (
        db.query(models.QuizQuestion)
        .filter(models.QuizQuestion.event_id == event_id)
        .order_by(models.QuizQuestion.position.asc(), models.QuizQuestion.created_at.asc())
        .all()
    )


def get_context(db: Session, slug: str) -> dict:
    """
    Contexto completo del tenant: {event, theme, quiz}.
    Un fallo leyendo tema o quiz no oculta el evento (theme=None, quiz=[]).
    """
    event = get_event_or_404(db, slug)
    try:
        theme = latest_theme(db, event.id)
    except Exception as e:
        logger.warning("No se pudo cargar el tema de '{}': {}", event.slug, e)
        db.rollback()
        theme = None
    try:
        quiz = list_quiz(db, event.id)
    except Exception as e:
        logger.warning("No se pudo cargar el quiz de '{}': {}", event.slug, e)
        db.rollback()
        quiz = []
    return {"event": event, "theme": theme, "quiz": quiz}


# ---------------------------------------------------------------------------------
# 🛠️ Panel del propietario
# ---------------------------------------------------------------------------------
def list_events(db: Session, search: Optional[str] = None) -> dict:
    """Eventos (más recientes primero) con contadores y totales globales."""
    q = db.query(models.Event)
    if search and search.strip():
        like = f"%{search.strip().lower()}%"
        q = q.filter(or_(func.lower(models.Event.title).like(like), models.Event.slug.like(like)))
    events = q.order_by(models.Event.created_at.desc()).all()

    invites_by_event = dict(
        db.query(models.Invite.event_id, func.count(models.Invite.id)).group_by(models.Invite.event_id).all()
    )
    rsvps_by_event = dict(
        db.query(models.RSVP.event_id, func.count(models.RSVP.id)).group_by(models.RSVP.event_id).all()
    )
    confirmed_by_event = dict(
        db.query(models.RSVP.event_id, func.coalesce(func.sum(models.RSVP.guests_count), 0))
        .filter(models.RSVP.attending.is_(True))
        .group_by(models.RSVP.event_id)
        .all()
    )

    items = []
    for ev in events:
        items.append({
            "event": ev,
            "invites_count": int(invites_by_event.get(ev.id, 0)),
            "rsvps_count": int(rsvps_by_event.get(ev.id, 0)),
            "confirmed_guests": int(confirmed_by_event.get(ev.id, 0)),
        })
    return {
        "items": items,
        "total_events": len(events),
        "total_rsvps": int(sum(r["rsvps_count"] for r in items)),
    }


def create_event(db: Session, data: dict) -> models.Event:
    """Crea el evento y su tema por defecto. Slug duplicado → Conflict (409)."""
    slug = (data.get("slug") or "").strip().lower()
    if get_by_slug(db, slug):
        raise Conflict("event.slug_taken", slug=slug)

    event = models.Event(**{**data, "slug": slug})
    db.add(event)
    try:
        db.flush()
        db.add(models.ThemeConfig(
            event_id=event.id,
            template="classic",
            colors=dict(models.DEFAULT_THEME_COLORS),
            fonts=dict(models.DEFAULT_THEME_FONTS),
            wedding_date=event.date,
        ))
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("event.slug_taken", slug=slug)
    db.refresh(event)
    logger.info("Evento creado | slug={} | id={}", event.slug, event.id)
    return event


def update_event(db: Session, event: models.Event, changes: dict) -> models.Event:
    """Aplica solo los campos enviados (PATCH)."""
    for field, value in changes.items():
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    logger.info("Evento actualizado | slug={} | campos={}", event.slug, sorted(changes.keys()))
    return event


def delete_event(db: Session, event: models.Event) -> None:
    """Borra el evento y todo lo que cuelga de él (incluidos archivos subidos)."""
    slug, event_id = event.slug, event.id
    db.delete(event)
    db.commit()
    removed = storage.delete_prefix(storage.BUCKET_PHOTOS, slug) + storage.delete_prefix(storage.BUCKET_TICKETS, slug)
    logger.info("Evento borrado | slug={} | id={} | archivos={}", slug, event_id, removed)


# ---------------------------------------------------------------------------------
# 🎨 Tema y ❓ quiz (pareja)
# ---------------------------------------------------------------------------------
def replace_theme(db: Session, event: models.Event, data: dict) -> models.ThemeConfig:
    """Sustituye el tema: se borran los anteriores y queda una sola fila."""
    db.query(models.ThemeConfig).filter(models.ThemeConfig.event_id == event.id).delete(synchronize_session=False)
    theme = models.ThemeConfig(
        event_id=event.id,
        template=data.get("template") or "classic",
        colors=data.get("colors") or dict(models.DEFAULT_THEME_COLORS),
        fonts=data.get("fonts") or dict(models.DEFAULT_THEME_FONTS),
        wedding_date=data.get("wedding_date") or event.date,
    )
    db.add(theme)
    db.commit()
    db.refresh(theme)
    return theme


def add_quiz_question(db: Session, event: models.Event, data: dict) -> models.QuizQuestion:
    position = data.get("position")
    if position is None:
        last = (
            db.query(func.max(models.QuizQuestion.position))
            .filter(models.QuizQuestion.event_id == event.id)
            .scalar()
        )
        position = (last + 1) if last is not None else 0
    question = models.QuizQuestion(
        event_id=event.id,
        question=data["question"],
        options=list(data["options"]),
        correct_answer=data.get("correct_answer", 0),
        position=position,
    )
    db.add(question)
    db.commit()
    db.refresh(question)
    return question


def delete_quiz_question(db: Session, event: models.Event, question_id: str) -> None:
    question = db.get(models.QuizQuestion, question_id)
    if question is None or question.event_id != event.id:
        raise NotFound("quiz.not_found")
    db.delete(question)
    db.commit()
