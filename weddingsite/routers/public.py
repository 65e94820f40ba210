# weddingsite/routers/public.py

# =================================================================================
# 🌐 Router público (sitio del invitado, sin autenticación)
# ---------------------------------------------------------------------------------
# - Contexto del tenant por slug (evento + tema + quiz).
# - Validación del token de invitación y autocompletado de nombres.
# - Envío del RSVP (contrato NotFound → Expired → LimitExceeded).
# - Ticket digital, mural de mensajes y photo booth.
# Errores siempre como {"error": "<mensaje en el idioma del llamante>"}.
# =================================================================================

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from weddingsite import schemas, storage
from weddingsite.core.responses import domain_error_json, error_json, request_lang
from weddingsite.crud import events_crud, invites_crud, messages_crud, rsvps_crud
from weddingsite.crud.errors import DomainError
from weddingsite.db import get_db
from weddingsite.rate_limit import client_ip, get_limits_from_env, is_allowed
from weddingsite.utils.i18n import translate

router = APIRouter(prefix="/api", tags=["public"])

# --- Límites por IP (ventana deslizante en memoria) ---
RSVP_MAX, RSVP_WINDOW = get_limits_from_env("RSVP_RL", default_max=10, default_window=60)
MESSAGES_MAX, MESSAGES_WINDOW = get_limits_from_env("MESSAGES_RL", default_max=5, default_window=60)
UPLOAD_MAX, UPLOAD_WINDOW = get_limits_from_env("UPLOAD_RL", default_max=10, default_window=300)


def _rate_limited(request: Request, scope: str, max_req: int, window: int) -> bool:
    return not is_allowed(f"{scope}:{client_ip(request)}", max_req, window)


def _too_many(lang: str, window: int):
    resp = error_json(429, "rate.limited", lang)
    resp.headers["Retry-After"] = str(window)
    return resp


async def _read_image(upload: UploadFile) -> tuple[str, bytes]:
    """Valida extensión y tamaño de la imagen subida; lanza StorageError si no vale."""
    ext = storage.resolve_extension(upload.filename, upload.content_type)
    content = await upload.read()
    if len(content) > storage.max_upload_bytes():
        raise storage.StorageError("upload.too_large", mb=storage.MAX_UPLOAD_MB)
    return ext, content


# =================================================================================
# 💍 GET /api/events/{slug}: contexto del tenant
# =================================================================================
@router.get("/events/{slug}", response_model=schemas.EventContextOut)
def get_event_context(slug: str, request: Request, db: Session = Depends(get_db)):
    lang = request_lang(request)
    try:
        return events_crud.get_context(db, slug)
    except DomainError as e:
        return domain_error_json(e, lang)


# =================================================================================
# ✉️ GET /api/events/{slug}/invite?token=...: invitación del formulario
# =================================================================================
@router.get("/events/{slug}/invite", response_model=schemas.PublicInviteOut)
def get_invite_by_token(
    slug: str,
    request: Request,
    token: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    lang = request_lang(request)
    try:
        event = events_crud.get_event_or_404(db, slug)
        invite = invites_crud.validate_token(db, event, token)
    except DomainError as e:
        return domain_error_json(e, lang)

    return schemas.PublicInviteOut(
        id=invite.id,
        token=invite.token,
        label=invite.label,
        max_guests=invite.max_guests,
        allow_plus_one=invite.allow_plus_one,
        expires_at=invite.expires_at,
        guests=invites_crud.guest_candidates(invite.guests),
        rsvp=schemas.RSVPOut.model_validate(invite.rsvp) if invite.rsvp else None,
    )


# =================================================================================
# 🔎 GET /api/events/{slug}/guests/search?q=...: autocompletado de nombres
# =================================================================================
@router.get("/events/{slug}/guests/search", response_model=List[schemas.GuestCandidate])
def search_guests(
    slug: str,
    request: Request,
    q: str = Query(""),
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    lang = request_lang(request)
    try:
        event = events_crud.get_event_or_404(db, slug)
        return invites_crud.search_event_guests(db, event, q, token)
    except DomainError as e:
        return domain_error_json(e, lang)


# =================================================================================
# 📝 POST /api/rsvp: envío del formulario
# =================================================================================
@router.post("/rsvp", response_model=schemas.RSVPSubmitResponse)
def submit_rsvp(payload: schemas.RSVPSubmitRequest, request: Request, db: Session = Depends(get_db)):
    lang = request_lang(request, payload.lang)

    if _rate_limited(request, "rsvp", RSVP_MAX, RSVP_WINDOW):
        return _too_many(lang, RSVP_WINDOW)

    try:
        rsvp_id = rsvps_crud.submit_rsvp(db, payload, lang)
    except DomainError as e:
        return domain_error_json(e, lang)
    except SQLAlchemyError as e:
        logger.exception("Error de BD guardando RSVP (invite={}): {}", payload.invite_id, e)
        return error_json(500, "generic.retry", lang)

    return schemas.RSVPSubmitResponse(
        success=True,
        message=translate("rsvp.success", lang),
        rsvpId=rsvp_id,
    )


# =================================================================================
# 🎟️ Ticket digital
# =================================================================================
@router.get("/rsvps/{rsvp_id}/ticket", response_model=schemas.TicketOut)
def get_ticket(rsvp_id: str, request: Request, db: Session = Depends(get_db)):
    lang = request_lang(request)
    try:
        return rsvps_crud.get_ticket(db, rsvp_id)
    except DomainError as e:
        return domain_error_json(e, lang)


@router.post("/rsvps/{rsvp_id}/ticket-image", response_model=schemas.StoredFileOut)
async def upload_ticket_image(
    rsvp_id: str,
    request: Request,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """Guarda la imagen del ticket en tickets/<slug>/<rsvp_id>.<ext> (sobrescribe)."""
    lang = request_lang(request)
    if _rate_limited(request, "upload", UPLOAD_MAX, UPLOAD_WINDOW):
        return _too_many(lang, UPLOAD_WINDOW)

    try:
        ticket = rsvps_crud.get_ticket(db, rsvp_id)
        ext, content = await _read_image(file)
        rel_path = f"{ticket['event_slug']}/{rsvp_id}{ext}"
        url = storage.save_bytes(storage.BUCKET_TICKETS, rel_path, content)
    except DomainError as e:
        return domain_error_json(e, lang)
    except storage.StorageError as e:
        return error_json(400, e.message_key, lang, **e.params)
    except OSError as e:
        logger.exception("Error guardando ticket {}: {}", rsvp_id, e)
        return error_json(500, "generic.retry", lang)

    return schemas.StoredFileOut(path=rel_path, url=url)


# =================================================================================
# 💬 Mural de mensajes
# =================================================================================
@router.get("/events/{slug}/messages", response_model=List[schemas.WallMessage])
def list_messages(slug: str, request: Request, db: Session = Depends(get_db)):
    lang = request_lang(request)
    try:
        event = events_crud.get_event_or_404(db, slug)
    except DomainError as e:
        return domain_error_json(e, lang)
    return messages_crud.list_messages(db, event.id)


@router.post("/events/{slug}/messages", status_code=201)
def post_message(slug: str, payload: schemas.PublicMessageIn, request: Request, db: Session = Depends(get_db)):
    lang = request_lang(request, payload.lang)
    try:
        event = events_crud.get_event_or_404(db, slug)
    except DomainError as e:
        return domain_error_json(e, lang)

    if not payload.name or not payload.message:
        return error_json(400, "messages.missing_fields", lang)

    if _rate_limited(request, f"messages:{event.id}", MESSAGES_MAX, MESSAGES_WINDOW):
        return _too_many(lang, MESSAGES_WINDOW)

    try:
        row = messages_crud.add_public_message(db, event.id, payload.name, payload.message)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error guardando mensaje del mural ({}): {}", event.slug, e)
        return error_json(500, "generic.retry", lang)

    return {
        "success": True,
        "message": translate("messages.sent", lang),
        "id": f"{messages_crud.PUBLIC_PREFIX}{row.id}",
    }


# =================================================================================
# 📸 Photo booth
# =================================================================================
@router.get("/events/{slug}/photos", response_model=List[schemas.StoredFileOut])
def list_photos(slug: str, request: Request, db: Session = Depends(get_db)):
    lang = request_lang(request)
    try:
        event = events_crud.get_event_or_404(db, slug)
    except DomainError as e:
        return domain_error_json(e, lang)
    return storage.list_files(storage.BUCKET_PHOTOS, event.slug)


@router.post("/events/{slug}/photos", response_model=schemas.StoredFileOut, status_code=201)
async def upload_photo(
    slug: str,
    request: Request,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    lang = request_lang(request)
    try:
        event = events_crud.get_event_or_404(db, slug)
    except DomainError as e:
        return domain_error_json(e, lang)

    if _rate_limited(request, "upload", UPLOAD_MAX, UPLOAD_WINDOW):
        return _too_many(lang, UPLOAD_WINDOW)

    try:
        ext, content = await _read_image(file)
        rel_path = f"{event.slug}/{uuid.uuid4()}{ext}"
        url = storage.save_bytes(storage.BUCKET_PHOTOS, rel_path, content)
    except storage.StorageError as e:
        return error_json(400, e.message_key, lang, **e.params)
    except OSError as e:
        logger.exception("Error guardando foto ({}): {}", event.slug, e)
        return error_json(500, "generic.retry", lang)

    return schemas.StoredFileOut(path=rel_path, url=url)
