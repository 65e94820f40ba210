# weddingsite/routers/admin.py
# =============================================================================
# 👰🤵 Rutas del panel de la pareja: /api/admin/events/{event_id}/...
# - Acceso: Bearer JWT del propio evento (magic link) o x-admin-key del propietario.
# - Invitaciones (CRUD, enlace para compartir, importación en lote).
# - Respuestas (búsqueda/filtro, KPIs), mesas, moderación del mural.
# - Contenido del evento, tema, quiz y tickets guardados.
# =============================================================================

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from weddingsite import models, schemas, storage
from weddingsite.core.responses import domain_http_exception
from weddingsite.core.security import get_admin_event
from weddingsite.crud import events_crud, invites_crud, messages_crud, rsvps_crud, tables_crud
from weddingsite.crud.errors import DomainError
from weddingsite.db import get_db
from weddingsite.utils.i18n import translate

router = APIRouter(prefix="/api/admin/events/{event_id}", tags=["admin"])


# =============================================================================
# 📋 Evento
# =============================================================================
@router.get("", response_model=schemas.EventAdminOut)
def get_event(event: models.Event = Depends(get_admin_event)):
    return event


@router.patch("", response_model=schemas.EventAdminOut)
def update_event_content(
    payload: schemas.EventContentUpdate,
    event: models.Event = Depends(get_admin_event),
    db: Session = Depends(get_db),
):
    return events_crud.update_event(db, event, payload.model_dump(exclude_unset=True))


@router.put("/theme", response_model=schemas.ThemeOut)
def replace_theme(
    payload: schemas.ThemeIn,
    event: models.Event = Depends(get_admin_event),
    db: Session = Depends(get_db),
):
    return events_crud.replace_theme(db, event, payload.model_dump())


@router.get("/quiz", response_model=List[schemas.QuizQuestionOut])
def list_quiz(event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    return events_crud.list_quiz(db, event.id)


@router.post("/quiz", response_model=schemas.QuizQuestionOut, status_code=201)
def add_quiz_question(
    payload: schemas.QuizQuestionIn,
    event: models.Event = Depends(get_admin_event),
    db: Session = Depends(get_db),
):
    return events_crud.add_quiz_question(db, event, payload.model_dump())


@router.delete("/quiz/{question_id}", status_code=204)
def delete_quiz_question(question_id: str, event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    try:
        events_crud.delete_quiz_question(db, event, question_id)
    except DomainError as e:
        raise domain_http_exception(e)


# =============================================================================
# ✉️ Invitaciones
# =============================================================================
@router.get("/invites", response_model=List[schemas.InviteOut])
def list_invites(event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    return invites_crud.list_invites(db, event.id)


@router.post("/invites", response_model=schemas.InviteOut, status_code=201)
def create_invite(
    payload: schemas.InviteCreate,
    event: models.Event = Depends(get_admin_event),
    db: Session = Depends(get_db),
):
    return invites_crud.create_invite(db, event, payload.model_dump())


@router.patch("/invites/{invite_id}", response_model=schemas.InviteOut)
def update_invite(
    invite_id: str,
    payload: schemas.InviteUpdate,
    event: models.Event = Depends(get_admin_event),
    db: Session = Depends(get_db),
):
    try:
        invite = invites_crud.get_invite(db, event.id, invite_id)
    except DomainError as e:
        raise domain_http_exception(e)
    return invites_crud.update_invite(db, invite, payload.model_dump(exclude_unset=True))


@router.delete("/invites/{invite_id}", status_code=204)
def delete_invite(invite_id: str, event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    try:
        invite = invites_crud.get_invite(db, event.id, invite_id)
    except DomainError as e:
        raise domain_http_exception(e)
    invites_crud.delete_invite(db, invite)


@router.get("/invites/{invite_id}/share", response_model=schemas.ShareLinkOut)
def share_invite(invite_id: str, event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    try:
        invite = invites_crud.get_invite(db, event.id, invite_id)
    except DomainError as e:
        raise domain_http_exception(e)
    return invites_crud.share_link(event, invite)


@router.post("/invites/import", response_model=schemas.ImportInvitesResult)
def import_invites(
    payload: schemas.ImportInvitesPayload,
    event: models.Event = Depends(get_admin_event),
    db: Session = Depends(get_db),
):
    """Importación en lote; nunca aborta el lote por un error de fila (se acumulan en `errors`)."""
    return invites_crud.import_invites(db, event, payload.items)


# =============================================================================
# 📝 Respuestas
# =============================================================================
@router.get("/rsvps", response_model=List[schemas.RSVPOut])
def list_rsvps(
    search: Optional[str] = Query(None),
    status: schemas.StatusFilterLiteral = Query("all"),
    event: models.Event = Depends(get_admin_event),
    db: Session = Depends(get_db),
):
    return rsvps_crud.list_rsvps(db, event.id, search=search, status=status)


@router.get("/stats", response_model=schemas.RSVPStats)
def get_stats(event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    return rsvps_crud.get_stats(db, event.id)


@router.delete("/rsvps/{rsvp_id}", status_code=204)
def delete_rsvp(rsvp_id: str, event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    try:
        rsvps_crud.delete_rsvp(db, event.id, rsvp_id)
    except DomainError as e:
        raise domain_http_exception(e)


# =============================================================================
# 🪑 Mesas
# =============================================================================
@router.get("/tables", response_model=List[schemas.TableOut])
def list_tables(event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    return tables_crud.list_tables(db, event.id)


@router.post("/tables", response_model=schemas.TableOut, status_code=201)
def create_table(
    payload: schemas.TableIn,
    event: models.Event = Depends(get_admin_event),
    db: Session = Depends(get_db),
):
    table = tables_crud.create_table(db, event.id, payload.name, payload.capacity)
    return tables_crud.table_status(table)


@router.delete("/tables/{table_id}", status_code=204)
def delete_table(table_id: str, event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    try:
        table = tables_crud.get_table(db, event.id, table_id)
    except DomainError as e:
        raise domain_http_exception(e)
    tables_crud.delete_table(db, table)


@router.post("/tables/assign", response_model=schemas.RSVPOut)
def assign_table(
    payload: schemas.TableAssignRequest,
    event: models.Event = Depends(get_admin_event),
    db: Session = Depends(get_db),
):
    try:
        return tables_crud.assign_rsvp(db, event.id, payload.rsvp_id, payload.table_id)
    except DomainError as e:
        raise domain_http_exception(e)


# =============================================================================
# 💬 Moderación del mural
# =============================================================================
@router.get("/messages", response_model=List[schemas.WallMessage])
def list_messages(event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    return messages_crud.list_messages(db, event.id)


@router.delete("/messages/{message_id}")
def delete_message(message_id: str, event: models.Event = Depends(get_admin_event), db: Session = Depends(get_db)):
    try:
        kind = messages_crud.delete_message(db, event.id, message_id)
    except DomainError as e:
        raise domain_http_exception(e)
    return {"ok": True, "type": kind}


# =============================================================================
# 🎟️ Tickets guardados
# =============================================================================
@router.get("/tickets", response_model=List[schemas.StoredFileOut])
def list_tickets(event: models.Event = Depends(get_admin_event)):
    return storage.list_files(storage.BUCKET_TICKETS, event.slug)


@router.delete("/tickets/{filename}", status_code=204)
def delete_ticket(filename: str, event: models.Event = Depends(get_admin_event)):
    try:
        removed = storage.delete_file(storage.BUCKET_TICKETS, f"{event.slug}/{filename}")
    except storage.StorageError:
        removed = False
    if not removed:
        raise HTTPException(status_code=404, detail=translate("ticket.not_found", "pt"))
