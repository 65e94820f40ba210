# weddingsite/routers/owner.py
# =============================================================================
# 🛠️ Rutas del propietario de la plataforma: /api/owner/events
# - Protegidas con API Key (cabecera x-admin-key) mediante `require_owner`.
# - Listado con búsqueda y totales, alta (con tema por defecto), edición y baja.
# =============================================================================

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from weddingsite import models, schemas
from weddingsite.core.responses import domain_http_exception
from weddingsite.core.security import require_owner
from weddingsite.crud import events_crud
from weddingsite.crud.errors import DomainError
from weddingsite.db import get_db

router = APIRouter(prefix="/api/owner", tags=["owner"], dependencies=[Depends(require_owner)])


def _event_or_404(db: Session, event_id: str) -> models.Event:
    event = db.get(models.Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get("/events", response_model=schemas.OwnerEventList)
def list_events(search: Optional[str] = Query(None), db: Session = Depends(get_db)):
    data = events_crud.list_events(db, search)
    items = []
    for row in data["items"]:
        item = schemas.OwnerEventSummary.model_validate(row["event"])
        item.invites_count = row["invites_count"]
        item.rsvps_count = row["rsvps_count"]
        item.confirmed_guests = row["confirmed_guests"]
        items.append(item)
    return {"items": items, "total_events": data["total_events"], "total_rsvps": data["total_rsvps"]}


@router.post("/events", response_model=schemas.EventAdminOut, status_code=201)
def create_event(payload: schemas.EventCreate, db: Session = Depends(get_db)):
    try:
        return events_crud.create_event(db, payload.model_dump())
    except DomainError as e:
        raise domain_http_exception(e)


@router.patch("/events/{event_id}", response_model=schemas.EventAdminOut)
def update_event(event_id: str, payload: schemas.EventOwnerUpdate, db: Session = Depends(get_db)):
    event = _event_or_404(db, event_id)
    return events_crud.update_event(db, event, payload.model_dump(exclude_unset=True))


@router.delete("/events/{event_id}", status_code=204)
def delete_event(event_id: str, db: Session = Depends(get_db)):
    events_crud.delete_event(db, _event_or_404(db, event_id))
