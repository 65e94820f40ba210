# weddingsite/crud/tables_crud.py

# =================================================================================
# 🪑 CRUD de mesas y asignación de invitados
# ---------------------------------------------------------------------------------
# La ocupación de una mesa es la suma de guests_count de los RSVP que asisten y
# están sentados en ella; nunca se guarda. Reglas al asignar:
#   - solo RSVPs que asisten;
#   - mover a la mesa donde ya está → 409;
#   - ocupación + guests_count > capacidad → 409 "Mesa cheia!".
# =================================================================================

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session, selectinload

from weddingsite import models
from weddingsite.crud.errors import Conflict, NotFound


def table_status(table: models.SeatingTable) -> dict:
    current = table.occupancy
    return {
        "id": table.id,
        "name": table.name,
        "capacity": table.capacity,
        "current": current,
        "available": table.capacity - current,
        "is_full": current >= table.capacity,
        "rsvps": [r for r in table.rsvps if r.attending],
    }


def list_tables(db: Session, event_id: str) -> List[dict]:
    tables = (
        db.query(models.SeatingTable)
        .options(selectinload(models.SeatingTable.rsvps))
        .filter(models.SeatingTable.event_id == event_id)
        .order_by(models.SeatingTable.created_at.asc())
        .all()
    )
    return [table_status(t) for t in tables]


def get_table(db: Session, event_id: str, table_id: str) -> models.SeatingTable:
    table = db.get(models.SeatingTable, table_id)
    if table is None or table.event_id != event_id:
        raise NotFound("table.not_found")
    return table


def create_table(db: Session, event_id: str, name: str, capacity: Optional[int] = None) -> models.SeatingTable:
    table = models.SeatingTable(
        event_id=event_id,
        name=name.strip(),
        capacity=capacity or models.TABLE_DEFAULT_CAPACITY,
    )
    db.add(table)
    db.commit()
    db.refresh(table)
    return table


def delete_table(db: Session, table: models.SeatingTable) -> None:
    """Borra la mesa; sus RSVPs quedan sin mesa (table_id → NULL)."""
    for rsvp in list(table.rsvps):
        rsvp.table_id = None
    db.delete(table)
    db.commit()


def assign_rsvp(db: Session, event_id: str, rsvp_id: str, table_id: Optional[str]) -> models.RSVP:
    """Sienta (o levanta, con table_id=None) a un RSVP aplicando las reglas de capacidad."""
    rsvp = db.get(models.RSVP, rsvp_id)
    if rsvp is None or rsvp.event_id != event_id:
        raise NotFound("rsvp.not_found")

    if table_id is None:
        rsvp.table_id = None
        db.commit()
        db.refresh(rsvp)
        return rsvp

    if not rsvp.attending:
        raise Conflict("table.not_attending")

    table = get_table(db, event_id, table_id)
    if rsvp.table_id == table.id:
        raise Conflict("table.already_there")

    current = table.occupancy
    available = table.capacity - current
    if current + rsvp.guests_count > table.capacity:
        raise Conflict("table.full", capacity=table.capacity, available=available, needed=rsvp.guests_count)

    rsvp.table_id = table.id
    db.commit()
    db.refresh(rsvp)
    logger.info("RSVP {} → mesa '{}' ({}+{}/{})", rsvp.id, table.name, current, rsvp.guests_count, table.capacity)
    return rsvp
