from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import delete, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Entry, entry_employees
from ..schemas.entries import EntryCreate, EntryResponse
from ..services.errors import store_failure


router = APIRouter(prefix="/api/entries", tags=["entries"])

logger = structlog.get_logger(__name__)


def _link_employees(db: Session, entry_id: int, names: List[str]) -> None:
    if names:
        db.execute(
            insert(entry_employees),
            [{"entry_id": entry_id, "employee_name": name} for name in names],
        )


def _apply(entry: Entry, payload: EntryCreate) -> None:
    entry.date = payload.date
    entry.client = payload.client
    entry.property_address = payload.property_address
    entry.service = payload.service
    entry.time_in = payload.time_in
    entry.time_out = payload.time_out
    entry.total_hours = payload.total_hours


@router.post("", status_code=201, response_model=EntryResponse)
def create_entry(payload: EntryCreate, db: Session = Depends(get_db)):
    try:
        entry = Entry()
        _apply(entry, payload)
        db.add(entry)
        db.flush()  # assigns entry.id
        entry_id = entry.id
        _link_employees(db, entry_id, payload.employees)
        db.commit()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Create entry")
    logger.info("entry_created", entry_id=entry_id, employees=len(payload.employees))
    return EntryResponse(id=entry_id, **payload.model_dump())


@router.put("/{entry_id}", response_model=EntryResponse)
def update_entry(entry_id: int, payload: EntryCreate, db: Session = Depends(get_db)):
    try:
        entry = db.get(Entry, entry_id)
        if not entry:
            raise HTTPException(status_code=404, detail="Entry not found")
        _apply(entry, payload)
        # Replace the whole employee set rather than diffing it
        db.execute(delete(entry_employees).where(entry_employees.c.entry_id == entry_id))
        _link_employees(db, entry_id, payload.employees)
        db.commit()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Update entry", entry_id=entry_id)
    logger.info("entry_updated", entry_id=entry_id)
    return EntryResponse(id=entry_id, **payload.model_dump())


@router.delete("/{entry_id}", status_code=204)
def delete_entry(entry_id: int, db: Session = Depends(get_db)):
    try:
        db.execute(delete(entry_employees).where(entry_employees.c.entry_id == entry_id))
        db.execute(delete(Entry).where(Entry.id == entry_id))
        db.commit()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Delete entry", entry_id=entry_id)
    logger.info("entry_deleted", entry_id=entry_id)
    return Response(status_code=204)
