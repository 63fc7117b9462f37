import structlog
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Entry, Property, entry_employees
from ..schemas.properties import PropertyCreate, PropertyResponse
from ..services.errors import store_failure


router = APIRouter(prefix="/api/properties", tags=["properties"])

logger = structlog.get_logger(__name__)


@router.post("", status_code=201, response_model=PropertyResponse)
def create_property(payload: PropertyCreate, db: Session = Depends(get_db)):
    try:
        prop = Property(full_name=payload.full_name, address=payload.address, services=payload.services)
        db.add(prop)
        db.flush()
        property_id = prop.id
        db.commit()
    except SQLAlchemyError as e:
        # Duplicate addresses land here too
        raise store_failure(db, e, "Create property", address=payload.address)
    logger.info("property_created", property_id=property_id)
    return PropertyResponse(id=property_id, **payload.model_dump())


@router.put("/{property_id}", response_model=PropertyResponse)
def update_property(property_id: int, payload: PropertyCreate, db: Session = Depends(get_db)):
    try:
        prop = db.get(Property, property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found")
        prop.full_name = payload.full_name
        prop.address = payload.address
        prop.services = payload.services
        db.commit()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Update property", property_id=property_id)
    logger.info("property_updated", property_id=property_id)
    return PropertyResponse(id=property_id, **payload.model_dump())


@router.delete("/{address}", status_code=204)
def delete_property(address: str, db: Session = Depends(get_db)):
    """Delete a property by address together with every entry recorded against it."""
    try:
        entry_ids = select(Entry.id).where(Entry.property_address == address)
        db.execute(delete(entry_employees).where(entry_employees.c.entry_id.in_(entry_ids)))
        removed = db.execute(delete(Entry).where(Entry.property_address == address)).rowcount
        db.execute(delete(Property).where(Property.address == address))
        db.commit()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Delete property", address=address)
    logger.info("property_deleted", address=address, entries_removed=removed)
    return Response(status_code=204)
