from collections import defaultdict

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import ActiveTimer, Employee, Entry, Property, entry_employees
from ..schemas.entries import EntryResponse
from ..schemas.properties import PropertyResponse
from ..schemas.timers import TimerResponse
from ..services.errors import store_failure


router = APIRouter(prefix="/api", tags=["data"])


def _entry_employee_map(db: Session) -> dict:
    names_by_entry = defaultdict(list)
    for entry_id, name in db.execute(select(entry_employees.c.entry_id, entry_employees.c.employee_name)):
        names_by_entry[entry_id].append(name)
    return names_by_entry


@router.get("/data")
def get_all_data(db: Session = Depends(get_db)):
    """Everything the client needs in one payload."""
    try:
        entries = db.scalars(select(Entry).order_by(Entry.date.desc(), Entry.id.desc())).all()
        names_by_entry = _entry_employee_map(db)
        properties = db.scalars(select(Property).order_by(Property.id)).all()
        employees = db.scalars(select(Employee.name).order_by(Employee.name)).all()
        timers = db.scalars(select(ActiveTimer)).all()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Fetch data")

    return {
        "entries": [
            EntryResponse(
                id=entry.id,
                date=entry.date,
                client=entry.client,
                property_address=entry.property_address,
                service=entry.service,
                time_in=entry.time_in,
                time_out=entry.time_out,
                total_hours=entry.total_hours,
                employees=names_by_entry.get(entry.id, []),
            ).model_dump(by_alias=True)
            for entry in entries
        ],
        "properties": [PropertyResponse.model_validate(p).model_dump(by_alias=True) for p in properties],
        "employees": list(employees),
        "activeTimers": [
            TimerResponse.model_validate(t).model_dump(by_alias=True) for t in timers
        ],
    }
