"""
Legacy JSON import.
Loads the pre-database ``db.json`` document into the relational schema,
keeping the original property and entry ids.
"""
import json
from typing import Any, Dict

import structlog
from sqlalchemy import insert
from sqlalchemy.orm import Session

from ..models.models import Employee, Entry, Property, entry_employees


logger = structlog.get_logger(__name__)


def _first_present(record: Dict[str, Any], *keys: str):
    # Older exports used TimeIn/TimeOut, newer ones timeIn/timeOut
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None


def load_legacy_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def import_legacy(db: Session, data: Dict[str, Any]) -> Dict[str, int]:
    """
    Insert legacy properties, employees and entries in one transaction.

    Args:
        db: Database session; committed on success, rolled back on failure
        data: Parsed legacy document with ``properties``, ``employees`` and ``entries``

    Returns:
        Number of rows inserted per table
    """
    properties = data.get("properties") or []
    employees = data.get("employees") or []
    entries = data.get("entries") or []
    links = 0
    try:
        for prop in properties:
            db.add(Property(
                id=prop["id"],
                full_name=prop.get("fullName"),
                address=prop.get("address"),
                services=prop.get("services") or {},
            ))
        for name in employees:
            db.add(Employee(name=name))
        for entry in entries:
            db.add(Entry(
                id=entry["id"],
                date=entry.get("date"),
                client=entry.get("client"),
                property_address=entry.get("propertyAddress"),
                service=entry.get("service"),
                time_in=_first_present(entry, "TimeIn", "timeIn"),
                time_out=_first_present(entry, "TimeOut", "timeOut"),
                total_hours=None if entry.get("totalHours") is None else str(entry["totalHours"]),
            ))
        # Entries must exist before their join rows reference them
        db.flush()
        rows = [
            {"entry_id": entry["id"], "employee_name": name}
            for entry in entries
            for name in (entry.get("employees") or [])
        ]
        if rows:
            db.execute(insert(entry_employees), rows)
        links = len(rows)
        db.commit()
    except Exception:
        db.rollback()
        raise

    counts = {
        "properties": len(properties),
        "employees": len(employees),
        "entries": len(entries),
        "entry_employees": links,
    }
    logger.info("legacy_import_complete", **counts)
    return counts
