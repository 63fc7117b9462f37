from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Employee, entry_employees
from ..schemas.employees import EmployeeCreate, EmployeeContactUpdate, EmployeeResponse
from ..services.errors import store_failure


router = APIRouter(prefix="/api/employees", tags=["employees"])

logger = structlog.get_logger(__name__)


@router.get("", response_model=List[EmployeeResponse])
def list_employees(db: Session = Depends(get_db)):
    try:
        return db.scalars(select(Employee).order_by(Employee.name)).all()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "List employees")


@router.post("", status_code=201)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_db)):
    # Insert-if-absent: an existing name is left untouched
    try:
        stmt = sqlite_insert(Employee).values(name=payload.name).on_conflict_do_nothing(index_elements=["name"])
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Create employee", name=payload.name)
    logger.info("employee_saved", name=payload.name)
    return {"name": payload.name}


@router.put("/{name}", response_model=EmployeeResponse)
def update_employee(name: str, payload: EmployeeContactUpdate, db: Session = Depends(get_db)):
    try:
        employee = db.scalars(select(Employee).where(Employee.name == name)).first()
        if not employee:
            raise HTTPException(status_code=404, detail="Employee not found")
        employee.phone = payload.phone
        employee.email = payload.email
        db.commit()
        db.refresh(employee)
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Update employee", name=name)
    logger.info("employee_updated", name=name)
    return employee


@router.delete("/{name}", status_code=204)
def delete_employee(name: str, db: Session = Depends(get_db)):
    try:
        db.execute(delete(entry_employees).where(entry_employees.c.employee_name == name))
        db.execute(delete(Employee).where(Employee.name == name))
        db.commit()
    except SQLAlchemyError as e:
        raise store_failure(db, e, "Delete employee", name=name)
    logger.info("employee_deleted", name=name)
    return Response(status_code=204)
