import uuid
from typing import Optional

from sqlalchemy import (
    Column,
    Text,
    ForeignKey,
    Table,
    Integer,
    JSON,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base


# Many-to-many Entry<->Employee. Employees are referenced by name, which is
# their natural key across the system; only entry_id carries a foreign key.
entry_employees = Table(
    "entry_employees",
    Base.metadata,
    Column("entry_id", Integer, ForeignKey("entries.id"), nullable=False),
    Column("employee_name", Text, nullable=False),
    Index("idx_entry_employees_entry", "entry_id"),
    Index("idx_entry_employees_name", "employee_name"),
)


class Property(Base):
    __tablename__ = "properties"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[Optional[str]] = mapped_column("fullName", Text)
    address: Mapped[Optional[str]] = mapped_column(Text, unique=True)
    services: Mapped[Optional[dict]] = mapped_column(JSON, default=dict)  # {service name: attributes}


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(Text)
    email: Mapped[Optional[str]] = mapped_column(Text)


class Entry(Base):
    __tablename__ = "entries"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[Optional[str]] = mapped_column(Text)
    client: Mapped[Optional[str]] = mapped_column(Text)
    # Denormalized copy of the property address, not a foreign key
    property_address: Mapped[Optional[str]] = mapped_column("propertyAddress", Text, index=True)
    service: Mapped[Optional[str]] = mapped_column(Text)
    time_in: Mapped[Optional[str]] = mapped_column("timeIn", Text)
    time_out: Mapped[Optional[str]] = mapped_column("timeOut", Text)
    total_hours: Mapped[Optional[str]] = mapped_column("totalHours", Text)


def new_timer_id() -> str:
    return str(uuid.uuid4())


class ActiveTimer(Base):
    __tablename__ = "activeTimers"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_timer_id)
    start_time: Mapped[Optional[str]] = mapped_column("startTime", Text)
    date: Mapped[Optional[str]] = mapped_column(Text)
    client: Mapped[Optional[str]] = mapped_column(Text)
    property_address: Mapped[Optional[str]] = mapped_column("propertyAddress", Text)
    service: Mapped[Optional[str]] = mapped_column(Text)
    employees: Mapped[Optional[list]] = mapped_column(JSON, default=list)  # list of employee names
