import os
from typing import Optional

import structlog
from fastapi import Request
from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import Settings


Base = declarative_base()

logger = structlog.get_logger(__name__)

# Columns added to older databases after the first release
EMPLOYEE_CONTACT_COLUMNS = ("phone", "email")


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    # Hand transaction control to SQLAlchemy; pysqlite would otherwise only
    # BEGIN before DML and leave SELECTs outside any transaction
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def _begin_sqlite_transaction(conn):
    # Every transaction, read-only ones included, reads from one snapshot
    conn.exec_driver_sql("BEGIN")


class Store:
    """Owns the engine and session factory for one SQLite database file.

    Built once at startup and handed to the API layer and the backup
    scheduler; ``close`` disposes the connection pool on shutdown.
    """

    def __init__(self, database_url: str, timeout_seconds: float = 5.0):
        self.database_url = database_url
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args = {"check_same_thread": False, "timeout": timeout_seconds}
        self.engine: Engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        if self.is_sqlite:
            event.listen(self.engine, "connect", _set_sqlite_pragmas)
            event.listen(self.engine, "begin", _begin_sqlite_transaction)
        # Create a fresh Session per request
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, future=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Store":
        return cls(settings.database_url, timeout_seconds=settings.db_timeout_seconds)

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    @property
    def database_path(self) -> Optional[str]:
        """Absolute path of the database file, or None for in-memory stores."""
        database = self.engine.url.database
        if not self.is_sqlite or not database or database == ":memory:":
            return None
        return os.path.abspath(database)

    def session(self):
        return self.SessionLocal()

    def init_schema(self) -> None:
        # Importing the models registers their tables on Base.metadata
        from .models import models  # noqa: F401

        if self.database_path:
            os.makedirs(os.path.dirname(self.database_path), exist_ok=True)
        Base.metadata.create_all(bind=self.engine, checkfirst=True)
        if self.is_sqlite:
            self._add_missing_employee_columns()
        logger.info("schema_ready", tables=sorted(Base.metadata.tables.keys()))

    def _add_missing_employee_columns(self) -> None:
        # SQLite has no ADD COLUMN IF NOT EXISTS, so check the table first
        existing = {col["name"] for col in inspect(self.engine).get_columns("employees")}
        for column in EMPLOYEE_CONTACT_COLUMNS:
            if column in existing:
                continue
            with self.engine.begin() as conn:
                conn.execute(text(f"ALTER TABLE employees ADD COLUMN {column} TEXT"))
            logger.info("column_added", table="employees", column=column)

    def close(self) -> None:
        self.engine.dispose()


def get_db(request: Request):
    db = request.app.state.store.session()
    try:
        yield db
    finally:
        db.close()
