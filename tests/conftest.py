import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from fieldhours.config import Settings
from fieldhours.main import create_app
from fieldhours.models.models import entry_employees


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'database.db'}",
        BACKUP_ENABLED=False,
        ENABLE_METRICS=False,
        RATE_LIMIT="10000/minute",
        INDEX_PATH=str(tmp_path / "index.html"),
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def store(app, client):
    # Depends on client so the schema exists
    return app.state.store


@pytest.fixture
def join_rows(store):
    def _rows(entry_id=None):
        with store.session() as db:
            stmt = select(entry_employees.c.entry_id, entry_employees.c.employee_name)
            if entry_id is not None:
                stmt = stmt.where(entry_employees.c.entry_id == entry_id)
            return [tuple(r) for r in db.execute(stmt)]
    return _rows


@pytest.fixture
def entry_body():
    def _body(**overrides):
        body = {
            "date": "2024-01-01",
            "client": "Acme",
            "propertyAddress": "1 Main St",
            "service": "mowing",
            "employees": ["Alice", "Bob"],
            "timeIn": "09:00",
            "timeOut": "11:30",
            "totalHours": "2.50",
        }
        body.update(overrides)
        return body
    return _body
