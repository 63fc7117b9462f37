from sqlalchemy import delete, insert
from sqlalchemy.exc import OperationalError

from fieldhours.models.models import Entry, entry_employees
from fieldhours.routes import data as data_routes
from fieldhours.routes import entries as entries_routes


def _entries(client):
    return client.get("/api/data").json()["entries"]


def test_create_entry_returns_id_and_body(client, entry_body):
    body = entry_body()
    res = client.post("/api/entries", json=body)
    assert res.status_code == 201
    data = res.json()
    assert isinstance(data["id"], int)
    for key, value in body.items():
        assert data[key] == value


def test_created_employees_read_back(client, entry_body):
    res = client.post("/api/entries", json=entry_body(employees=["Carol", "Alice", "Bob"]))
    entry_id = res.json()["id"]
    [entry] = [e for e in _entries(client) if e["id"] == entry_id]
    assert set(entry["employees"]) == {"Alice", "Bob", "Carol"}
    assert entry["propertyAddress"] == "1 Main St"
    assert entry["timeIn"] == "09:00"


def test_numeric_total_hours_kept_as_text(client, entry_body):
    res = client.post("/api/entries", json=entry_body(totalHours=2.5))
    assert res.status_code == 201
    assert res.json()["totalHours"] == "2.5"
    assert _entries(client)[0]["totalHours"] == "2.5"


def test_entries_newest_first(client, entry_body):
    first = client.post("/api/entries", json=entry_body(date="2024-01-01")).json()["id"]
    second = client.post("/api/entries", json=entry_body(date="2024-01-01")).json()["id"]
    newest = client.post("/api/entries", json=entry_body(date="2024-02-01")).json()["id"]
    assert [e["id"] for e in _entries(client)] == [newest, second, first]


def test_update_replaces_employee_set(client, entry_body, join_rows):
    entry_id = client.post("/api/entries", json=entry_body(employees=["A", "B"])).json()["id"]
    res = client.put(f"/api/entries/{entry_id}", json=entry_body(employees=["C"], client="Globex"))
    assert res.status_code == 200
    assert res.json()["client"] == "Globex"
    assert join_rows(entry_id) == [(entry_id, "C")]
    [entry] = _entries(client)
    assert entry["client"] == "Globex"
    assert entry["employees"] == ["C"]


def test_update_unknown_entry_is_404(client, entry_body, join_rows):
    res = client.put("/api/entries/999", json=entry_body())
    assert res.status_code == 404
    assert join_rows(999) == []


def test_delete_entry_removes_links(client, entry_body, join_rows):
    keep = client.post("/api/entries", json=entry_body(employees=["A"])).json()["id"]
    gone = client.post("/api/entries", json=entry_body(employees=["A", "B"])).json()["id"]
    res = client.delete(f"/api/entries/{gone}")
    assert res.status_code == 204
    assert res.content == b""
    assert [e["id"] for e in _entries(client)] == [keep]
    assert join_rows() == [(keep, "A")]


def test_delete_missing_entry_is_noop(client):
    assert client.delete("/api/entries/12345").status_code == 204


def test_failed_create_leaves_nothing_behind(client, entry_body, join_rows, monkeypatch):
    def boom(db, entry_id, names):
        raise OperationalError("INSERT INTO entry_employees", {}, Exception("disk I/O error"))

    monkeypatch.setattr(entries_routes, "_link_employees", boom)
    res = client.post("/api/entries", json=entry_body())
    assert res.status_code == 500
    assert res.json() == {"detail": "Create entry failed"}
    assert "disk I/O" not in res.text
    assert _entries(client) == []
    assert join_rows() == []


def test_failed_update_keeps_previous_state(client, entry_body, join_rows, monkeypatch):
    entry_id = client.post("/api/entries", json=entry_body(employees=["A", "B"])).json()["id"]

    def boom(db, entry_id, names):
        raise OperationalError("INSERT INTO entry_employees", {}, Exception("disk I/O error"))

    monkeypatch.setattr(entries_routes, "_link_employees", boom)
    res = client.put(f"/api/entries/{entry_id}", json=entry_body(employees=["C"], client="Globex"))
    assert res.status_code == 500
    assert sorted(join_rows(entry_id)) == [(entry_id, "A"), (entry_id, "B")]
    assert _entries(client)[0]["client"] == "Acme"


def test_lock_timeout_is_503(client, entry_body, monkeypatch):
    def locked(db, entry_id, names):
        raise OperationalError("INSERT INTO entry_employees", {}, Exception("database is locked"))

    monkeypatch.setattr(entries_routes, "_link_employees", locked)
    res = client.post("/api/entries", json=entry_body())
    assert res.status_code == 503
    assert res.json() == {"detail": "Database busy, try again"}


def test_fetch_all_reads_entries_and_links_from_one_snapshot(client, entry_body, monkeypatch):
    entry_id = client.post("/api/entries", json=entry_body(employees=["A", "B"])).json()["id"]
    store = client.app.state.store
    read_links = data_routes._entry_employee_map

    def delete_then_read(db):
        # Another writer commits between the entries and join-table reads
        with store.session() as other:
            other.execute(delete(entry_employees).where(entry_employees.c.entry_id == entry_id))
            other.execute(delete(Entry).where(Entry.id == entry_id))
            other.commit()
        return read_links(db)

    monkeypatch.setattr(data_routes, "_entry_employee_map", delete_then_read)
    [entry] = _entries(client)
    assert entry["id"] == entry_id
    assert sorted(entry["employees"]) == ["A", "B"]

    monkeypatch.setattr(data_routes, "_entry_employee_map", read_links)
    assert _entries(client) == []


def test_fetch_all_never_mixes_old_fields_with_new_links(client, entry_body, monkeypatch):
    entry_id = client.post("/api/entries", json=entry_body(employees=["A", "B"])).json()["id"]
    store = client.app.state.store
    read_links = data_routes._entry_employee_map

    def update_then_read(db):
        with store.session() as other:
            other.get(Entry, entry_id).client = "Globex"
            other.execute(delete(entry_employees).where(entry_employees.c.entry_id == entry_id))
            other.execute(insert(entry_employees).values(entry_id=entry_id, employee_name="C"))
            other.commit()
        return read_links(db)

    monkeypatch.setattr(data_routes, "_entry_employee_map", update_then_read)
    [entry] = _entries(client)
    assert entry["client"] == "Acme"
    assert sorted(entry["employees"]) == ["A", "B"]
