def _employees(client):
    return client.get("/api/data").json()["employees"]


def test_create_employee(client):
    res = client.post("/api/employees", json={"name": "Alice"})
    assert res.status_code == 201
    assert res.json() == {"name": "Alice"}
    assert _employees(client) == ["Alice"]


def test_create_employee_is_idempotent(client):
    assert client.post("/api/employees", json={"name": "Alice"}).status_code == 201
    res = client.post("/api/employees", json={"name": "Alice"})
    assert res.status_code == 201
    assert res.json() == {"name": "Alice"}
    assert _employees(client) == ["Alice"]


def test_employees_ordered_by_name(client):
    for name in ["Zed", "alice", "Bob", "Alice"]:
        client.post("/api/employees", json={"name": name})
    assert _employees(client) == ["Alice", "Bob", "Zed", "alice"]


def test_create_employee_requires_name(client):
    assert client.post("/api/employees", json={}).status_code == 422


def test_update_employee_contacts(client):
    client.post("/api/employees", json={"name": "Alice"})
    res = client.put("/api/employees/Alice", json={"phone": "555-0100", "email": "alice@example.com"})
    assert res.status_code == 200
    updated = res.json()
    assert updated["name"] == "Alice"
    assert updated["phone"] == "555-0100"
    assert updated["email"] == "alice@example.com"

    listed = client.get("/api/employees").json()
    assert listed == [updated]


def test_update_employee_blank_contact_clears_it(client):
    client.post("/api/employees", json={"name": "Alice"})
    client.put("/api/employees/Alice", json={"phone": "555-0100", "email": "a@example.com"})
    res = client.put("/api/employees/Alice", json={"phone": "  ", "email": "a@example.com"})
    assert res.json()["phone"] is None


def test_update_unknown_employee_is_404(client):
    res = client.put("/api/employees/Nobody", json={"phone": "1"})
    assert res.status_code == 404


def test_delete_employee_removes_links(client, entry_body, join_rows):
    client.post("/api/employees", json={"name": "Alice"})
    client.post("/api/employees", json={"name": "Bob"})
    first = client.post("/api/entries", json=entry_body(employees=["Alice", "Bob"])).json()["id"]
    second = client.post("/api/entries", json=entry_body(employees=["Alice"])).json()["id"]

    res = client.delete("/api/employees/Alice")
    assert res.status_code == 204
    assert _employees(client) == ["Bob"]
    assert all(name != "Alice" for _, name in join_rows())
    assert join_rows(first) == [(first, "Bob")]
    assert join_rows(second) == []
    # Entries themselves survive
    assert {e["id"] for e in client.get("/api/data").json()["entries"]} == {first, second}
