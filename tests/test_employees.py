def _employee(client, first_name, last_name="Ouédraogo", **extra):
    payload = {"first_name": first_name, "last_name": last_name}
    payload.update(extra)
    r = client.post("/api/employees", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_employees_sorted_by_first_name(client):
    _employee(client, "Salif")
    _employee(client, "Aminata")
    _employee(client, "Karim")

    r = client.get("/api/employees")
    assert [e["first_name"] for e in r.json()] == ["Aminata", "Karim", "Salif"]


def test_default_role_and_search_on_role_label(client):
    user = _employee(client, "Aminata")
    assert user["role"] == "user"
    assert user["role_label"] == "Utilisateur"
    assert user["is_active"] is True

    _employee(client, "Karim", role="comptabilite")
    r = client.get("/api/employees", params={"search": "comptab"})
    assert [e["first_name"] for e in r.json()] == ["Karim"]


def test_toggle_active_and_role_stats(client):
    seller = _employee(client, "Aminata", role="vente")
    _employee(client, "Karim", role="vente")
    _employee(client, "Salif", role="production")

    r = client.post(f"/api/employees/{seller['id']}/toggle-active")
    assert r.json()["is_active"] is False

    r = client.get("/api/employees/roles/stats")
    assert r.json() == {"vente": 1, "production": 1}

    r = client.post(f"/api/employees/{seller['id']}/toggle-active")
    assert r.json()["is_active"] is True


def test_overtime_total_and_summary(client):
    employee = _employee(client, "Salif", role="production")

    r = client.post(f"/api/employees/{employee['id']}/overtime", json={
        "date": "2025-05-10", "hours_worked": 2.5, "hourly_rate": 1000,
    })
    assert r.status_code == 201
    assert r.json()["total_amount"] == 2500

    client.post(f"/api/employees/{employee['id']}/overtime", json={
        "date": "2025-05-20", "hours_worked": 4, "hourly_rate": 1000,
    })
    client.post(f"/api/employees/{employee['id']}/overtime", json={
        "date": "2025-06-02", "hours_worked": 1, "hourly_rate": 1000,
    })

    r = client.get(f"/api/employees/{employee['id']}/overtime/summary", params={"year": 2025, "month": 5})
    summary = r.json()
    assert summary["total_amount"] == 6500
    assert [e["date"] for e in summary["entries"]] == ["2025-05-20", "2025-05-10"]

    r = client.get(f"/api/employees/{employee['id']}/overtime")
    assert len(r.json()) == 3


def test_overtime_for_unknown_employee(client):
    r = client.post("/api/employees/99/overtime", json={"date": "2025-05-10", "hours_worked": 1, "hourly_rate": 1})
    assert r.status_code == 404
    assert client.get("/api/employees/99/overtime").status_code == 404


def test_deleting_employee_removes_overtime(client, db_session):
    from database import OvertimeHour

    employee = _employee(client, "Salif")
    entry = client.post(f"/api/employees/{employee['id']}/overtime", json={
        "date": "2025-05-10", "hours_worked": 1, "hourly_rate": 1000,
    }).json()

    assert client.delete(f"/api/employees/{employee['id']}/overtime/{entry['id'] + 1}").status_code == 404
    assert client.delete(f"/api/employees/{employee['id']}").status_code == 200
    assert db_session.query(OvertimeHour).count() == 0
