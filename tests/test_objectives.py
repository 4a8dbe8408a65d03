def _objective(client, **overrides):
    payload = {
        "title": "Production mensuelle",
        "target_value": 10000,
        "unit": "briques",
        "start_date": "2025-05-01",
        "end_date": "2025-05-31",
    }
    payload.update(overrides)
    r = client.post("/api/objectives", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_objective_defaults(client):
    objective = _objective(client)
    assert objective["current_value"] == 0
    assert objective["status"] == "active"
    assert objective["category"] == "production"
    assert objective["category_label"] == "Production"
    assert objective["progress"] == 0


def test_reaching_target_completes_active_objective(client):
    objective = _objective(client)

    r = client.patch(f"/api/objectives/{objective['id']}/current-value", json={"current_value": 4000})
    assert r.json()["status"] == "active"
    assert r.json()["progress"] == 40

    r = client.patch(f"/api/objectives/{objective['id']}/current-value", json={"current_value": 10000})
    assert r.json()["status"] == "completed"
    assert r.json()["progress"] == 100


def test_cancelled_objective_stays_cancelled(client):
    objective = _objective(client, status="cancelled")

    r = client.patch(f"/api/objectives/{objective['id']}/current-value", json={"current_value": 20000})
    assert r.json()["status"] == "cancelled"
    assert r.json()["progress"] == 100


def test_update_keeps_current_value(client):
    objective = _objective(client)
    client.patch(f"/api/objectives/{objective['id']}/current-value", json={"current_value": 2500})

    r = client.put(f"/api/objectives/{objective['id']}", json={
        "title": "Production mensuelle",
        "target_value": 5000,
        "unit": "briques",
        "start_date": "2025-05-01",
        "end_date": "2025-05-31",
    })
    assert r.json()["current_value"] == 2500
    assert r.json()["progress"] == 50


def test_category_stats(client):
    done = _objective(client, category="sales", target_value=10)
    _objective(client, category="sales")
    _objective(client, category="quality")
    client.patch(f"/api/objectives/{done['id']}/current-value", json={"current_value": 10})

    r = client.get("/api/objectives/stats")
    assert r.json() == {
        "sales": {"total": 2, "completed": 1},
        "quality": {"total": 1, "completed": 0},
    }


def test_search_on_category_label(client):
    _objective(client, title="Chiffre d'affaires", category="sales")
    _objective(client, title="Taux de casse", category="quality")

    r = client.get("/api/objectives", params={"search": "qualité"})
    assert [o["title"] for o in r.json()] == ["Taux de casse"]


def test_unknown_objective(client):
    assert client.patch("/api/objectives/99/current-value", json={"current_value": 1}).status_code == 404
    assert client.delete("/api/objectives/99").status_code == 404
