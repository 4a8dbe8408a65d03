def _order(client, product, **overrides):
    payload = {"product_id": product["id"], "planned_quantity": 1000, "start_date": "2025-05-02"}
    payload.update(overrides)
    r = client.post("/api/production", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_new_order_starts_at_zero(client, make_product):
    order = _order(client, make_product())
    assert order["produced_quantity"] == 0
    assert order["progress"] == 0
    assert order["status"] == "planned"
    assert order["end_date"] is None


def test_progress_is_capped(client, make_product):
    order = _order(client, make_product(), planned_quantity=1000)

    r = client.patch(f"/api/production/{order['id']}/produced", json={"produced_quantity": 250})
    assert r.json()["progress"] == 25

    r = client.patch(f"/api/production/{order['id']}/produced", json={"produced_quantity": 1500})
    assert r.json()["progress"] == 100


def test_progress_with_nothing_planned(client, make_product):
    order = _order(client, make_product(), planned_quantity=0)
    r = client.patch(f"/api/production/{order['id']}/produced", json={"produced_quantity": 10})
    assert r.json()["progress"] == 0


def test_completion_sets_end_date(client, make_product):
    order = _order(client, make_product())

    r = client.patch(f"/api/production/{order['id']}/status", json={"status": "in_progress"})
    assert r.json()["end_date"] is None

    r = client.patch(f"/api/production/{order['id']}/status", json={"status": "completed"})
    assert r.json()["status_label"] == "Terminé"
    assert r.json()["end_date"] is not None


def test_update_keeps_produced_quantity(client, make_product):
    product = make_product()
    order = _order(client, product)
    client.patch(f"/api/production/{order['id']}/produced", json={"produced_quantity": 300})

    r = client.put(f"/api/production/{order['id']}", json={
        "product_id": product["id"],
        "planned_quantity": 600,
        "start_date": "2025-05-02",
    })
    assert r.status_code == 200
    assert r.json()["produced_quantity"] == 300
    assert r.json()["progress"] == 50


def test_order_for_unknown_product(client):
    r = client.post("/api/production", json={"product_id": 42, "planned_quantity": 1, "start_date": "2025-05-02"})
    assert r.status_code == 404


def test_loss_is_valued_at_product_price(client, make_product):
    product = make_product(price=250)

    r = client.post("/api/losses", json={
        "product_id": product["id"],
        "quantity": 10,
        "loss_date": "2025-05-03",
        "description": "Casse au déchargement",
    })
    assert r.status_code == 201
    loss = r.json()
    assert loss["value_lost"] == 2500
    assert loss["loss_type"] == "damage"
    assert loss["loss_type_label"] == "Dommage"


def test_loss_list_total_and_search(client, make_product):
    brick = make_product(name="Brique pleine", price=250)
    paver = make_product(name="Pavé", price=400)
    client.post("/api/losses", json={"product_id": brick["id"], "quantity": 10, "loss_date": "2025-05-03"})
    client.post("/api/losses", json={"product_id": paver["id"], "quantity": 5, "loss_type": "theft",
                                     "loss_date": "2025-05-04"})

    r = client.get("/api/losses")
    body = r.json()
    assert len(body["items"]) == 2
    assert body["total_value_lost"] == 2500 + 2000

    r = client.get("/api/losses", params={"search": "vol"})
    body = r.json()
    assert [item["product_name"] for item in body["items"]] == ["Pavé"]
    assert body["total_value_lost"] == 2000


def test_loss_for_unknown_product(client):
    r = client.post("/api/losses", json={"product_id": 42, "quantity": 1, "loss_date": "2025-05-03"})
    assert r.status_code == 404
