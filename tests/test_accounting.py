from services.common import month_bounds, shift_month


def _expense(client, amount, category, expense_date, **extra):
    payload = {"amount": amount, "category": category, "expense_date": expense_date}
    payload.update(extra)
    r = client.post("/api/accounting/expenses", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_categories(client):
    r = client.get("/api/accounting/categories")
    assert "Salaires" in r.json()
    assert "Matières premières" in r.json()


def test_summary_of_current_month(client, make_sale, today):
    make_sale(quantity=100, unit_price=2500)
    make_sale(quantity=10, unit_price=2500, status="pending")
    _expense(client, 50000, "Salaires", today.isoformat())
    _expense(client, 25000, "Transport", today.isoformat())

    year, month = shift_month(today.year, today.month, -1)
    _expense(client, 99999, "Salaires", month_bounds(year, month)[0].isoformat())

    r = client.get("/api/accounting/summary")
    assert r.status_code == 200
    summary = r.json()
    assert summary["period"] == "current_month"
    assert summary["period_label"] == "Ce mois"
    assert summary["revenue"] == 250000
    assert summary["total_expenses"] == 75000
    assert summary["net_profit"] == 175000
    assert summary["top_categories"][0] == {"category": "Salaires", "amount": 50000}
    assert len(summary["top_categories"]) == 2


def test_last_month_expenses(client, today):
    year, month = shift_month(today.year, today.month, -1)
    first_day = month_bounds(year, month)[0].isoformat()
    _expense(client, 1000, "Carburant", first_day)
    _expense(client, 2000, "Carburant", today.isoformat())

    r = client.get("/api/accounting/expenses", params={"period": "last_month"})
    assert [e["amount"] for e in r.json()] == [1000]

    r = client.get("/api/accounting/summary", params={"period": "last_month"})
    assert r.json()["total_expenses"] == 1000
    assert r.json()["revenue"] == 0


def test_quarter_is_not_an_accounting_period(client):
    r = client.get("/api/accounting/summary", params={"period": "current_quarter"})
    assert r.status_code == 400


def test_expense_search_update_delete(client, today):
    expense = _expense(client, 30000, "Maintenance", today.isoformat(), description="Révision presse")
    _expense(client, 10000, "Électricité", today.isoformat(), description="Facture SONABEL")

    r = client.get("/api/accounting/expenses", params={"search": "presse"})
    assert [e["id"] for e in r.json()] == [expense["id"]]

    r = client.put(f"/api/accounting/expenses/{expense['id']}", json={
        "amount": 35000, "category": "Maintenance", "expense_date": today.isoformat(), "description": "",
    })
    assert r.json()["amount"] == 35000
    assert r.json()["description"] is None

    assert client.delete(f"/api/accounting/expenses/{expense['id']}").status_code == 200
    assert client.delete(f"/api/accounting/expenses/{expense['id']}").status_code == 404
