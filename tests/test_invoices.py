import re
from datetime import timedelta

import pytest

from services.invoices import InvoiceService, derive_tax_rate


def _invoice(client, sale, **overrides):
    payload = {"sale_id": sale["id"], "due_date": "2099-01-31"}
    payload.update(overrides)
    return client.post("/api/invoices", json=payload)


def test_invoice_number_format(client, make_sale, today):
    r = _invoice(client, make_sale())
    assert r.status_code == 201
    number = r.json()["invoice_number"]
    assert re.match(r"^FAC-\d{6}-\d{3}$", number)
    assert number.startswith(f"FAC-{today.strftime('%Y%m')}-")


def test_invoice_amounts_use_company_tax_rate(client, make_sale, today):
    sale = make_sale(quantity=100, unit_price=2500)

    invoice = _invoice(client, sale).json()
    assert invoice["tax_rate"] == 18
    assert invoice["amount_ht"] == 250000
    assert invoice["tax_amount"] == 45000
    assert invoice["total_amount"] == 295000
    assert invoice["issue_date"] == today.isoformat()
    assert invoice["client_name"] == "Entreprise Kaboré"


def test_one_invoice_per_sale(client, make_sale):
    sale = make_sale()
    assert _invoice(client, sale).status_code == 201

    r = _invoice(client, sale)
    assert r.status_code == 409
    assert len(client.get("/api/invoices").json()) == 1


def test_invoice_for_unknown_sale(client):
    r = client.post("/api/invoices", json={"sale_id": 999, "due_date": "2099-01-31"})
    assert r.status_code == 404


@pytest.mark.parametrize("status", ["pending", "cancelled"])
def test_only_completed_sales_can_be_invoiced(client, make_sale, status):
    sale = make_sale(status=status)

    r = _invoice(client, sale)
    assert r.status_code == 400
    assert "completed" in r.json()["detail"]
    assert client.get("/api/invoices").json() == []


def test_update_cannot_move_invoice_to_open_sale(client, make_sale):
    invoice = _invoice(client, make_sale()).json()
    pending = make_sale(status="pending")

    r = client.put(f"/api/invoices/{invoice['id']}", json={"sale_id": pending["id"], "due_date": "2099-01-31"})
    assert r.status_code == 400
    assert client.get(f"/api/invoices/{invoice['id']}").json()["sale_id"] == invoice["sale_id"]


def test_eligible_sales_are_completed_and_not_invoiced(client, make_sale):
    invoiced = make_sale()
    open_sale = make_sale()
    make_sale(status="pending")
    _invoice(client, invoiced)

    r = client.get("/api/invoices/eligible-sales")
    assert [s["id"] for s in r.json()] == [open_sale["id"]]


def test_update_keeps_number_and_recomputes_tax(client, make_sale):
    sale = make_sale(quantity=100, unit_price=2500)
    invoice = _invoice(client, sale).json()

    r = client.put(f"/api/invoices/{invoice['id']}", json={
        "sale_id": sale["id"],
        "due_date": "2099-02-28",
        "status": "sent",
        "tax_rate": 10,
    })
    assert r.status_code == 200
    updated = r.json()
    assert updated["invoice_number"] == invoice["invoice_number"]
    assert updated["tax_amount"] == 25000
    assert updated["total_amount"] == 275000
    assert updated["status"] == "sent"
    assert updated["status_label"] == "Envoyée"


def test_status_patch(client, make_sale):
    invoice = _invoice(client, make_sale()).json()

    r = client.patch(f"/api/invoices/{invoice['id']}/status", json={"status": "paid"})
    assert r.json()["status"] == "paid"
    assert r.json()["status_label"] == "Payée"

    r = client.patch(f"/api/invoices/{invoice['id']}/status", json={"status": "unknown"})
    assert r.status_code == 422


def test_printable_document(client, make_sale):
    sale = make_sale(quantity=100, unit_price=2500)
    invoice = _invoice(client, sale).json()

    r = client.get(f"/api/invoices/{invoice['id']}/document")
    assert r.status_code == 200
    document = r.json()
    assert document["company"]["name"] == "Cornerstone GESCO"
    assert document["invoice_number"] == invoice["invoice_number"]
    assert document["client_address"] == "Ouagadougou"
    assert document["items"] == [{
        "designation": "Brique pleine (15x20x40)",
        "quantity": 100,
        "unit_price": 2500,
        "total": 250000,
    }]
    assert document["subtotal"] == 250000
    assert document["tax_amount"] == 45000
    assert document["total_ttc"] == 295000


def test_document_of_unknown_invoice(client):
    assert client.get("/api/invoices/999/document").status_code == 404


def test_mark_overdue_only_touches_sent_invoices(client, make_sale, today):
    yesterday = (today - timedelta(days=1)).isoformat()
    late = _invoice(client, make_sale(), due_date=yesterday, status="sent").json()
    draft = _invoice(client, make_sale(), due_date=yesterday).json()
    on_time = _invoice(client, make_sale(), due_date=today.isoformat(), status="sent").json()

    r = client.post("/api/invoices/mark-overdue")
    assert r.json() == {"overdue": 1}

    assert client.get(f"/api/invoices/{late['id']}").json()["status"] == "overdue"
    assert client.get(f"/api/invoices/{draft['id']}").json()["status"] == "draft"
    assert client.get(f"/api/invoices/{on_time['id']}").json()["status"] == "sent"


def test_search_on_number_and_client(client, make_sale, make_client):
    first = _invoice(client, make_sale(customer=make_client(name="Compaoré SARL"))).json()
    _invoice(client, make_sale(customer=make_client(name="Traoré et fils")))

    r = client.get("/api/invoices", params={"search": "compaoré"})
    assert [i["id"] for i in r.json()] == [first["id"]]

    r = client.get("/api/invoices", params={"search": first["invoice_number"]})
    assert [i["id"] for i in r.json()] == [first["id"]]


def test_generate_number_retries_taken_numbers(db_session, monkeypatch, make_sale, client):
    sale = make_sale()
    invoice = _invoice(client, sale).json()
    taken = int(invoice["invoice_number"][-3:])
    free = (taken + 1) % 1000

    draws = iter([taken, taken, free])
    monkeypatch.setattr("services.invoices.random.randint", lambda a, b: next(draws))

    number = InvoiceService(db_session).generate_invoice_number()
    assert number.endswith(f"-{free:03d}")


@pytest.mark.parametrize("total,tax,expected", [
    (118.0, 18.0, 18.0),
    (110.0, 10.0, 10.0),
    (0.0, 0.0, 0.0),
    (50.0, 50.0, 0.0),
])
def test_derive_tax_rate(total, tax, expected):
    assert derive_tax_rate(total, tax) == expected
