import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core import StockLevel


def test_module_routes_require_api_key(client):
    anonymous = TestClient(app)
    r = anonymous.get("/api/products")
    assert r.status_code == 401

    r = anonymous.get("/api/products", headers={"X-API-Key": "wrong"})
    assert r.status_code == 401


def test_products_are_listed_by_name_and_searchable(client, make_product):
    make_product(name="Pavé autobloquant", type="pavé")
    make_product(name="Brique creuse", type="creuse 15")
    make_product(name="Hourdis", type="16")

    r = client.get("/api/products")
    assert r.status_code == 200
    assert [p["name"] for p in r.json()] == ["Brique creuse", "Hourdis", "Pavé autobloquant"]

    r = client.get("/api/products", params={"search": "CREUSE"})
    assert [p["name"] for p in r.json()] == ["Brique creuse"]


def test_product_update_and_delete(client, make_product):
    product = make_product()

    r = client.put(f"/api/products/{product['id']}",
                   json={"name": "Brique pleine", "type": "10x20x40", "unit": "pièce", "price": 300})
    assert r.status_code == 200
    assert r.json()["price"] == 300

    assert client.delete(f"/api/products/{product['id']}").status_code == 200
    assert client.get(f"/api/products/{product['id']}").status_code == 404
    assert client.delete(f"/api/products/{product['id']}").status_code == 404


def test_product_referenced_by_stock_cannot_be_deleted(client, make_product):
    product = make_product()
    client.post("/api/stock", json={"product_id": product["id"], "current_quantity": 10,
                                    "min_threshold": 5, "max_threshold": 50})

    r = client.delete(f"/api/products/{product['id']}")
    assert r.status_code == 409


@pytest.mark.parametrize("quantity,minimum,maximum,expected", [
    (5, 10, 100, StockLevel.LOW),
    (10, 10, 100, StockLevel.LOW),
    (50, 10, 100, StockLevel.NORMAL),
    (100, 10, 100, StockLevel.HIGH),
    (150, 10, 100, StockLevel.HIGH),
    (20, 20, 20, StockLevel.LOW),
])
def test_stock_level_classification(quantity, minimum, maximum, expected):
    assert StockLevel.classify(quantity, minimum, maximum) == expected


def test_stock_rows_carry_level_and_label(client, make_product):
    product = make_product()
    r = client.post("/api/stock", json={"product_id": product["id"], "current_quantity": 3,
                                        "min_threshold": 10, "max_threshold": 100})
    assert r.status_code == 201
    item = r.json()
    assert item["level"] == "low"
    assert item["level_label"] == "Stock faible"
    assert item["product_name"] == "Brique pleine"
    assert item["last_updated"] is not None

    r = client.put(f"/api/stock/{item['id']}", json={"product_id": product["id"], "current_quantity": 120,
                                                     "min_threshold": 10, "max_threshold": 100})
    assert r.json()["level"] == "high"
    assert r.json()["level_label"] == "Stock élevé"


def test_stock_summary_counts_low_rows_and_values_stock(client, make_product):
    brick = make_product(name="Brique pleine", price=250)
    paver = make_product(name="Pavé", price=400)
    client.post("/api/stock", json={"product_id": brick["id"], "current_quantity": 100,
                                    "min_threshold": 10, "max_threshold": 1000})
    client.post("/api/stock", json={"product_id": paver["id"], "current_quantity": 5,
                                    "min_threshold": 10, "max_threshold": 1000})

    r = client.get("/api/stock/summary")
    assert r.status_code == 200
    summary = r.json()
    assert summary["total_items"] == 2
    assert summary["low_stock_items"] == 1
    assert summary["total_value"] == 100 * 250 + 5 * 400


def test_stock_with_unknown_product_is_rejected(client):
    r = client.post("/api/stock", json={"product_id": 999, "current_quantity": 1,
                                        "min_threshold": 0, "max_threshold": 10})
    assert r.status_code == 404


def test_stock_search_on_product_name(client, make_product):
    brick = make_product(name="Brique pleine")
    paver = make_product(name="Pavé", type="autobloquant")
    for product in (brick, paver):
        client.post("/api/stock", json={"product_id": product["id"], "current_quantity": 50,
                                        "min_threshold": 10, "max_threshold": 100})

    r = client.get("/api/stock", params={"search": "autobloq"})
    assert [row["product_name"] for row in r.json()] == ["Pavé"]
