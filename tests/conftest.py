import os
import sys
from datetime import date

import pytest

# configuration avant tout import de l'application
os.environ["API_KEY"] = "test-api-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""

# ensure project root is on sys.path when running from tests/ folder
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from database import Base, get_db

API_KEY = "test-api-key"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app, headers={"X-API-Key": API_KEY})
    yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(client):
    def _make(**overrides):
        payload = {"name": "Brique pleine", "type": "15x20x40", "unit": "pièce", "price": 250.0}
        payload.update(overrides)
        r = client.post("/api/products", json=payload)
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture
def make_client(client):
    def _make(**overrides):
        payload = {"name": "Entreprise Kaboré", "email": "kabore@example.com",
                   "phone": "70 00 00 01", "address": "Ouagadougou"}
        payload.update(overrides)
        r = client.post("/api/clients", json=payload)
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture
def make_sale(client, make_product, make_client):
    def _make(product=None, customer=None, **overrides):
        product = product or make_product()
        customer = customer or make_client()
        payload = {
            "client_id": customer["id"],
            "product_id": product["id"],
            "quantity": 100,
            "unit_price": 2500.0,
            "status": "completed",
        }
        payload.update(overrides)
        r = client.post("/api/sales", json=payload)
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture
def today():
    return date.today()
