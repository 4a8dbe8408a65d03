from datetime import datetime, timedelta

from fastapi.testclient import TestClient

from app.main import app
from app.core import get_settings
from connectors.supabase_client import SupabaseAPIClient
from services.scheduled_maintenance import ScheduledMaintenanceService


def test_health_is_public():
    r = TestClient(app).get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["database_connection"] == "connected"
    assert body["legacy_backend_connection"] == "not_configured"


def test_health_degraded_when_legacy_backend_is_down(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "supabase_url", "https://legacy.supabase.co")
    monkeypatch.setattr(settings, "supabase_key", "anon-key")
    monkeypatch.setattr(SupabaseAPIClient, "test_connection",
                        lambda self: {'success': False, 'message': 'down'})

    body = TestClient(app).get("/health").json()
    assert body["legacy_backend_connection"] == "disconnected"
    assert body["status"] == "degraded"


def test_root():
    body = TestClient(app).get("/").json()
    assert body["health"] == "/health"


def test_maintenance_trigger(client, make_sale, session_factory, monkeypatch, today):
    monkeypatch.setattr("services.scheduled_maintenance.SessionLocal", session_factory)
    yesterday = (today - timedelta(days=1)).isoformat()

    sale = make_sale()
    client.post("/api/invoices", json={"sale_id": sale["id"], "due_date": yesterday, "status": "sent"})
    product = client.get(f"/api/products/{sale['product_id']}").json()
    client.post("/api/quotations", json={
        "client_id": sale["client_id"], "product_id": product["id"],
        "quantity": 1, "unit_price": 1, "valid_until": yesterday,
    })

    r = client.post("/api/maintenance/trigger")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "completed"
    assert body["overdue_invoices"] == 1
    assert body["expired_quotations"] == 1

    status = client.get("/api/maintenance/status").json()
    assert status["last_result"] == {"overdue_invoices": 1, "expired_quotations": 1}
    assert status["last_run"] is not None
    assert status["maintenance_time"] == "02:00"


def test_maintenance_requires_api_key():
    assert TestClient(app).post("/api/maintenance/trigger").status_code == 401


def test_scheduler_runs_once_a_day():
    scheduler = ScheduledMaintenanceService()
    morning = datetime(2025, 5, 15, 1, 0)
    night = datetime(2025, 5, 15, 3, 0)

    assert scheduler._should_run(morning) is False
    assert scheduler._should_run(night) is True

    scheduler.last_run = night
    assert scheduler._should_run(datetime(2025, 5, 15, 23, 0)) is False
    assert scheduler._should_run(datetime(2025, 5, 16, 2, 0)) is True
