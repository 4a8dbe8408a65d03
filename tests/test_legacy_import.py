from datetime import datetime

import pytest

from database import Product, Client, Sale, Invoice, Employee
from services.employees import EmployeeService
from services.legacy_import import (
    LegacyImportService,
    TABLE_NAMES,
    import_status,
    parse_date,
    parse_datetime,
)


class FakeSupabaseClient:
    """get_all_rows() servi depuis un dict {table: rows}"""

    def __init__(self, tables):
        self.tables = tables
        self.requested = []

    def get_all_rows(self, table, progress_callback=None):
        self.requested.append(table)
        return [dict(row) for row in self.tables.get(table, [])]


def _legacy_tables():
    return {
        'products': [
            {'id': 'p-1', 'name': 'Brique pleine', 'type': '15x20x40', 'unit': 'pièce',
             'price': '250', 'created_at': '2024-01-05T10:00:00Z'},
        ],
        'clients': [
            {'id': 'c-1', 'name': 'Entreprise Kaboré', 'email': None, 'phone': '70 00 00 01'},
        ],
        'sales': [
            {'id': 's-1', 'client_id': 'c-1', 'product_id': 'p-1', 'quantity': 10,
             'unit_price': 250, 'total_amount': 2500, 'status': 'completed',
             'sale_date': '2024-02-01T08:30:00+00:00'},
            {'id': 's-2', 'client_id': 'c-unknown', 'product_id': 'p-1', 'quantity': 1,
             'unit_price': 250, 'total_amount': 250, 'status': 'completed'},
        ],
        'invoices': [
            {'id': 'i-1', 'sale_id': 's-1', 'invoice_number': 'FAC-202402-001',
             'issue_date': '2024-02-01', 'due_date': '2024-03-02', 'status': 'archived',
             'total_amount': 2950, 'tax_amount': 450},
            {'id': 'i-2', 'sale_id': 's-1', 'invoice_number': None,
             'issue_date': '2024-02-01', 'due_date': '2024-03-02'},
        ],
    }


def test_import_translates_foreign_keys(db_session):
    client = FakeSupabaseClient(_legacy_tables())
    results = LegacyImportService(client, db_session).run(['products', 'clients', 'sales', 'invoices'])

    assert client.requested == ['products', 'clients', 'sales', 'invoices']
    assert results['products'] == {'fetched': 1, 'created': 1, 'updated': 0, 'skipped': 0}
    assert results['sales'] == {'fetched': 2, 'created': 1, 'updated': 0, 'skipped': 1}
    assert results['invoices'] == {'fetched': 2, 'created': 1, 'updated': 0, 'skipped': 1}

    product = db_session.query(Product).filter(Product.external_id == 'p-1').one()
    customer = db_session.query(Client).filter(Client.external_id == 'c-1').one()
    sale = db_session.query(Sale).filter(Sale.external_id == 's-1').one()

    assert product.price == 250.0
    assert product.created_at == datetime(2024, 1, 5, 10, 0)
    assert sale.client_id == customer.id
    assert sale.product_id == product.id
    assert sale.sale_date == datetime(2024, 2, 1, 8, 30)

    invoice = db_session.query(Invoice).one()
    assert invoice.sale_id == sale.id
    # statut inconnu -> valeur par défaut
    assert invoice.status == 'draft'


def test_rerun_updates_without_duplicates(db_session):
    tables = _legacy_tables()
    LegacyImportService(FakeSupabaseClient(tables), db_session).run(['products', 'clients'])

    tables['products'][0]['price'] = 300
    results = LegacyImportService(FakeSupabaseClient(tables), db_session).run(['products'])

    assert results['products'] == {'fetched': 1, 'created': 0, 'updated': 1, 'skipped': 0}
    assert db_session.query(Product).count() == 1
    assert db_session.query(Product).one().price == 300.0


def test_profiles_fill_the_staff_roster(db_session):
    tables = {
        'employees': [
            {'id': 'e-1', 'first_name': 'Awa', 'last_name': 'Ouédraogo', 'role': 'production'},
        ],
        'profiles': [
            {'id': 'pr-1', 'user_id': 'u-1', 'first_name': 'Issa', 'last_name': 'Sawadogo',
             'email': 'issa@example.com', 'role': 'vente', 'is_active': True},
            {'id': 'pr-2', 'user_id': 'u-2', 'first_name': None, 'last_name': None,
             'role': 'livraison', 'is_active': False},
            {'id': 'pr-3', 'user_id': 'u-3', 'first_name': 'Mariam', 'last_name': 'Traoré',
             'role': 'pdg'},
        ],
    }
    results = LegacyImportService(FakeSupabaseClient(tables), db_session).run(['employees', 'profiles'])

    assert results['profiles'] == {'fetched': 3, 'created': 3, 'updated': 0, 'skipped': 0}
    assert db_session.query(Employee).count() == 4

    issa = db_session.query(Employee).filter(Employee.external_id == 'pr-1').one()
    assert (issa.first_name, issa.email, issa.role) == ('Issa', 'issa@example.com', 'vente')
    unnamed = db_session.query(Employee).filter(Employee.external_id == 'pr-2').one()
    assert (unnamed.first_name, unnamed.is_active) == ('', False)

    assert EmployeeService(db_session).role_stats() == {'production': 1, 'vente': 1, 'user': 1}

    tables['profiles'][1]['is_active'] = True
    results = LegacyImportService(FakeSupabaseClient(tables), db_session).run(['profiles'])
    assert results['profiles'] == {'fetched': 3, 'created': 0, 'updated': 3, 'skipped': 0}
    assert EmployeeService(db_session).role_stats()['livraison'] == 1


def test_repeated_row_in_one_page_is_upserted_once(db_session):
    rows = [
        {'id': 'c-1', 'name': 'Entreprise Kaboré'},
        {'id': 'c-1', 'name': 'Entreprise Kaboré et Fils'},
    ]
    results = LegacyImportService(FakeSupabaseClient({'clients': rows}), db_session).run(['clients'])

    assert results['clients'] == {'fetched': 2, 'created': 1, 'updated': 1, 'skipped': 0}
    assert db_session.query(Client).one().name == 'Entreprise Kaboré et Fils'


def test_all_tables_by_default(db_session):
    client = FakeSupabaseClient({})
    results = LegacyImportService(client, db_session).run()
    assert client.requested == TABLE_NAMES
    assert all(stats['fetched'] == 0 for stats in results.values())


def test_unknown_table(db_session):
    with pytest.raises(ValueError):
        LegacyImportService(FakeSupabaseClient({}), db_session).run(['products', 'users'])


def test_parsers():
    assert parse_datetime('2024-02-01T08:30:00Z') == datetime(2024, 2, 1, 8, 30)
    assert parse_datetime(None) is None
    assert parse_date('2024-02-01T08:30:00+00:00').isoformat() == '2024-02-01'


def test_import_endpoint_requires_legacy_configuration(client):
    r = client.post("/api/admin/import")
    assert r.status_code == 400

    r = client.get("/api/admin/import/status")
    assert r.status_code == 200
    assert r.json()["running"] is False


def test_import_endpoint_rejects_unknown_tables(client, monkeypatch):
    from app.core import get_settings

    settings = get_settings()
    monkeypatch.setattr(settings, "supabase_url", "https://legacy.supabase.co")
    monkeypatch.setattr(settings, "supabase_key", "anon-key")

    r = client.post("/api/admin/import", json={"tables": ["products", "users"]})
    assert r.status_code == 400
    assert "users" in r.json()["detail"]


def test_import_endpoint_refuses_concurrent_runs(client, monkeypatch):
    from app.core import get_settings

    settings = get_settings()
    monkeypatch.setattr(settings, "supabase_url", "https://legacy.supabase.co")
    monkeypatch.setattr(settings, "supabase_key", "anon-key")
    monkeypatch.setitem(import_status, "running", True)

    assert client.post("/api/admin/import").status_code == 409


def test_import_endpoint_marks_running_before_the_task_starts(client, monkeypatch):
    from app.api import admin
    from app.core import get_settings

    settings = get_settings()
    monkeypatch.setattr(settings, "supabase_url", "https://legacy.supabase.co")
    monkeypatch.setattr(settings, "supabase_key", "anon-key")
    monkeypatch.setitem(import_status, "running", False)

    started = []

    async def fake_task(tables):
        started.append(tables)

    monkeypatch.setattr(admin, "_run_import_task", fake_task)

    r = client.post("/api/admin/import", json={"tables": ["products"]})
    assert r.status_code == 200
    assert started == [["products"]]
    assert import_status["running"] is True

    assert client.post("/api/admin/import").status_code == 409
    assert started == [["products"]]
