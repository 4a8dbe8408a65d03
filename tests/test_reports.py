import csv
import io
from datetime import date

import pytest

from app.core import ReportPeriod
from services.common import french_month_label, period_dates, percentage
from services.reports import ReportService


@pytest.mark.parametrize("period,expected", [
    (ReportPeriod.CURRENT_MONTH, (date(2025, 5, 1), date(2025, 5, 31))),
    (ReportPeriod.LAST_MONTH, (date(2025, 4, 1), date(2025, 4, 30))),
    (ReportPeriod.CURRENT_QUARTER, (date(2025, 4, 1), date(2025, 6, 30))),
    (ReportPeriod.CURRENT_YEAR, (date(2025, 1, 1), date(2025, 12, 31))),
])
def test_period_dates(period, expected):
    assert period_dates(period, date(2025, 5, 15)) == expected


def test_last_month_in_january():
    assert period_dates(ReportPeriod.LAST_MONTH, date(2025, 1, 10)) == (date(2024, 12, 1), date(2024, 12, 31))


def test_french_month_label():
    assert french_month_label(2025, 1) == "janv. 2025"
    assert french_month_label(2024, 8) == "août 2024"


def test_percentage():
    assert percentage(25, 100) == 25
    assert percentage(150, 100) == 100
    assert percentage(5, 0) == 0


def test_monthly_trend_covers_six_months(db_session):
    trend = ReportService(db_session).monthly_trend(date(2025, 3, 10))
    assert [m["month"] for m in trend] == [
        "oct. 2024", "nov. 2024", "déc. 2024", "janv. 2025", "févr. 2025", "mars 2025",
    ]
    assert all(m["sales"] == 0 and m["production"] == 0 and m["expenses"] == 0 for m in trend)


def test_report_of_current_month(client, make_sale, make_product, today):
    product = make_product()
    make_sale(product=product, quantity=100, unit_price=2500)
    make_sale(product=product, quantity=20, unit_price=2500)
    make_sale(product=product, quantity=50, unit_price=2500, status="cancelled")

    order = client.post("/api/production", json={
        "product_id": product["id"], "planned_quantity": 1000, "start_date": today.isoformat(),
    }).json()
    client.patch(f"/api/production/{order['id']}/produced", json={"produced_quantity": 800})

    client.post("/api/stock", json={"product_id": product["id"], "current_quantity": 5,
                                    "min_threshold": 10, "max_threshold": 100})

    r = client.get("/api/reports")
    assert r.status_code == 200
    report = r.json()
    assert report["sales"] == {"total_revenue": 300000, "total_sales": 2, "avg_order_value": 150000}
    assert report["production"] == {"total_produced": 800, "production_orders": 1, "efficiency_rate": 80}
    assert report["stock"] == {"total_products": 1, "low_stock_items": 1, "total_value": 1250}
    assert len(report["monthly"]) == 6
    assert report["monthly"][-1]["sales"] == 300000
    assert report["monthly"][-1]["production"] == 800


def test_unknown_period(client):
    assert client.get("/api/reports", params={"period": "last_decade"}).status_code == 422


def test_csv_export(client, make_sale):
    make_sale(quantity=100, unit_price=2500)

    r = client.get("/api/reports/export/csv", params={"period": "current_year"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "rapport_current_year_" in r.headers["content-disposition"]

    rows = list(csv.reader(io.StringIO(r.text)))
    assert rows[0] == ["Indicateur", "Valeur"]
    values = dict(row for row in rows[1:13])
    assert values["Période"] == "Cette année"
    assert values["Chiffre d'affaires"] == "250000.0"
    assert values["Nombre de ventes"] == "1"
    assert ["Mois", "Ventes", "Production", "Dépenses"] in rows
