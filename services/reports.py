"""
Report Service - indicateurs de ventes, production, stock et tendance mensuelle
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import Sale, ProductionOrder, Expense
from app.core import ReportPeriod, SaleStatus
from services.common import (
    money, period_dates, day_range,
    month_bounds, shift_month, french_month_label,
)
from services.stock import StockService

logger = logging.getLogger(__name__)

TREND_MONTHS = 6


class ReportService:
    """Rapports agrégés par période"""

    def __init__(self, db: Session):
        self.db = db

    def generate(self, period: ReportPeriod = ReportPeriod.CURRENT_MONTH,
                 today: Optional[date] = None) -> Dict:
        period = ReportPeriod(period)
        today = today or date.today()
        start_date, end_date = period_dates(period, today)

        logger.info(f"📊 Report {period.value}: {start_date} -> {end_date}")

        return {
            'period': period.value,
            'period_label': period.label,
            'start_date': start_date,
            'end_date': end_date,
            'sales': self.sales_report(start_date, end_date),
            'production': self.production_report(start_date, end_date),
            'stock': self.stock_report(),
            'monthly': self.monthly_trend(today),
            'generated_at': datetime.now(),
        }

    def sales_report(self, start_date: date, end_date: date) -> Dict:
        """Chiffre d'affaires, nombre de ventes et panier moyen (ventes terminées)"""
        total_revenue, total_sales = self._sales_totals(start_date, end_date)
        return {
            'total_revenue': money(total_revenue),
            'total_sales': total_sales,
            'avg_order_value': money(total_revenue / total_sales) if total_sales else 0.0,
        }

    def production_report(self, start_date: date, end_date: date) -> Dict:
        """
        Quantité produite, nombre d'ordres et efficacité produit / planifié

        Les ordres sont rattachés à la période par leur start_date.
        """
        orders = self.db.query(ProductionOrder).filter(
            ProductionOrder.start_date >= start_date,
            ProductionOrder.start_date <= end_date
        ).all()

        produced = sum(o.produced_quantity or 0 for o in orders)
        planned = sum(o.planned_quantity or 0 for o in orders)

        return {
            'total_produced': produced,
            'production_orders': len(orders),
            'efficiency_rate': round(produced / planned * 100, 2) if planned else 0.0,
        }

    def stock_report(self) -> Dict:
        summary = StockService(self.db).summary()
        return {
            'total_products': summary['total_items'],
            'low_stock_items': summary['low_stock_items'],
            'total_value': summary['total_value'],
        }

    def monthly_trend(self, today: Optional[date] = None) -> List[Dict]:
        """Les 6 derniers mois, du plus ancien au plus récent"""
        today = today or date.today()
        trend = []

        for delta in range(TREND_MONTHS - 1, -1, -1):
            year, month = shift_month(today.year, today.month, -delta)
            start_date, end_date = month_bounds(year, month)

            revenue, _ = self._sales_totals(start_date, end_date)
            produced = self.db.query(
                func.coalesce(func.sum(ProductionOrder.produced_quantity), 0)
            ).filter(
                ProductionOrder.start_date >= start_date,
                ProductionOrder.start_date <= end_date
            ).scalar()
            expenses = self.db.query(
                func.coalesce(func.sum(Expense.amount), 0.0)
            ).filter(
                Expense.expense_date >= start_date,
                Expense.expense_date <= end_date
            ).scalar()

            trend.append({
                'month': french_month_label(year, month),
                'sales': money(revenue),
                'production': int(produced or 0),
                'expenses': money(expenses),
            })

        return trend

    @staticmethod
    def csv_rows(report: Dict) -> List[Tuple[str, object]]:
        """Lignes (Indicateur, Valeur) de l'export CSV"""
        sales = report['sales']
        production = report['production']
        stock = report['stock']
        return [
            ("Période", report['period_label']),
            ("Du", report['start_date'].isoformat()),
            ("Au", report['end_date'].isoformat()),
            ("Chiffre d'affaires", sales['total_revenue']),
            ("Nombre de ventes", sales['total_sales']),
            ("Panier moyen", sales['avg_order_value']),
            ("Quantité produite", production['total_produced']),
            ("Ordres de production", production['production_orders']),
            ("Efficacité production (%)", production['efficiency_rate']),
            ("Produits en stock", stock['total_products']),
            ("Produits en stock faible", stock['low_stock_items']),
            ("Valeur du stock", stock['total_value']),
        ]

    def _sales_totals(self, start_date: date, end_date: date) -> Tuple[float, int]:
        start_dt, end_dt = day_range(start_date, end_date)
        revenue, count = self.db.query(
            func.coalesce(func.sum(Sale.total_amount), 0.0),
            func.count(Sale.id)
        ).filter(
            Sale.status == SaleStatus.COMPLETED.value,
            Sale.sale_date >= start_dt,
            Sale.sale_date < end_dt
        ).one()
        return float(revenue or 0.0), int(count or 0)
