"""
Accounting Service - dépenses et résultat d'une période
"""
import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import Expense, Sale
from app.core import ReportPeriod, SaleStatus, ExpenseCategory
from services.common import matches, money, period_dates, day_range

logger = logging.getLogger(__name__)

ACCOUNTING_PERIODS = [
    ReportPeriod.CURRENT_MONTH,
    ReportPeriod.LAST_MONTH,
    ReportPeriod.CURRENT_YEAR,
]


class AccountingService:
    """
    Revenus = ventes terminées de la période
    Résultat net = revenus - dépenses
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def categories() -> List[str]:
        return ExpenseCategory.get_all_values()

    def period_bounds(self, period: ReportPeriod, today: Optional[date] = None):
        period = ReportPeriod(period)
        if period not in ACCOUNTING_PERIODS:
            raise ValueError(f"Unsupported accounting period: {period.value}")
        return period_dates(period, today)

    def list_expenses(
        self,
        period: ReportPeriod = ReportPeriod.CURRENT_MONTH,
        search: Optional[str] = None,
        today: Optional[date] = None
    ) -> List[Expense]:
        start_date, end_date = self.period_bounds(period, today)
        expenses = self.db.query(Expense).filter(
            Expense.expense_date >= start_date,
            Expense.expense_date <= end_date
        ).order_by(Expense.expense_date.desc(), Expense.id.desc()).all()

        return [e for e in expenses if matches(search, e.description, e.category)]

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        return self.db.query(Expense).filter(Expense.id == expense_id).first()

    def create_expense(self, data: Dict) -> Expense:
        expense = Expense(**self._clean(data))
        self.db.add(expense)
        self.db.commit()
        self.db.refresh(expense)
        logger.info(f"Expense recorded: {expense.amount} ({expense.category})")
        return expense

    def update_expense(self, expense_id: int, data: Dict) -> Optional[Expense]:
        expense = self.get_expense(expense_id)
        if not expense:
            return None
        for key, value in self._clean(data).items():
            setattr(expense, key, value)
        self.db.commit()
        self.db.refresh(expense)
        return expense

    def delete_expense(self, expense_id: int) -> bool:
        expense = self.get_expense(expense_id)
        if not expense:
            return False
        self.db.delete(expense)
        self.db.commit()
        return True

    def summary(self, period: ReportPeriod = ReportPeriod.CURRENT_MONTH,
                today: Optional[date] = None) -> Dict:
        """
        Revenus, dépenses, résultat net et top 5 des catégories de dépenses
        """
        period = ReportPeriod(period)
        start_date, end_date = self.period_bounds(period, today)
        start_dt, end_dt = day_range(start_date, end_date)

        revenue = self.db.query(func.coalesce(func.sum(Sale.total_amount), 0.0)).filter(
            Sale.status == SaleStatus.COMPLETED.value,
            Sale.sale_date >= start_dt,
            Sale.sale_date < end_dt
        ).scalar()

        expenses = self.db.query(Expense).filter(
            Expense.expense_date >= start_date,
            Expense.expense_date <= end_date
        ).all()

        by_category = defaultdict(float)
        for expense in expenses:
            by_category[expense.category] += expense.amount or 0.0

        total_expenses = sum(by_category.values())
        top_categories = sorted(by_category.items(), key=lambda x: x[1], reverse=True)[:5]

        return {
            'period': period.value,
            'period_label': period.label,
            'start_date': start_date,
            'end_date': end_date,
            'revenue': money(revenue),
            'total_expenses': money(total_expenses),
            'net_profit': money((revenue or 0.0) - total_expenses),
            'top_categories': [
                {'category': category, 'amount': money(amount)}
                for category, amount in top_categories
            ],
        }

    def _clean(self, data: Dict) -> Dict:
        cleaned = dict(data)
        for key in ('payment_method', 'description', 'notes'):
            cleaned[key] = cleaned.get(key) or None
        return cleaned
