"""
Helpers partagés par les services
"""
import calendar
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from app.core.enums import ReportPeriod


class ConflictError(Exception):
    """Écriture refusée car elle violerait une règle d'unicité métier"""


def matches(search: Optional[str], *values: Optional[str]) -> bool:
    """
    Recherche insensible à la casse sur plusieurs champs

    Une recherche vide laisse passer toutes les lignes.
    """
    if not search:
        return True
    term = search.lower()
    return any(value and term in value.lower() for value in values)


def money(value: Optional[float]) -> float:
    return round(value or 0.0, 2)


def percentage(part: float, whole: float) -> float:
    """part / whole * 100 plafonné à 100, 0 si whole vaut 0"""
    if not whole:
        return 0.0
    return min(part / whole * 100, 100.0)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """Premier et dernier jour du mois"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def period_dates(period: ReportPeriod, today: Optional[date] = None) -> Tuple[date, date]:
    """
    Bornes (incluses) d'une période de rapport
    """
    today = today or date.today()

    if period == ReportPeriod.LAST_MONTH:
        year, month = shift_month(today.year, today.month, -1)
        return month_bounds(year, month)

    if period == ReportPeriod.CURRENT_QUARTER:
        quarter = (today.month - 1) // 3
        start = date(today.year, quarter * 3 + 1, 1)
        end = month_bounds(today.year, quarter * 3 + 3)[1]
        return start, end

    if period == ReportPeriod.CURRENT_YEAR:
        return date(today.year, 1, 1), date(today.year, 12, 31)

    return month_bounds(today.year, today.month)


def day_range(start: date, end: date) -> Tuple[datetime, datetime]:
    """
    [start 00:00, end+1 00:00) pour filtrer des colonnes DateTime
    """
    start_dt = datetime.combine(start, datetime.min.time())
    end_dt = datetime.combine(end, datetime.min.time()) + timedelta(days=1)
    return start_dt, end_dt


FRENCH_MONTHS_SHORT = [
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
]


def french_month_label(year: int, month: int) -> str:
    """ex: 'janv. 2025'"""
    return f"{FRENCH_MONTHS_SHORT[month - 1]} {year}"
