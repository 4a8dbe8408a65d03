"""
Accounting API - dépenses et résultat par période
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database.connection import get_db
from app.models import ExpenseRequest, ExpenseResponse, AccountingSummaryResponse
from app.core import ReportPeriod
from app.core.errors import http_error
from services.accounting import AccountingService

router = APIRouter(prefix="/api/accounting", tags=["Accounting"])


def get_accounting_service(db: Session = Depends(get_db)) -> AccountingService:
    return AccountingService(db)


@router.get("/categories", response_model=List[str])
async def expense_categories():
    """Catégories proposées pour les dépenses"""
    return AccountingService.categories()


@router.get("/summary", response_model=AccountingSummaryResponse)
async def accounting_summary(
    period: ReportPeriod = Query(ReportPeriod.CURRENT_MONTH, description="current_month, last_month, current_year"),
    service: AccountingService = Depends(get_accounting_service)
):
    """
    Résultat de la période

    - Revenus: ventes terminées
    - Dépenses: total + top 5 catégories
    - Résultat net: revenus - dépenses
    """
    try:
        return service.summary(period)
    except Exception as e:
        raise http_error(e)


@router.get("/expenses", response_model=List[ExpenseResponse])
async def list_expenses(
    period: ReportPeriod = Query(ReportPeriod.CURRENT_MONTH),
    search: Optional[str] = Query(None, description="Description ou catégorie"),
    service: AccountingService = Depends(get_accounting_service)
):
    try:
        return service.list_expenses(period=period, search=search)
    except Exception as e:
        raise http_error(e)


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
async def create_expense(
    request: ExpenseRequest,
    service: AccountingService = Depends(get_accounting_service)
):
    try:
        return service.create_expense(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/expenses/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    request: ExpenseRequest,
    service: AccountingService = Depends(get_accounting_service)
):
    try:
        expense = service.update_expense(expense_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not expense:
        raise HTTPException(status_code=404, detail=f"Expense not found: {expense_id}")
    return expense


@router.delete("/expenses/{expense_id}")
async def delete_expense(expense_id: int, service: AccountingService = Depends(get_accounting_service)):
    if not service.delete_expense(expense_id):
        raise HTTPException(status_code=404, detail=f"Expense not found: {expense_id}")
    return {"status": "deleted", "id": expense_id}
