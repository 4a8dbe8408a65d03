"""
Catalog API - FAQ et modules du tableau de bord
"""
from fastapi import APIRouter, Query
from typing import List, Optional

from app.models import FaqItem, DashboardModule
from app.core import EmployeeRole
from services.catalog import search_faq, dashboard_modules

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get("/faq", response_model=List[FaqItem])
async def get_faq(search: Optional[str] = Query(None, description="Question ou réponse")):
    return search_faq(search)


@router.get("/dashboard/modules", response_model=List[DashboardModule])
async def get_dashboard_modules(role: Optional[EmployeeRole] = Query(None)):
    """Modules de l'application, filtrés par rôle si demandé"""
    return dashboard_modules(role)
