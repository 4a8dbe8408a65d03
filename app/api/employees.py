"""
Employees API - personnel et heures supplémentaires
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Dict, List, Optional

from database.connection import get_db
from app.models import (
    EmployeeRequest,
    EmployeeResponse,
    OvertimeRequest,
    OvertimeResponse,
    OvertimeSummaryResponse,
)
from app.core.errors import http_error
from services.employees import EmployeeService

router = APIRouter(prefix="/api/employees", tags=["Employees"])


def get_employee_service(db: Session = Depends(get_db)) -> EmployeeService:
    return EmployeeService(db)


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(
    search: Optional[str] = Query(None, description="Prénom, nom, email ou rôle"),
    service: EmployeeService = Depends(get_employee_service)
):
    """Employés triés par prénom"""
    return service.list_employees(search)


@router.get("/roles/stats", response_model=Dict[str, int])
async def role_stats(service: EmployeeService = Depends(get_employee_service)):
    """Nombre d'employés actifs par rôle"""
    return service.role_stats()


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    employee = service.get_employee(employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail=f"Employee not found: {employee_id}")
    return employee


@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(request: EmployeeRequest, service: EmployeeService = Depends(get_employee_service)):
    try:
        return service.create_employee(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: int,
    request: EmployeeRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    try:
        employee = service.update_employee(employee_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not employee:
        raise HTTPException(status_code=404, detail=f"Employee not found: {employee_id}")
    return employee


@router.post("/{employee_id}/toggle-active", response_model=EmployeeResponse)
async def toggle_active(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    employee = service.toggle_active(employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail=f"Employee not found: {employee_id}")
    return employee


@router.delete("/{employee_id}")
async def delete_employee(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    if not service.delete_employee(employee_id):
        raise HTTPException(status_code=404, detail=f"Employee not found: {employee_id}")
    return {"status": "deleted", "id": employee_id}


# ============================================================================
# HEURES SUPPLÉMENTAIRES
# ============================================================================

@router.get("/{employee_id}/overtime", response_model=List[OvertimeResponse])
async def list_overtime(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    entries = service.list_overtime(employee_id)
    if entries is None:
        raise HTTPException(status_code=404, detail=f"Employee not found: {employee_id}")
    return entries


@router.post("/{employee_id}/overtime", response_model=OvertimeResponse, status_code=201)
async def add_overtime(
    employee_id: int,
    request: OvertimeRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    """total = heures x taux horaire"""
    try:
        entry = service.add_overtime(employee_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Employee not found: {employee_id}")
    return entry


@router.get("/{employee_id}/overtime/summary", response_model=OvertimeSummaryResponse)
async def overtime_summary(
    employee_id: int,
    year: Optional[int] = Query(None, description="Année (courante par défaut)"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Mois (courant par défaut)"),
    service: EmployeeService = Depends(get_employee_service)
):
    try:
        summary = service.overtime_summary(employee_id, year=year, month=month)
    except Exception as e:
        raise http_error(e)
    if summary is None:
        raise HTTPException(status_code=404, detail=f"Employee not found: {employee_id}")
    return summary


@router.delete("/{employee_id}/overtime/{overtime_id}")
async def delete_overtime(
    employee_id: int,
    overtime_id: int,
    service: EmployeeService = Depends(get_employee_service)
):
    if not service.delete_overtime(employee_id, overtime_id):
        raise HTTPException(status_code=404, detail=f"Overtime entry not found: {overtime_id}")
    return {"status": "deleted", "id": overtime_id}
