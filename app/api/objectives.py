"""
Objectives API - objectifs et suivi
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Dict, List, Optional

from database.connection import get_db
from app.models import (
    ObjectiveRequest,
    CurrentValueRequest,
    ObjectiveStatusRequest,
    ObjectiveResponse,
    CategoryStats,
)
from app.core.errors import http_error
from services.objectives import ObjectiveService

router = APIRouter(prefix="/api/objectives", tags=["Objectives"])


def get_objective_service(db: Session = Depends(get_db)) -> ObjectiveService:
    return ObjectiveService(db)


@router.get("", response_model=List[ObjectiveResponse])
async def list_objectives(
    search: Optional[str] = Query(None, description="Titre ou catégorie"),
    service: ObjectiveService = Depends(get_objective_service)
):
    return service.list_objectives(search)


@router.get("/stats", response_model=Dict[str, CategoryStats])
async def objective_stats(service: ObjectiveService = Depends(get_objective_service)):
    """{catégorie: {total, completed}}"""
    return service.category_stats()


@router.get("/{objective_id}", response_model=ObjectiveResponse)
async def get_objective(objective_id: int, service: ObjectiveService = Depends(get_objective_service)):
    objective = service.get_objective(objective_id)
    if not objective:
        raise HTTPException(status_code=404, detail=f"Objective not found: {objective_id}")
    return objective


@router.post("", response_model=ObjectiveResponse, status_code=201)
async def create_objective(
    request: ObjectiveRequest,
    service: ObjectiveService = Depends(get_objective_service)
):
    try:
        return service.create_objective(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{objective_id}", response_model=ObjectiveResponse)
async def update_objective(
    objective_id: int,
    request: ObjectiveRequest,
    service: ObjectiveService = Depends(get_objective_service)
):
    try:
        objective = service.update_objective(objective_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not objective:
        raise HTTPException(status_code=404, detail=f"Objective not found: {objective_id}")
    return objective


@router.patch("/{objective_id}/current-value", response_model=ObjectiveResponse)
async def update_current_value(
    objective_id: int,
    request: CurrentValueRequest,
    service: ObjectiveService = Depends(get_objective_service)
):
    """Un objectif actif qui atteint sa cible passe à 'completed'"""
    objective = service.update_current_value(objective_id, request.current_value)
    if not objective:
        raise HTTPException(status_code=404, detail=f"Objective not found: {objective_id}")
    return objective


@router.patch("/{objective_id}/status", response_model=ObjectiveResponse)
async def set_objective_status(
    objective_id: int,
    request: ObjectiveStatusRequest,
    service: ObjectiveService = Depends(get_objective_service)
):
    objective = service.set_status(objective_id, request.status)
    if not objective:
        raise HTTPException(status_code=404, detail=f"Objective not found: {objective_id}")
    return objective


@router.delete("/{objective_id}")
async def delete_objective(objective_id: int, service: ObjectiveService = Depends(get_objective_service)):
    if not service.delete_objective(objective_id):
        raise HTTPException(status_code=404, detail=f"Objective not found: {objective_id}")
    return {"status": "deleted", "id": objective_id}
