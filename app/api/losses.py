"""
Losses API - pertes et casses
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from database.connection import get_db
from app.models import LossRequest, LossResponse, LossListResponse
from app.core.errors import http_error
from services.losses import LossService

router = APIRouter(prefix="/api/losses", tags=["Losses"])


def get_loss_service(db: Session = Depends(get_db)) -> LossService:
    return LossService(db)


@router.get("", response_model=LossListResponse)
async def list_losses(
    search: Optional[str] = Query(None, description="Nom du produit ou type de perte"),
    service: LossService = Depends(get_loss_service)
):
    """Pertes par date décroissante et valeur totale perdue"""
    return service.list_losses(search)


@router.get("/{loss_id}", response_model=LossResponse)
async def get_loss(loss_id: int, service: LossService = Depends(get_loss_service)):
    loss = service.get_loss(loss_id)
    if not loss:
        raise HTTPException(status_code=404, detail=f"Loss not found: {loss_id}")
    return loss


@router.post("", response_model=LossResponse, status_code=201)
async def create_loss(request: LossRequest, service: LossService = Depends(get_loss_service)):
    """value_lost = quantité x prix du produit"""
    try:
        return service.create_loss(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{loss_id}", response_model=LossResponse)
async def update_loss(loss_id: int, request: LossRequest, service: LossService = Depends(get_loss_service)):
    try:
        loss = service.update_loss(loss_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not loss:
        raise HTTPException(status_code=404, detail=f"Loss not found: {loss_id}")
    return loss


@router.delete("/{loss_id}")
async def delete_loss(loss_id: int, service: LossService = Depends(get_loss_service)):
    if not service.delete_loss(loss_id):
        raise HTTPException(status_code=404, detail=f"Loss not found: {loss_id}")
    return {"status": "deleted", "id": loss_id}
