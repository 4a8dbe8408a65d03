"""
Production API - ordres de production
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database.connection import get_db
from app.models import (
    ProductionOrderRequest,
    ProductionStatusRequest,
    ProducedQuantityRequest,
    ProductionOrderResponse,
)
from app.core.errors import http_error
from services.production import ProductionService

router = APIRouter(prefix="/api/production", tags=["Production"])


def get_production_service(db: Session = Depends(get_db)) -> ProductionService:
    return ProductionService(db)


@router.get("", response_model=List[ProductionOrderResponse])
async def list_orders(
    search: Optional[str] = Query(None, description="Nom ou type de produit"),
    service: ProductionService = Depends(get_production_service)
):
    """
    Ordres par date de début décroissante

    `progress` = produit / planifié x 100 (max 100, 0 si rien n'est planifié)
    """
    return service.list_orders(search)


@router.get("/{order_id}", response_model=ProductionOrderResponse)
async def get_order(order_id: int, service: ProductionService = Depends(get_production_service)):
    order = service.get_order(order_id)
    if not order:
        raise HTTPException(status_code=404, detail=f"Production order not found: {order_id}")
    return order


@router.post("", response_model=ProductionOrderResponse, status_code=201)
async def create_order(
    request: ProductionOrderRequest,
    service: ProductionService = Depends(get_production_service)
):
    try:
        return service.create_order(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{order_id}", response_model=ProductionOrderResponse)
async def update_order(
    order_id: int,
    request: ProductionOrderRequest,
    service: ProductionService = Depends(get_production_service)
):
    try:
        order = service.update_order(order_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not order:
        raise HTTPException(status_code=404, detail=f"Production order not found: {order_id}")
    return order


@router.patch("/{order_id}/status", response_model=ProductionOrderResponse)
async def set_order_status(
    order_id: int,
    request: ProductionStatusRequest,
    service: ProductionService = Depends(get_production_service)
):
    """Le passage à 'completed' renseigne la date de fin"""
    order = service.set_status(order_id, request.status)
    if not order:
        raise HTTPException(status_code=404, detail=f"Production order not found: {order_id}")
    return order


@router.patch("/{order_id}/produced", response_model=ProductionOrderResponse)
async def set_produced_quantity(
    order_id: int,
    request: ProducedQuantityRequest,
    service: ProductionService = Depends(get_production_service)
):
    order = service.set_produced_quantity(order_id, request.produced_quantity)
    if not order:
        raise HTTPException(status_code=404, detail=f"Production order not found: {order_id}")
    return order


@router.delete("/{order_id}")
async def delete_order(order_id: int, service: ProductionService = Depends(get_production_service)):
    if not service.delete_order(order_id):
        raise HTTPException(status_code=404, detail=f"Production order not found: {order_id}")
    return {"status": "deleted", "id": order_id}
