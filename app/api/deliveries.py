"""
Deliveries API - livraisons des ventes terminées
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database.connection import get_db
from app.models import DeliveryRequest, DeliveryStatusRequest, DeliveryResponse, SaleResponse
from app.core.errors import http_error
from services.deliveries import DeliveryService

router = APIRouter(prefix="/api/deliveries", tags=["Deliveries"])


def get_delivery_service(db: Session = Depends(get_db)) -> DeliveryService:
    return DeliveryService(db)


@router.get("", response_model=List[DeliveryResponse])
async def list_deliveries(
    search: Optional[str] = Query(None, description="Client, chauffeur ou adresse"),
    service: DeliveryService = Depends(get_delivery_service)
):
    return service.list_deliveries(search)


@router.get("/eligible-sales", response_model=List[SaleResponse])
async def eligible_sales(service: DeliveryService = Depends(get_delivery_service)):
    """Ventes terminées sans livraison"""
    return service.eligible_sales()


@router.get("/{delivery_id}", response_model=DeliveryResponse)
async def get_delivery(delivery_id: int, service: DeliveryService = Depends(get_delivery_service)):
    delivery = service.get_delivery(delivery_id)
    if not delivery:
        raise HTTPException(status_code=404, detail=f"Delivery not found: {delivery_id}")
    return delivery


@router.post("", response_model=DeliveryResponse, status_code=201)
async def create_delivery(request: DeliveryRequest, service: DeliveryService = Depends(get_delivery_service)):
    """Une seule livraison par vente (409 sinon)"""
    try:
        return service.create_delivery(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{delivery_id}", response_model=DeliveryResponse)
async def update_delivery(
    delivery_id: int,
    request: DeliveryRequest,
    service: DeliveryService = Depends(get_delivery_service)
):
    try:
        delivery = service.update_delivery(delivery_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not delivery:
        raise HTTPException(status_code=404, detail=f"Delivery not found: {delivery_id}")
    return delivery


@router.patch("/{delivery_id}/status", response_model=DeliveryResponse)
async def set_delivery_status(
    delivery_id: int,
    request: DeliveryStatusRequest,
    service: DeliveryService = Depends(get_delivery_service)
):
    delivery = service.set_status(delivery_id, request.status)
    if not delivery:
        raise HTTPException(status_code=404, detail=f"Delivery not found: {delivery_id}")
    return delivery


@router.delete("/{delivery_id}")
async def delete_delivery(delivery_id: int, service: DeliveryService = Depends(get_delivery_service)):
    if not service.delete_delivery(delivery_id):
        raise HTTPException(status_code=404, detail=f"Delivery not found: {delivery_id}")
    return {"status": "deleted", "id": delivery_id}
