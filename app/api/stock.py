"""
Stock API - niveaux de stock et seuils
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database.connection import get_db
from app.models import StockRequest, StockResponse, StockSummaryResponse
from app.core.errors import http_error
from services.stock import StockService

router = APIRouter(prefix="/api/stock", tags=["Stock"])


def get_stock_service(db: Session = Depends(get_db)) -> StockService:
    return StockService(db)


@router.get("", response_model=List[StockResponse])
async def list_stock(
    search: Optional[str] = Query(None, description="Nom ou type de produit"),
    service: StockService = Depends(get_stock_service)
):
    """
    Lignes de stock avec leur niveau

    - **low**: quantité <= seuil minimum ("Stock faible")
    - **high**: quantité >= seuil maximum ("Stock élevé")
    - **normal**: entre les deux
    """
    return service.list_stock(search)


@router.get("/summary", response_model=StockSummaryResponse)
async def stock_summary(service: StockService = Depends(get_stock_service)):
    """Nombre de lignes, lignes en stock faible, valeur totale (quantité x prix)"""
    return service.summary()


@router.get("/{item_id}", response_model=StockResponse)
async def get_stock_item(item_id: int, service: StockService = Depends(get_stock_service)):
    item = service.get_item(item_id)
    if not item:
        raise HTTPException(status_code=404, detail=f"Stock item not found: {item_id}")
    return item


@router.post("", response_model=StockResponse, status_code=201)
async def create_stock_item(request: StockRequest, service: StockService = Depends(get_stock_service)):
    try:
        return service.create_item(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{item_id}", response_model=StockResponse)
async def update_stock_item(
    item_id: int,
    request: StockRequest,
    service: StockService = Depends(get_stock_service)
):
    try:
        item = service.update_item(item_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not item:
        raise HTTPException(status_code=404, detail=f"Stock item not found: {item_id}")
    return item


@router.delete("/{item_id}")
async def delete_stock_item(item_id: int, service: StockService = Depends(get_stock_service)):
    if not service.delete_item(item_id):
        raise HTTPException(status_code=404, detail=f"Stock item not found: {item_id}")
    return {"status": "deleted", "id": item_id}
