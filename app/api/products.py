"""
Products API - catalogue des produits
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database.connection import get_db
from app.models import ProductRequest, ProductResponse
from app.core.errors import http_error
from services.products import ProductService

router = APIRouter(prefix="/api/products", tags=["Products"])


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """ProductService dependency"""
    return ProductService(db)


@router.get("", response_model=List[ProductResponse])
async def list_products(
    search: Optional[str] = Query(None, description="Nom ou type"),
    service: ProductService = Depends(get_product_service)
):
    """Produits triés par nom"""
    return service.list_products(search)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    product = service.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")
    return product


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    request: ProductRequest,
    service: ProductService = Depends(get_product_service)
):
    try:
        return service.create_product(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    request: ProductRequest,
    service: ProductService = Depends(get_product_service)
):
    try:
        product = service.update_product(product_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not product:
        raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")
    return product


@router.delete("/{product_id}")
async def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    """
    Un produit encore référencé (stock, ventes...) ne peut pas être supprimé -> 409
    """
    try:
        deleted = service.delete_product(product_id)
    except Exception as e:
        raise http_error(e)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")
    return {"status": "deleted", "id": product_id}
