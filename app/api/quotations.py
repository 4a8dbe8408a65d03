"""
Quotations API - devis et conversion en vente
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database.connection import get_db
from app.models import QuotationRequest, QuotationResponse, SaleResponse
from app.core.errors import http_error
from services.quotations import QuotationService

router = APIRouter(prefix="/api/quotations", tags=["Quotations"])


def get_quotation_service(db: Session = Depends(get_db)) -> QuotationService:
    return QuotationService(db)


@router.get("", response_model=List[QuotationResponse])
async def list_quotations(
    search: Optional[str] = Query(None, description="Nom du client ou du produit"),
    service: QuotationService = Depends(get_quotation_service)
):
    return service.list_quotations(search)


@router.post("/expire")
async def expire_quotations(service: QuotationService = Depends(get_quotation_service)):
    """Passe à 'expired' les devis brouillon/envoyés dont la validité est dépassée"""
    try:
        return {"expired": service.expire_quotations()}
    except Exception as e:
        raise http_error(e)


@router.get("/{quotation_id}", response_model=QuotationResponse)
async def get_quotation(quotation_id: int, service: QuotationService = Depends(get_quotation_service)):
    quotation = service.get_quotation(quotation_id)
    if not quotation:
        raise HTTPException(status_code=404, detail=f"Quotation not found: {quotation_id}")
    return quotation


@router.post("", response_model=QuotationResponse, status_code=201)
async def create_quotation(
    request: QuotationRequest,
    service: QuotationService = Depends(get_quotation_service)
):
    try:
        return service.create_quotation(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{quotation_id}", response_model=QuotationResponse)
async def update_quotation(
    quotation_id: int,
    request: QuotationRequest,
    service: QuotationService = Depends(get_quotation_service)
):
    try:
        quotation = service.update_quotation(quotation_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not quotation:
        raise HTTPException(status_code=404, detail=f"Quotation not found: {quotation_id}")
    return quotation


@router.delete("/{quotation_id}")
async def delete_quotation(quotation_id: int, service: QuotationService = Depends(get_quotation_service)):
    if not service.delete_quotation(quotation_id):
        raise HTTPException(status_code=404, detail=f"Quotation not found: {quotation_id}")
    return {"status": "deleted", "id": quotation_id}


@router.post("/{quotation_id}/convert", response_model=SaleResponse, status_code=201)
async def convert_quotation(
    quotation_id: int,
    service: QuotationService = Depends(get_quotation_service)
):
    """
    Convertit le devis en vente 'pending' et le marque 'accepted'

    Un devis déjà accepté -> 409
    """
    try:
        sale = service.convert_to_sale(quotation_id)
    except Exception as e:
        raise http_error(e)
    if not sale:
        raise HTTPException(status_code=404, detail=f"Quotation not found: {quotation_id}")
    return sale
