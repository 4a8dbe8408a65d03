"""
Sales API - ventes et facturation depuis la fiche vente
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from database.connection import get_db
from app.models import SaleRequest, SaleResponse, SaleInvoiceRequest, InvoiceResponse
from app.core import SaleStatus
from app.core.errors import http_error
from services.sales import SalesService
from services.invoices import InvoiceService

router = APIRouter(prefix="/api/sales", tags=["Sales"])


def get_sales_service(db: Session = Depends(get_db)) -> SalesService:
    return SalesService(db)


@router.get("", response_model=List[SaleResponse])
async def list_sales(
    search: Optional[str] = Query(None, description="Nom du client ou du produit"),
    status: Optional[SaleStatus] = Query(None),
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    service: SalesService = Depends(get_sales_service)
):
    """Ventes triées par date décroissante"""
    return service.list_sales(search=search, status=status, start_date=start_date, end_date=end_date)


@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(sale_id: int, service: SalesService = Depends(get_sales_service)):
    sale = service.get_sale(sale_id)
    if not sale:
        raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
    return sale


@router.post("", response_model=SaleResponse, status_code=201)
async def create_sale(request: SaleRequest, service: SalesService = Depends(get_sales_service)):
    """
    Enregistre une vente

    **Client:**
    - `client_id` d'un client existant, ou
    - `client_name` (+ email, adresse, téléphone optionnels): le client est créé d'abord

    Le montant total est calculé: quantité x prix unitaire.
    """
    try:
        return service.create_sale(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{sale_id}", response_model=SaleResponse)
async def update_sale(
    sale_id: int,
    request: SaleRequest,
    service: SalesService = Depends(get_sales_service)
):
    try:
        sale = service.update_sale(sale_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not sale:
        raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
    return sale


@router.delete("/{sale_id}")
async def delete_sale(sale_id: int, service: SalesService = Depends(get_sales_service)):
    try:
        deleted = service.delete_sale(sale_id)
    except Exception as e:
        raise http_error(e)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
    return {"status": "deleted", "id": sale_id}


@router.post("/{sale_id}/invoice", response_model=InvoiceResponse, status_code=201)
async def create_invoice_from_sale(
    sale_id: int,
    request: SaleInvoiceRequest,
    db: Session = Depends(get_db)
):
    """
    Facture la vente (brouillon)

    Par défaut: échéance à 30 jours, TVA au taux des paramètres.
    """
    try:
        return InvoiceService(db).create_from_sale(sale_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
