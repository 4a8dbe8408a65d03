"""
Invoices API - factures, document imprimable, retards
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database.connection import get_db
from app.models import (
    InvoiceRequest,
    InvoiceStatusRequest,
    InvoiceResponse,
    InvoiceDocumentResponse,
    SaleResponse,
)
from app.core.errors import http_error
from services.invoices import InvoiceService

router = APIRouter(prefix="/api/invoices", tags=["Invoices"])


def get_invoice_service(db: Session = Depends(get_db)) -> InvoiceService:
    return InvoiceService(db)


@router.get("", response_model=List[InvoiceResponse])
async def list_invoices(
    search: Optional[str] = Query(None, description="Numéro de facture ou nom du client"),
    service: InvoiceService = Depends(get_invoice_service)
):
    """
    Factures par date d'émission décroissante

    Montants: HT (`amount_ht`), TVA (`tax_amount`), TTC (`total_amount`)
    """
    return service.list_invoices(search)


@router.get("/eligible-sales", response_model=List[SaleResponse])
async def eligible_sales(service: InvoiceService = Depends(get_invoice_service)):
    """Ventes terminées sans facture"""
    return service.eligible_sales()


@router.post("/mark-overdue")
async def mark_overdue(service: InvoiceService = Depends(get_invoice_service)):
    """Factures envoyées dont l'échéance est passée -> 'overdue'"""
    try:
        return {"overdue": service.mark_overdue()}
    except Exception as e:
        raise http_error(e)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(invoice_id: int, service: InvoiceService = Depends(get_invoice_service)):
    invoice = service.get_invoice(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail=f"Invoice not found: {invoice_id}")
    return invoice


@router.get("/{invoice_id}/document", response_model=InvoiceDocumentResponse)
async def invoice_document(invoice_id: int, service: InvoiceService = Depends(get_invoice_service)):
    """
    Données du document imprimable

    En-tête société (paramètres), client, lignes "<produit> (<type>)",
    sous-total, TVA au taux de la facture, total TTC.
    """
    document = service.document(invoice_id)
    if not document:
        raise HTTPException(status_code=404, detail=f"Invoice not found: {invoice_id}")
    return document


@router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(request: InvoiceRequest, service: InvoiceService = Depends(get_invoice_service)):
    """
    Crée une facture pour une vente

    - TVA = total vente x taux / 100 (taux des paramètres si absent)
    - Numéro FAC-YYYYMM-NNN
    - Une seule facture par vente (409 sinon)
    """
    try:
        return service.create_invoice(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: int,
    request: InvoiceRequest,
    service: InvoiceService = Depends(get_invoice_service)
):
    """Recalcule les montants, conserve le numéro"""
    try:
        invoice = service.update_invoice(invoice_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not invoice:
        raise HTTPException(status_code=404, detail=f"Invoice not found: {invoice_id}")
    return invoice


@router.patch("/{invoice_id}/status", response_model=InvoiceResponse)
async def set_invoice_status(
    invoice_id: int,
    request: InvoiceStatusRequest,
    service: InvoiceService = Depends(get_invoice_service)
):
    invoice = service.set_status(invoice_id, request.status)
    if not invoice:
        raise HTTPException(status_code=404, detail=f"Invoice not found: {invoice_id}")
    return invoice


@router.delete("/{invoice_id}")
async def delete_invoice(invoice_id: int, service: InvoiceService = Depends(get_invoice_service)):
    if not service.delete_invoice(invoice_id):
        raise HTTPException(status_code=404, detail=f"Invoice not found: {invoice_id}")
    return {"status": "deleted", "id": invoice_id}
