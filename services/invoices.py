"""
Invoice Service - facturation des ventes terminées

Montants:
    tax_amount   = sale.total_amount * tax_rate / 100
    total_amount = sale.total_amount + tax_amount   (TTC)
    HT           = total_amount - tax_amount
"""
import logging
import random
from datetime import date, timedelta
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, joinedload

from database import Invoice, Sale
from app.core import InvoiceStatus, SaleStatus
from app.core.config import get_settings
from services.common import ConflictError, matches, money
from services.company_settings import CompanySettingsService
from services.sales import SalesService

logger = logging.getLogger(__name__)

MAX_NUMBER_ATTEMPTS = 1000


def derive_tax_rate(total_amount: float, tax_amount: float) -> float:
    """Taux d'une facture stockée: tax / (total - tax) * 100, 0 si la base est nulle"""
    base = (total_amount or 0.0) - (tax_amount or 0.0)
    if base <= 0:
        return 0.0
    return round(tax_amount / base * 100, 2)


class InvoiceService:
    """Factures, numérotation FAC-YYYYMM-NNN et document imprimable"""

    def __init__(self, db: Session):
        self.db = db

    def list_invoices(self, search: Optional[str] = None) -> List[Dict]:
        """
        Factures triées par date d'émission décroissante

        Recherche sur le numéro de facture et le nom du client.
        """
        invoices = self._query().order_by(
            Invoice.issue_date.desc(), Invoice.id.desc()
        ).all()
        invoices = [
            inv for inv in invoices
            if matches(search, inv.invoice_number,
                       inv.sale.client.name if inv.sale and inv.sale.client else None)
        ]
        return [self._serialize(inv) for inv in invoices]

    def get_invoice(self, invoice_id: int) -> Optional[Dict]:
        invoice = self._get(invoice_id)
        return self._serialize(invoice) if invoice else None

    def eligible_sales(self) -> List[Dict]:
        """Ventes terminées qui n'ont pas encore de facture"""
        sales = self.db.query(Sale).options(
            joinedload(Sale.client),
            joinedload(Sale.product),
        ).outerjoin(Invoice, Invoice.sale_id == Sale.id).filter(
            Sale.status == SaleStatus.COMPLETED.value,
            Invoice.id.is_(None)
        ).order_by(Sale.sale_date.desc()).all()

        return [SalesService.serialize(s) for s in sales]

    def create_invoice(self, data: Dict) -> Dict:
        """
        Facture une vente existante

        Raises:
            LookupError: vente inconnue
            ValueError: la vente n'est pas terminée
            ConflictError: la vente a déjà une facture
        """
        sale = self._get_sale(data['sale_id'])
        self._require_completed(sale)
        if sale.invoice is not None:
            raise ConflictError(f"Sale {sale.id} already has an invoice ({sale.invoice.invoice_number})")

        tax_rate = self._resolve_tax_rate(data.get('tax_rate'))
        tax_amount, total_amount = self.compute_amounts(sale.total_amount, tax_rate)

        try:
            invoice = Invoice(
                sale_id=sale.id,
                invoice_number=self.generate_invoice_number(),
                issue_date=date.today(),
                due_date=data['due_date'],
                status=InvoiceStatus(data.get('status') or InvoiceStatus.DRAFT).value,
                tax_rate=tax_rate,
                tax_amount=tax_amount,
                total_amount=total_amount,
                notes=data.get('notes') or None,
            )
            self.db.add(invoice)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(invoice)
        logger.info(f"🧾 Invoice {invoice.invoice_number} created for sale {sale.id}: {invoice.total_amount} TTC")
        return self._serialize(invoice)

    def create_from_sale(self, sale_id: int, data: Dict) -> Dict:
        """
        Facture depuis la fiche vente: échéance par défaut aujourd'hui + 30 jours,
        taux par défaut celui des paramètres, statut brouillon
        """
        due_date = data.get('due_date') or (
            date.today() + timedelta(days=get_settings().invoice_due_days)
        )
        return self.create_invoice({
            'sale_id': sale_id,
            'due_date': due_date,
            'status': InvoiceStatus.DRAFT,
            'tax_rate': data.get('tax_rate'),
            'notes': data.get('notes'),
        })

    def update_invoice(self, invoice_id: int, data: Dict) -> Optional[Dict]:
        """Recalcule les taxes à partir de la vente, garde le numéro"""
        invoice = self._get(invoice_id)
        if not invoice:
            return None

        sale = self._get_sale(data['sale_id'])
        if sale.id != invoice.sale_id:
            self._require_completed(sale)
        if sale.invoice is not None and sale.invoice.id != invoice.id:
            raise ConflictError(f"Sale {sale.id} already has an invoice ({sale.invoice.invoice_number})")

        tax_rate = self._resolve_tax_rate(data.get('tax_rate'))
        tax_amount, total_amount = self.compute_amounts(sale.total_amount, tax_rate)

        try:
            invoice.sale_id = sale.id
            invoice.due_date = data['due_date']
            invoice.status = InvoiceStatus(data.get('status') or invoice.status).value
            invoice.tax_rate = tax_rate
            invoice.tax_amount = tax_amount
            invoice.total_amount = total_amount
            invoice.notes = data.get('notes') or None
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(invoice)
        return self._serialize(invoice)

    def set_status(self, invoice_id: int, status: InvoiceStatus) -> Optional[Dict]:
        invoice = self._get(invoice_id)
        if not invoice:
            return None
        invoice.status = InvoiceStatus(status).value
        self.db.commit()
        self.db.refresh(invoice)
        logger.info(f"Invoice {invoice.invoice_number} -> {invoice.status}")
        return self._serialize(invoice)

    def delete_invoice(self, invoice_id: int) -> bool:
        invoice = self._get(invoice_id)
        if not invoice:
            return False
        self.db.delete(invoice)
        self.db.commit()
        return True

    def document(self, invoice_id: int) -> Optional[Dict]:
        """
        Document imprimable: en-tête société, client, lignes, sous-total, TVA, TTC
        """
        invoice = self._get(invoice_id)
        if not invoice:
            return None

        company = CompanySettingsService(self.db).get()
        sale = invoice.sale
        product = sale.product if sale else None
        client = sale.client if sale else None

        items = []
        if sale:
            designation = product.name if product else ""
            if product and product.type:
                designation = f"{designation} ({product.type})"
            items.append({
                'designation': designation,
                'quantity': sale.quantity,
                'unit_price': money(sale.unit_price),
                'total': money(sale.total_amount),
            })

        subtotal = money(sum(item['total'] for item in items))
        tax_rate = self._invoice_rate(invoice)
        tax_amount = money(subtotal * tax_rate / 100)

        return {
            'company': {
                'name': company.company_name or "",
                'address': company.address or "",
                'phone': company.phone or "",
                'email': company.email or "",
            },
            'invoice_number': invoice.invoice_number,
            'date': invoice.issue_date,
            'due_date': invoice.due_date,
            'client_name': client.name if client else "",
            'client_address': client.address if client else None,
            'items': items,
            'subtotal': subtotal,
            'tax_rate': tax_rate,
            'tax_amount': tax_amount,
            'total_ttc': money(subtotal + tax_amount),
        }

    def mark_overdue(self, today: Optional[date] = None) -> int:
        """
        Factures envoyées dont l'échéance est passée -> 'overdue'
        """
        today = today or date.today()
        invoices = self.db.query(Invoice).filter(
            Invoice.status == InvoiceStatus.SENT.value,
            Invoice.due_date < today
        ).all()

        for invoice in invoices:
            invoice.status = InvoiceStatus.OVERDUE.value
        self.db.commit()

        if invoices:
            logger.info(f"⏰ {len(invoices)} invoice(s) marked as overdue")
        return len(invoices)

    def generate_invoice_number(self, today: Optional[date] = None) -> str:
        """
        FAC-YYYYMM-NNN, NNN tiré au hasard et retiré tant qu'il existe déjà
        """
        today = today or date.today()
        prefix = f"FAC-{today.strftime('%Y%m')}-"

        for _ in range(MAX_NUMBER_ATTEMPTS):
            number = f"{prefix}{random.randint(0, 999):03d}"
            exists = self.db.query(Invoice.id).filter(Invoice.invoice_number == number).first()
            if not exists:
                return number

        raise ConflictError(f"No free invoice number left for {prefix}NNN")

    @staticmethod
    def compute_amounts(sale_total: float, tax_rate: float):
        """(tax_amount, total_amount TTC)"""
        tax_amount = money((sale_total or 0.0) * tax_rate / 100)
        return tax_amount, money((sale_total or 0.0) + tax_amount)

    def _resolve_tax_rate(self, tax_rate: Optional[float]) -> float:
        if tax_rate is None:
            return CompanySettingsService(self.db).tax_rate()
        return tax_rate

    def _invoice_rate(self, invoice: Invoice) -> float:
        if invoice.tax_rate is not None:
            return invoice.tax_rate
        return derive_tax_rate(invoice.total_amount, invoice.tax_amount)

    def _query(self):
        return self.db.query(Invoice).options(
            joinedload(Invoice.sale).joinedload(Sale.client),
            joinedload(Invoice.sale).joinedload(Sale.product),
        )

    def _get(self, invoice_id: int) -> Optional[Invoice]:
        return self._query().filter(Invoice.id == invoice_id).first()

    def _get_sale(self, sale_id: int) -> Sale:
        sale = self.db.query(Sale).filter(Sale.id == sale_id).first()
        if not sale:
            raise LookupError(f"Sale not found: {sale_id}")
        return sale

    @staticmethod
    def _require_completed(sale: Sale):
        if sale.status != SaleStatus.COMPLETED.value:
            raise ValueError(f"Only completed sales can be invoiced (sale {sale.id} is {sale.status})")

    def _serialize(self, invoice: Invoice) -> Dict:
        status = InvoiceStatus(invoice.status)
        sale = invoice.sale
        client = sale.client if sale else None
        product = sale.product if sale else None
        return {
            'id': invoice.id,
            'sale_id': invoice.sale_id,
            'invoice_number': invoice.invoice_number,
            'issue_date': invoice.issue_date,
            'due_date': invoice.due_date,
            'status': status,
            'status_label': status.label,
            'amount_ht': money((invoice.total_amount or 0.0) - (invoice.tax_amount or 0.0)),
            'tax_amount': money(invoice.tax_amount),
            'total_amount': money(invoice.total_amount),
            'tax_rate': self._invoice_rate(invoice),
            'notes': invoice.notes,
            'client_name': client.name if client else None,
            'client_email': client.email if client else None,
            'product_name': product.name if product else None,
            'product_type': product.type if product else None,
            'quantity': sale.quantity if sale else None,
            'unit_price': money(sale.unit_price) if sale else None,
        }
