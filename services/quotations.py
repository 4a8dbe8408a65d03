"""
Quotation Service - devis, conversion en vente, expiration
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, joinedload

from database import Quotation, Sale, Client, Product
from app.core import QuotationStatus, SaleStatus
from services.common import ConflictError, matches, money
from services.sales import SalesService

logger = logging.getLogger(__name__)


class QuotationService:
    """Création et gestion des devis"""

    def __init__(self, db: Session):
        self.db = db

    def list_quotations(self, search: Optional[str] = None) -> List[Dict]:
        quotations = self.db.query(Quotation).options(
            joinedload(Quotation.client),
            joinedload(Quotation.product),
        ).order_by(Quotation.created_at.desc(), Quotation.id.desc()).all()

        quotations = [
            q for q in quotations
            if matches(search,
                       q.client.name if q.client else None,
                       q.product.name if q.product else None)
        ]
        return [self._serialize(q) for q in quotations]

    def get_quotation(self, quotation_id: int) -> Optional[Dict]:
        quotation = self._get(quotation_id)
        return self._serialize(quotation) if quotation else None

    def create_quotation(self, data: Dict) -> Dict:
        self._check_refs(data)
        quotation = Quotation(**self._fields(data))
        self.db.add(quotation)
        self.db.commit()
        self.db.refresh(quotation)
        logger.info(f"Quotation created: {quotation.id} ({quotation.total_amount})")
        return self._serialize(quotation)

    def update_quotation(self, quotation_id: int, data: Dict) -> Optional[Dict]:
        quotation = self._get(quotation_id)
        if not quotation:
            return None
        self._check_refs(data)
        for key, value in self._fields(data).items():
            setattr(quotation, key, value)
        self.db.commit()
        self.db.refresh(quotation)
        return self._serialize(quotation)

    def delete_quotation(self, quotation_id: int) -> bool:
        quotation = self._get(quotation_id)
        if not quotation:
            return False
        self.db.delete(quotation)
        self.db.commit()
        return True

    def convert_to_sale(self, quotation_id: int) -> Optional[Dict]:
        """
        Crée une vente 'pending' à partir du devis et marque le devis 'accepted'

        Les deux écritures sont validées dans la même transaction.
        """
        quotation = self._get(quotation_id)
        if not quotation:
            return None
        if quotation.status == QuotationStatus.ACCEPTED.value:
            raise ConflictError(f"Quotation {quotation_id} is already accepted")

        try:
            sale = Sale(
                client_id=quotation.client_id,
                product_id=quotation.product_id,
                quantity=quotation.quantity,
                unit_price=quotation.unit_price,
                total_amount=quotation.total_amount,
                status=SaleStatus.PENDING.value,
                sale_date=datetime.now(),
            )
            self.db.add(sale)
            quotation.status = QuotationStatus.ACCEPTED.value
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(sale)
        logger.info(f"Quotation {quotation_id} converted to sale {sale.id}")
        return SalesService.serialize(sale)

    def expire_quotations(self, today: Optional[date] = None) -> int:
        """
        Devis brouillon/envoyés dont valid_until est dépassée -> 'expired'
        """
        today = today or date.today()
        quotations = self.db.query(Quotation).filter(
            Quotation.status.in_([QuotationStatus.DRAFT.value, QuotationStatus.SENT.value]),
            Quotation.valid_until < today
        ).all()

        for quotation in quotations:
            quotation.status = QuotationStatus.EXPIRED.value
        self.db.commit()

        if quotations:
            logger.info(f"⏰ {len(quotations)} quotation(s) marked as expired")
        return len(quotations)

    def _get(self, quotation_id: int) -> Optional[Quotation]:
        return self.db.query(Quotation).filter(Quotation.id == quotation_id).first()

    def _check_refs(self, data: Dict):
        if not self.db.query(Client.id).filter(Client.id == data['client_id']).first():
            raise LookupError(f"Client not found: {data['client_id']}")
        if not self.db.query(Product.id).filter(Product.id == data['product_id']).first():
            raise LookupError(f"Product not found: {data['product_id']}")

    def _fields(self, data: Dict) -> Dict:
        return {
            'client_id': data['client_id'],
            'product_id': data['product_id'],
            'quantity': data['quantity'],
            'unit_price': data['unit_price'],
            'total_amount': data['quantity'] * data['unit_price'],
            'valid_until': data['valid_until'],
            'status': QuotationStatus(data.get('status') or QuotationStatus.DRAFT).value,
            'notes': data.get('notes') or None,
        }

    def _serialize(self, quotation: Quotation) -> Dict:
        status = QuotationStatus(quotation.status)
        client = quotation.client
        product = quotation.product
        return {
            'id': quotation.id,
            'client_id': quotation.client_id,
            'client_name': client.name if client else None,
            'product_id': quotation.product_id,
            'product_name': product.name if product else None,
            'product_type': product.type if product else None,
            'product_unit': product.unit if product else None,
            'quantity': quotation.quantity,
            'unit_price': money(quotation.unit_price),
            'total_amount': money(quotation.total_amount),
            'valid_until': quotation.valid_until,
            'status': status,
            'status_label': status.label,
            'notes': quotation.notes,
            'created_at': quotation.created_at,
        }
