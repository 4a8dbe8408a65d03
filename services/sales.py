"""
Sales Service - ventes, création de client à la volée
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, joinedload

from database import Sale, Client, Product
from app.core import SaleStatus
from services.common import matches, money, day_range

logger = logging.getLogger(__name__)


def payment_note(payment_method: Optional[str]) -> str:
    return f"Mode de règlement: {payment_method or 'Non spécifié'}"


class SalesService:
    """Enregistrement des ventes"""

    def __init__(self, db: Session):
        self.db = db

    def list_sales(
        self,
        search: Optional[str] = None,
        status: Optional[SaleStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[Dict]:
        """
        Ventes triées par date décroissante

        Recherche sur le nom du client et le nom du produit.
        """
        query = self.db.query(Sale).options(
            joinedload(Sale.client),
            joinedload(Sale.product),
        )

        if status:
            query = query.filter(Sale.status == status.value)
        if start_date:
            query = query.filter(Sale.sale_date >= day_range(start_date, start_date)[0])
        if end_date:
            query = query.filter(Sale.sale_date < day_range(end_date, end_date)[1])

        sales = query.order_by(Sale.sale_date.desc(), Sale.id.desc()).all()
        sales = [
            s for s in sales
            if matches(search,
                       s.client.name if s.client else None,
                       s.product.name if s.product else None)
        ]
        return [self.serialize(s) for s in sales]

    def get_sale(self, sale_id: int) -> Optional[Dict]:
        sale = self.get_model(sale_id)
        return self.serialize(sale) if sale else None

    def get_model(self, sale_id: int) -> Optional[Sale]:
        return self.db.query(Sale).filter(Sale.id == sale_id).first()

    def create_sale(self, data: Dict) -> Dict:
        """
        total_amount = quantity * unit_price, sale_date = maintenant

        Sans client_id mais avec client_name, le client est créé d'abord.
        """
        try:
            client_id = self._resolve_client(data)
            self._check_product(data['product_id'])

            sale = Sale(
                client_id=client_id,
                product_id=data['product_id'],
                quantity=data['quantity'],
                unit_price=data['unit_price'],
                total_amount=data['quantity'] * data['unit_price'],
                status=SaleStatus(data.get('status') or SaleStatus.PENDING).value,
                sale_date=datetime.now(),
                payment_method=data.get('payment_method') or None,
                notes=payment_note(data['payment_method']) if data.get('payment_method') else None,
            )
            self.db.add(sale)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(sale)
        logger.info(f"Sale created: {sale.id} - {sale.quantity} x {sale.unit_price} = {sale.total_amount}")
        return self.serialize(sale)

    def update_sale(self, sale_id: int, data: Dict) -> Optional[Dict]:
        sale = self.get_model(sale_id)
        if not sale:
            return None

        try:
            client_id = self._resolve_client(data)
            self._check_product(data['product_id'])

            sale.client_id = client_id
            sale.product_id = data['product_id']
            sale.quantity = data['quantity']
            sale.unit_price = data['unit_price']
            sale.total_amount = data['quantity'] * data['unit_price']
            sale.status = SaleStatus(data.get('status') or SaleStatus.PENDING).value
            if data.get('payment_method'):
                sale.payment_method = data['payment_method']
                sale.notes = payment_note(data['payment_method'])
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(sale)
        return self.serialize(sale)

    def delete_sale(self, sale_id: int) -> bool:
        sale = self.get_model(sale_id)
        if not sale:
            return False
        try:
            self.db.delete(sale)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Sale deleted: {sale_id}")
        return True

    def _resolve_client(self, data: Dict) -> int:
        client_id = data.get('client_id')
        if client_id:
            if not self.db.query(Client.id).filter(Client.id == client_id).first():
                raise LookupError(f"Client not found: {client_id}")
            return client_id

        if not data.get('client_name'):
            raise ValueError("client_id or client_name is required")

        client = Client(
            name=data['client_name'],
            email=data.get('client_email') or None,
            address=data.get('client_address') or None,
            phone=data.get('client_phone') or None,
            notes=payment_note(data.get('payment_method')),
        )
        self.db.add(client)
        self.db.flush()
        logger.info(f"Client created from sale form: {client.id} ({client.name})")
        return client.id

    def _check_product(self, product_id: int):
        if not self.db.query(Product.id).filter(Product.id == product_id).first():
            raise LookupError(f"Product not found: {product_id}")

    @staticmethod
    def serialize(sale: Sale) -> Dict:
        status = SaleStatus(sale.status)
        client = sale.client
        product = sale.product
        return {
            'id': sale.id,
            'client_id': sale.client_id,
            'client_name': client.name if client else None,
            'client_email': client.email if client else None,
            'client_address': client.address if client else None,
            'product_id': sale.product_id,
            'product_name': product.name if product else None,
            'product_type': product.type if product else None,
            'product_unit': product.unit if product else None,
            'quantity': sale.quantity,
            'unit_price': money(sale.unit_price),
            'total_amount': money(sale.total_amount),
            'sale_date': sale.sale_date,
            'status': status,
            'status_label': status.label,
            'payment_method': sale.payment_method,
            'notes': sale.notes,
            'has_invoice': sale.invoice is not None,
            'has_delivery': sale.delivery is not None,
        }
