"""
Delivery Service - planification et suivi des livraisons
"""
import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, joinedload

from database import Delivery, Sale
from app.core import DeliveryStatus, SaleStatus
from services.common import ConflictError, matches
from services.sales import SalesService

logger = logging.getLogger(__name__)


class DeliveryService:
    """Une livraison par vente terminée"""

    def __init__(self, db: Session):
        self.db = db

    def list_deliveries(self, search: Optional[str] = None) -> List[Dict]:
        deliveries = self._query().order_by(
            Delivery.delivery_date.desc(), Delivery.id.desc()
        ).all()
        deliveries = [
            d for d in deliveries
            if matches(search,
                       d.sale.client.name if d.sale and d.sale.client else None,
                       d.driver_name,
                       d.delivery_address)
        ]
        return [self._serialize(d) for d in deliveries]

    def get_delivery(self, delivery_id: int) -> Optional[Dict]:
        delivery = self._get(delivery_id)
        return self._serialize(delivery) if delivery else None

    def eligible_sales(self) -> List[Dict]:
        """Ventes terminées sans livraison"""
        sales = self.db.query(Sale).options(
            joinedload(Sale.client),
            joinedload(Sale.product),
        ).outerjoin(Delivery, Delivery.sale_id == Sale.id).filter(
            Sale.status == SaleStatus.COMPLETED.value,
            Delivery.id.is_(None)
        ).order_by(Sale.sale_date.desc()).all()
        return [SalesService.serialize(s) for s in sales]

    def create_delivery(self, data: Dict) -> Dict:
        sale = self._get_sale(data['sale_id'])
        self._require_completed(sale)
        if sale.delivery is not None:
            raise ConflictError(f"Sale {sale.id} already has a delivery")

        delivery = Delivery(**self._fields(data))
        self.db.add(delivery)
        self.db.commit()
        self.db.refresh(delivery)
        logger.info(f"🚚 Delivery {delivery.id} scheduled for sale {sale.id} on {delivery.delivery_date}")
        return self._serialize(delivery)

    def update_delivery(self, delivery_id: int, data: Dict) -> Optional[Dict]:
        delivery = self._get(delivery_id)
        if not delivery:
            return None

        sale = self._get_sale(data['sale_id'])
        if sale.id != delivery.sale_id:
            self._require_completed(sale)
        if sale.delivery is not None and sale.delivery.id != delivery.id:
            raise ConflictError(f"Sale {sale.id} already has a delivery")

        for key, value in self._fields(data).items():
            setattr(delivery, key, value)
        self.db.commit()
        self.db.refresh(delivery)
        return self._serialize(delivery)

    def set_status(self, delivery_id: int, status: DeliveryStatus) -> Optional[Dict]:
        delivery = self._get(delivery_id)
        if not delivery:
            return None
        delivery.status = DeliveryStatus(status).value
        self.db.commit()
        self.db.refresh(delivery)
        logger.info(f"Delivery {delivery_id} -> {delivery.status}")
        return self._serialize(delivery)

    def delete_delivery(self, delivery_id: int) -> bool:
        delivery = self._get(delivery_id)
        if not delivery:
            return False
        self.db.delete(delivery)
        self.db.commit()
        return True

    def _query(self):
        return self.db.query(Delivery).options(
            joinedload(Delivery.sale).joinedload(Sale.client),
            joinedload(Delivery.sale).joinedload(Sale.product),
        )

    def _get(self, delivery_id: int) -> Optional[Delivery]:
        return self._query().filter(Delivery.id == delivery_id).first()

    def _get_sale(self, sale_id: int) -> Sale:
        sale = self.db.query(Sale).filter(Sale.id == sale_id).first()
        if not sale:
            raise LookupError(f"Sale not found: {sale_id}")
        return sale

    @staticmethod
    def _require_completed(sale: Sale):
        if sale.status != SaleStatus.COMPLETED.value:
            raise ValueError(f"Only completed sales can be delivered (sale {sale.id} is {sale.status})")

    def _fields(self, data: Dict) -> Dict:
        return {
            'sale_id': data['sale_id'],
            'delivery_date': data['delivery_date'],
            'delivery_address': data['delivery_address'],
            'status': DeliveryStatus(data.get('status') or DeliveryStatus.SCHEDULED).value,
            'driver_name': data.get('driver_name') or None,
            'vehicle_info': data.get('vehicle_info') or None,
            'notes': data.get('notes') or None,
        }

    def _serialize(self, delivery: Delivery) -> Dict:
        status = DeliveryStatus(delivery.status)
        sale = delivery.sale
        client = sale.client if sale else None
        product = sale.product if sale else None
        return {
            'id': delivery.id,
            'sale_id': delivery.sale_id,
            'delivery_date': delivery.delivery_date,
            'delivery_address': delivery.delivery_address,
            'status': status,
            'status_label': status.label,
            'driver_name': delivery.driver_name,
            'vehicle_info': delivery.vehicle_info,
            'notes': delivery.notes,
            'client_name': client.name if client else None,
            'product_name': product.name if product else None,
            'product_unit': product.unit if product else None,
            'quantity': sale.quantity if sale else None,
        }
