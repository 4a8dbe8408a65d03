"""
Production Service - ordres de production et avancement
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, joinedload

from database import ProductionOrder, Product
from app.core import ProductionStatus
from services.common import matches, percentage

logger = logging.getLogger(__name__)


class ProductionService:
    """Ordres de production"""

    def __init__(self, db: Session):
        self.db = db

    def list_orders(self, search: Optional[str] = None) -> List[Dict]:
        orders = self.db.query(ProductionOrder).options(
            joinedload(ProductionOrder.product)
        ).order_by(ProductionOrder.start_date.desc(), ProductionOrder.id.desc()).all()

        orders = [
            o for o in orders
            if matches(search,
                       o.product.name if o.product else None,
                       o.product.type if o.product else None)
        ]
        return [self._serialize(o) for o in orders]

    def get_order(self, order_id: int) -> Optional[Dict]:
        order = self._get(order_id)
        return self._serialize(order) if order else None

    def create_order(self, data: Dict) -> Dict:
        """Un nouvel ordre démarre toujours à produced_quantity = 0"""
        self._check_product(data['product_id'])
        order = ProductionOrder(**self._fields(data), produced_quantity=0)
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        logger.info(f"🏭 Production order {order.id}: {order.planned_quantity} planned")
        return self._serialize(order)

    def update_order(self, order_id: int, data: Dict) -> Optional[Dict]:
        """La quantité produite n'est pas modifiée ici"""
        order = self._get(order_id)
        if not order:
            return None
        self._check_product(data['product_id'])
        for key, value in self._fields(data).items():
            setattr(order, key, value)
        self.db.commit()
        self.db.refresh(order)
        return self._serialize(order)

    def set_status(self, order_id: int, status: ProductionStatus) -> Optional[Dict]:
        order = self._get(order_id)
        if not order:
            return None
        status = ProductionStatus(status)
        order.status = status.value
        if status == ProductionStatus.COMPLETED:
            order.end_date = datetime.now()
        self.db.commit()
        self.db.refresh(order)
        logger.info(f"Production order {order_id} -> {order.status}")
        return self._serialize(order)

    def set_produced_quantity(self, order_id: int, produced_quantity: int) -> Optional[Dict]:
        order = self._get(order_id)
        if not order:
            return None
        order.produced_quantity = produced_quantity
        self.db.commit()
        self.db.refresh(order)
        return self._serialize(order)

    def delete_order(self, order_id: int) -> bool:
        order = self._get(order_id)
        if not order:
            return False
        self.db.delete(order)
        self.db.commit()
        return True

    @staticmethod
    def progress(order: ProductionOrder) -> float:
        return round(percentage(order.produced_quantity or 0, order.planned_quantity or 0), 2)

    def _get(self, order_id: int) -> Optional[ProductionOrder]:
        return self.db.query(ProductionOrder).filter(ProductionOrder.id == order_id).first()

    def _check_product(self, product_id: int):
        if not self.db.query(Product.id).filter(Product.id == product_id).first():
            raise LookupError(f"Product not found: {product_id}")

    def _fields(self, data: Dict) -> Dict:
        fields = {
            'product_id': data['product_id'],
            'planned_quantity': data['planned_quantity'],
            'start_date': data['start_date'],
            'status': ProductionStatus(data.get('status') or ProductionStatus.PLANNED).value,
            'notes': data.get('notes') or None,
        }
        if data.get('end_date'):
            fields['end_date'] = datetime.combine(data['end_date'], datetime.min.time())
        return fields

    def _serialize(self, order: ProductionOrder) -> Dict:
        status = ProductionStatus(order.status)
        product = order.product
        return {
            'id': order.id,
            'product_id': order.product_id,
            'product_name': product.name if product else None,
            'product_type': product.type if product else None,
            'product_unit': product.unit if product else None,
            'planned_quantity': order.planned_quantity or 0,
            'produced_quantity': order.produced_quantity or 0,
            'start_date': order.start_date,
            'end_date': order.end_date,
            'status': status,
            'status_label': status.label,
            'notes': order.notes,
            'progress': self.progress(order),
        }
