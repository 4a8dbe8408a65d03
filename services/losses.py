"""
Loss Service - pertes et casses valorisées au prix du produit
"""
import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, joinedload

from database import Loss, Product
from app.core import LossType
from services.common import matches, money

logger = logging.getLogger(__name__)


class LossService:

    def __init__(self, db: Session):
        self.db = db

    def list_losses(self, search: Optional[str] = None) -> Dict:
        """
        Pertes triées par date décroissante + valeur totale des lignes listées
        """
        losses = self.db.query(Loss).options(
            joinedload(Loss.product)
        ).order_by(Loss.loss_date.desc(), Loss.id.desc()).all()

        losses = [
            loss for loss in losses
            if matches(search,
                       loss.product.name if loss.product else None,
                       loss.loss_type,
                       LossType(loss.loss_type).label)
        ]
        return {
            'items': [self._serialize(loss) for loss in losses],
            'total_value_lost': money(sum(loss.value_lost or 0.0 for loss in losses)),
        }

    def get_loss(self, loss_id: int) -> Optional[Dict]:
        loss = self._get(loss_id)
        return self._serialize(loss) if loss else None

    def create_loss(self, data: Dict) -> Dict:
        product = self._get_product(data['product_id'])
        loss = Loss(**self._fields(data, product))
        self.db.add(loss)
        self.db.commit()
        self.db.refresh(loss)
        logger.info(f"Loss recorded: {loss.quantity} x {product.name} = {loss.value_lost}")
        return self._serialize(loss)

    def update_loss(self, loss_id: int, data: Dict) -> Optional[Dict]:
        loss = self._get(loss_id)
        if not loss:
            return None
        product = self._get_product(data['product_id'])
        for key, value in self._fields(data, product).items():
            setattr(loss, key, value)
        self.db.commit()
        self.db.refresh(loss)
        return self._serialize(loss)

    def delete_loss(self, loss_id: int) -> bool:
        loss = self._get(loss_id)
        if not loss:
            return False
        self.db.delete(loss)
        self.db.commit()
        return True

    def _get(self, loss_id: int) -> Optional[Loss]:
        return self.db.query(Loss).filter(Loss.id == loss_id).first()

    def _get_product(self, product_id: int) -> Product:
        product = self.db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise LookupError(f"Product not found: {product_id}")
        return product

    def _fields(self, data: Dict, product: Product) -> Dict:
        return {
            'product_id': product.id,
            'quantity': data['quantity'],
            'loss_type': LossType(data.get('loss_type') or LossType.DAMAGE).value,
            'loss_date': data['loss_date'],
            'description': data.get('description') or None,
            'value_lost': money(data['quantity'] * (product.price or 0.0)),
        }

    def _serialize(self, loss: Loss) -> Dict:
        loss_type = LossType(loss.loss_type)
        product = loss.product
        return {
            'id': loss.id,
            'product_id': loss.product_id,
            'product_name': product.name if product else None,
            'product_type': product.type if product else None,
            'product_unit': product.unit if product else None,
            'quantity': loss.quantity,
            'loss_type': loss_type,
            'loss_type_label': loss_type.label,
            'loss_date': loss.loss_date,
            'description': loss.description,
            'value_lost': money(loss.value_lost),
        }
