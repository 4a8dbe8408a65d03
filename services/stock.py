"""
Stock Service - niveaux de stock et classification par seuils
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, joinedload

from database import StockItem, Product
from app.core import StockLevel
from services.common import matches, money

logger = logging.getLogger(__name__)


class StockService:
    """Gestion du stock"""

    def __init__(self, db: Session):
        self.db = db

    def list_stock(self, search: Optional[str] = None) -> List[Dict]:
        items = self._query_all()
        items = [
            item for item in items
            if matches(search, item.product.name if item.product else None,
                       item.product.type if item.product else None)
        ]
        return [self._serialize(item) for item in items]

    def get_item(self, item_id: int) -> Optional[Dict]:
        item = self._get(item_id)
        return self._serialize(item) if item else None

    def create_item(self, data: Dict) -> Dict:
        self._check_product(data['product_id'])
        item = StockItem(**data, last_updated=datetime.now())
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Stock item created: {item.id} (product {item.product_id})")
        return self._serialize(item)

    def update_item(self, item_id: int, data: Dict) -> Optional[Dict]:
        item = self._get(item_id)
        if not item:
            return None
        self._check_product(data['product_id'])
        for key, value in data.items():
            setattr(item, key, value)
        item.last_updated = datetime.now()
        self.db.commit()
        self.db.refresh(item)
        return self._serialize(item)

    def delete_item(self, item_id: int) -> bool:
        item = self._get(item_id)
        if not item:
            return False
        self.db.delete(item)
        self.db.commit()
        logger.info(f"Stock item deleted: {item_id}")
        return True

    def summary(self) -> Dict:
        """
        Nombre de lignes, lignes en stock faible / élevé, valeur totale

        valeur = Σ current_quantity * product.price
        """
        items = self._query_all()
        levels = [self.classify(item) for item in items]
        total_value = sum(
            item.current_quantity * (item.product.price if item.product else 0.0)
            for item in items
        )
        return {
            'total_items': len(items),
            'low_stock_items': levels.count(StockLevel.LOW),
            'high_stock_items': levels.count(StockLevel.HIGH),
            'total_value': money(total_value),
        }

    @staticmethod
    def classify(item: StockItem) -> StockLevel:
        return StockLevel.classify(
            item.current_quantity or 0,
            item.min_threshold or 0,
            item.max_threshold or 0,
        )

    def _query_all(self) -> List[StockItem]:
        return self.db.query(StockItem).options(
            joinedload(StockItem.product)
        ).order_by(StockItem.id.asc()).all()

    def _get(self, item_id: int) -> Optional[StockItem]:
        return self.db.query(StockItem).filter(StockItem.id == item_id).first()

    def _check_product(self, product_id: int):
        if not self.db.query(Product.id).filter(Product.id == product_id).first():
            raise LookupError(f"Product not found: {product_id}")

    def _serialize(self, item: StockItem) -> Dict:
        level = self.classify(item)
        product = item.product
        return {
            'id': item.id,
            'product_id': item.product_id,
            'product_name': product.name if product else None,
            'product_type': product.type if product else None,
            'product_unit': product.unit if product else None,
            'current_quantity': item.current_quantity,
            'min_threshold': item.min_threshold,
            'max_threshold': item.max_threshold,
            'last_updated': item.last_updated,
            'level': level,
            'level_label': level.label,
        }
