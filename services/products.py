"""
Product Service - catalogue des produits
"""
import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from database import Product
from services.common import matches

logger = logging.getLogger(__name__)


class ProductService:
    """Catalogue des produits (briques, hourdis, pavés...)"""

    def __init__(self, db: Session):
        self.db = db

    def list_products(self, search: Optional[str] = None) -> List[Product]:
        products = self.db.query(Product).order_by(Product.name.asc()).all()
        return [p for p in products if matches(search, p.name, p.type)]

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def create_product(self, data: Dict) -> Product:
        product = Product(**data)
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        logger.info(f"Product created: {product.id} ({product.name})")
        return product

    def update_product(self, product_id: int, data: Dict) -> Optional[Product]:
        product = self.get_product(product_id)
        if not product:
            return None
        for key, value in data.items():
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product_id: int) -> bool:
        product = self.get_product(product_id)
        if not product:
            return False
        try:
            self.db.delete(product)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Product deleted: {product_id}")
        return True
