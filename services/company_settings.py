"""
Company Settings Service - en-tête des factures et taux de TVA par défaut
"""
import logging
from typing import Dict
from sqlalchemy.orm import Session

from database import CompanySettings
from app.core.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "Cornerstone GESCO"


class CompanySettingsService:
    """Une seule ligne, créée à la première lecture"""

    def __init__(self, db: Session):
        self.db = db

    def get(self) -> CompanySettings:
        row = self.db.query(CompanySettings).order_by(CompanySettings.id.asc()).first()
        if row is None:
            row = CompanySettings(
                company_name=DEFAULT_COMPANY_NAME,
                address="",
                phone="",
                email="",
                tax_rate=get_settings().default_tax_rate,
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.info("Company settings initialized with defaults")
        return row

    def update(self, data: Dict) -> CompanySettings:
        row = self.get()
        for key, value in data.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        logger.info(f"Company settings updated: {row.company_name}, TVA {row.tax_rate}%")
        return row

    def tax_rate(self) -> float:
        return self.get().tax_rate
