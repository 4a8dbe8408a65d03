"""
Database initialization script

Crée les tables GESCO puis la ligne des paramètres de l'entreprise
(Cornerstone GESCO, TVA par défaut) si elle n'existe pas encore.
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import sessionmaker

from database.connection import engine, Base
import database.models  # noqa: F401  enregistre les tables
from services.company_settings import CompanySettingsService


def init_database(bind=None):
    """Tables + paramètres par défaut, renvoie les noms des tables"""
    bind = bind or engine
    print("Creating GESCO tables...")
    Base.metadata.create_all(bind=bind)

    db = sessionmaker(autocommit=False, autoflush=False, bind=bind)()
    try:
        company = CompanySettingsService(db).get()
        print(f"✅ Company settings: {company.company_name} (TVA {company.tax_rate}%)")
    finally:
        db.close()

    tables = sorted(Base.metadata.tables)
    print(f"✅ {len(tables)} tables ready: {', '.join(tables)}")
    return tables


if __name__ == "__main__":
    init_database()
