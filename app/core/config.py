"""
Application Configuration
Configuration chargée depuis les variables d'environnement
"""

from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache
from pydantic import Field


class Settings(BaseSettings):
    """Paramètres de l'application"""

    # Application
    app_name: str = Field("GESCO API", alias="APP_NAME")
    app_version: str = Field("1.0.0", alias="APP_VERSION")
    debug: bool = Field(False, alias="DEBUG")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Server
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8000, alias="PORT")

    # Database
    database_url: str = Field("sqlite:///./gesco.db", alias="DATABASE_URL")

    # Security
    api_key: str = Field(..., alias="API_KEY")

    # CORS
    allowed_origins: str = Field("*", alias="ALLOWED_ORIGINS")

    # Facturation
    default_tax_rate: float = Field(18.0, alias="DEFAULT_TAX_RATE")
    invoice_due_days: int = Field(30, alias="INVOICE_DUE_DAYS")

    # Ancien backend (Supabase / PostgREST) - import des données
    supabase_url: Optional[str] = Field(None, alias="SUPABASE_URL")
    supabase_key: Optional[str] = Field(None, alias="SUPABASE_KEY")

    # Maintenance des statuts (factures en retard, devis expirés)
    scheduler_enabled: bool = Field(True, alias="SCHEDULER_ENABLED")
    maintenance_hour: int = Field(2, alias="MAINTENANCE_HOUR")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = ""

    def get_allowed_origins(self):
        """ALLOWED_ORIGINS est une liste séparée par des virgules"""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Settings singleton"""
    return Settings()
