"""
Health Check Endpoint
"""
from fastapi import APIRouter
from sqlalchemy import text
from datetime import datetime
import logging

from app.models import HealthResponse
from app.core.config import get_settings
from connectors.supabase_client import SupabaseAPIClient
from database.connection import engine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", response_model=HealthResponse)
async def health_check():
    """
    Base de données + ancien backend (not_configured sans URL/clé)
    """
    settings = get_settings()

    if settings.supabase_url and settings.supabase_key:
        legacy = SupabaseAPIClient(api_url=settings.supabase_url, api_key=settings.supabase_key)
        legacy_status = legacy.test_connection()
        legacy_connection = "connected" if legacy_status['success'] else "disconnected"
    else:
        legacy_connection = "not_configured"

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_connection = "connected"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_connection = "disconnected"

    overall_status = "healthy" if (
        db_connection == "connected" and legacy_connection != "disconnected"
    ) else "degraded"

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(),
        database_connection=db_connection,
        legacy_backend_connection=legacy_connection,
        version=settings.app_version
    )
