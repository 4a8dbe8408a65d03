"""
Settings API - paramètres de l'entreprise
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.connection import get_db
from app.models import CompanySettingsRequest, CompanySettingsResponse
from app.core.errors import http_error
from services.company_settings import CompanySettingsService

router = APIRouter(prefix="/api/settings", tags=["Settings"])


def get_settings_service(db: Session = Depends(get_db)) -> CompanySettingsService:
    return CompanySettingsService(db)


@router.get("", response_model=CompanySettingsResponse)
async def get_company_settings(service: CompanySettingsService = Depends(get_settings_service)):
    """Valeurs par défaut: Cornerstone GESCO, TVA 18%"""
    return service.get()


@router.put("", response_model=CompanySettingsResponse)
async def update_company_settings(
    request: CompanySettingsRequest,
    service: CompanySettingsService = Depends(get_settings_service)
):
    try:
        return service.update(request.model_dump())
    except Exception as e:
        raise http_error(e)
