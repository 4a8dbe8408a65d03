"""
Admin Endpoints - import des données de l'ancien backend
"""
from fastapi import APIRouter, HTTPException, BackgroundTasks
from typing import Any, Dict, Optional, List
import logging
import asyncio
from datetime import datetime

from app.models import ImportRequest
from app.core.config import get_settings
from services.legacy_import import TABLE_NAMES, import_status, run_legacy_import

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/import")
async def start_legacy_import(background_tasks: BackgroundTasks, request: Optional[ImportRequest] = None):
    """
    Importe les tables Supabase dans la base locale (BACKGROUND TASK)

    - Upsert par identifiant distant (external_id): relancer l'import met à jour les lignes
    - Les clés étrangères sont traduites via les parents déjà importés
    - Suivi: /api/admin/import/status
    """
    settings = get_settings()
    if not (settings.supabase_url and settings.supabase_key):
        raise HTTPException(status_code=400, detail="SUPABASE_URL and SUPABASE_KEY must be set")

    if import_status["running"]:
        raise HTTPException(status_code=409, detail="Import already running, check the status endpoint")

    tables = request.tables if request and request.tables else None
    unknown = set(tables or []) - set(TABLE_NAMES)
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown legacy tables: {', '.join(sorted(unknown))}")

    # réservé dès maintenant, la tâche de fond ne démarre qu'après la réponse
    import_status["running"] = True
    background_tasks.add_task(_run_import_task, tables)

    return {
        "status": "started",
        "message": "Legacy import started in background",
        "tables": tables or TABLE_NAMES,
        "check_status": "/api/admin/import/status",
    }


async def _run_import_task(tables: Optional[List[str]]):
    """Background task: l'import tourne dans un thread"""
    try:
        await asyncio.to_thread(run_legacy_import, tables)
    except Exception as e:
        # déjà enregistré dans import_status
        logger.error(f"Legacy import task failed: {e}")


@router.get("/import/status")
async def get_import_status() -> Dict[str, Any]:
    return {
        **import_status,
        "timestamp": datetime.now(),
    }
