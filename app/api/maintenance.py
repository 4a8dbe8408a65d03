"""
Maintenance Control Endpoint
Déclenchement manuel et état de la maintenance des statuts
"""
from fastapi import APIRouter
from datetime import datetime
from typing import Dict, Any

from services.scheduled_maintenance import get_scheduler

router = APIRouter(prefix="/api/maintenance", tags=["Maintenance"])


@router.post("/trigger")
async def trigger_maintenance() -> Dict[str, Any]:
    """
    Marque maintenant les factures en retard et les devis expirés
    """
    scheduler = get_scheduler()
    result = await scheduler.run_now()

    return {
        "status": "completed",
        **result,
        "timestamp": datetime.now()
    }


@router.get("/status")
async def get_maintenance_status() -> Dict[str, Any]:
    scheduler = get_scheduler()

    return {
        "is_running": scheduler.is_running,
        "last_run": scheduler.last_run.isoformat() if scheduler.last_run else None,
        "last_result": scheduler.last_result,
        "maintenance_time": scheduler.maintenance_time.strftime("%H:%M"),
        "timestamp": datetime.now()
    }
