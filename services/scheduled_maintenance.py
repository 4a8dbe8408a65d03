"""
Scheduled Maintenance Service
Tâche de fond quotidienne: factures en retard et devis expirés
"""
import asyncio
import logging
from datetime import datetime, time
from typing import Dict, Optional

from database import SessionLocal
from services.invoices import InvoiceService
from services.quotations import QuotationService
from app.core.config import get_settings

logger = logging.getLogger(__name__)


def run_status_maintenance() -> Dict[str, int]:
    """
    Marque les factures envoyées échues comme 'overdue'
    et les devis dépassés comme 'expired'
    """
    db = SessionLocal()
    try:
        overdue = InvoiceService(db).mark_overdue()
        expired = QuotationService(db).expire_quotations()
    finally:
        db.close()
    return {'overdue_invoices': overdue, 'expired_quotations': expired}


class ScheduledMaintenanceService:
    """
    Boucle asyncio vérifiant chaque minute si la maintenance du jour est due
    (à partir de MAINTENANCE_HOUR, une fois par jour)
    """

    def __init__(self):
        self.settings = get_settings()
        self.is_running = False
        self.maintenance_time = time(self.settings.maintenance_hour, 0)
        self.check_interval = 60
        self.last_run: Optional[datetime] = None
        self.last_result: Optional[Dict[str, int]] = None
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self):
        if self.is_running:
            logger.warning("Maintenance scheduler already running")
            return

        self.is_running = True
        logger.info(f"📅 Maintenance scheduler started (daily at {self.maintenance_time.strftime('%H:%M')})")
        self._task = asyncio.create_task(self._run_scheduler())

    async def stop(self):
        self.is_running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("Maintenance scheduler stopped")

    async def _run_scheduler(self):
        while self.is_running:
            try:
                if self._should_run(datetime.now()):
                    await self.run_now()
                await asyncio.sleep(self.check_interval)

            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Maintenance scheduler error: {e}", exc_info=True)
                await asyncio.sleep(self.check_interval)

    def _should_run(self, now: datetime) -> bool:
        if now.time() < self.maintenance_time:
            return False
        return self.last_run is None or self.last_run.date() < now.date()

    async def run_now(self) -> Dict[str, int]:
        """Exécute la maintenance dans un thread (manuel ou planifié)"""
        async with self._lock:
            logger.info("🔄 Status maintenance running...")
            result = await asyncio.to_thread(run_status_maintenance)
            self.last_run = datetime.now()
            self.last_result = result
            logger.info(
                f"✅ Status maintenance done: {result['overdue_invoices']} overdue invoice(s), "
                f"{result['expired_quotations']} expired quotation(s)"
            )
            return result


_scheduler: Optional[ScheduledMaintenanceService] = None


def get_scheduler() -> ScheduledMaintenanceService:
    global _scheduler
    if _scheduler is None:
        _scheduler = ScheduledMaintenanceService()
    return _scheduler
