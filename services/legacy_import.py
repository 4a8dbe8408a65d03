"""
Legacy Import Service - reprise des données de l'ancien backend Supabase

Chaque ligne distante est rattachée à sa ligne locale par external_id
(l'identifiant distant). Les clés étrangères sont traduites à travers
les parents déjà importés, d'où l'ordre de TABLE_CONFIGS.
"""
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional
from sqlalchemy import Boolean, Date, DateTime, Float, Integer
from sqlalchemy.orm import Session

from database import (
    SessionLocal, Product, Client, StockItem, Sale, Quotation, Invoice, Delivery,
    ProductionOrder, Loss, Objective, Expense, Employee, OvertimeHour,
)
from app.core import (
    SaleStatus, QuotationStatus, InvoiceStatus, DeliveryStatus,
    ProductionStatus, LossType, ObjectiveStatus, ObjectiveCategory, EmployeeRole,
)
from app.core.config import get_settings
from connectors.supabase_client import SupabaseAPIClient

logger = logging.getLogger(__name__)


TABLE_CONFIGS = [
    {'table': 'products', 'model': Product, 'foreign_keys': {}, 'enums': {}},
    {'table': 'clients', 'model': Client, 'foreign_keys': {}, 'enums': {}},
    {'table': 'stock', 'model': StockItem,
     'foreign_keys': {'product_id': Product}, 'enums': {}},
    {'table': 'sales', 'model': Sale,
     'foreign_keys': {'client_id': Client, 'product_id': Product},
     'enums': {'status': SaleStatus.PENDING}},
    {'table': 'quotations', 'model': Quotation,
     'foreign_keys': {'client_id': Client, 'product_id': Product},
     'enums': {'status': QuotationStatus.DRAFT}},
    {'table': 'invoices', 'model': Invoice,
     'foreign_keys': {'sale_id': Sale},
     'enums': {'status': InvoiceStatus.DRAFT}},
    {'table': 'deliveries', 'model': Delivery,
     'foreign_keys': {'sale_id': Sale},
     'enums': {'status': DeliveryStatus.SCHEDULED}},
    {'table': 'production_orders', 'model': ProductionOrder,
     'foreign_keys': {'product_id': Product},
     'enums': {'status': ProductionStatus.PLANNED}},
    {'table': 'losses', 'model': Loss,
     'foreign_keys': {'product_id': Product},
     'enums': {'loss_type': LossType.OTHER}},
    {'table': 'objectives', 'model': Objective, 'foreign_keys': {},
     'enums': {'status': ObjectiveStatus.ACTIVE, 'category': ObjectiveCategory.OTHER}},
    {'table': 'expenses', 'model': Expense, 'foreign_keys': {}, 'enums': {}},
    {'table': 'employees', 'model': Employee, 'foreign_keys': {},
     'enums': {'role': EmployeeRole.USER}},
    # fiches du personnel tenues dans les profils de connexion
    {'table': 'profiles', 'model': Employee, 'foreign_keys': {},
     'enums': {'role': EmployeeRole.USER},
     'defaults': {'first_name': '', 'last_name': '', 'is_active': True}},
    {'table': 'overtime_hours', 'model': OvertimeHour,
     'foreign_keys': {'employee_id': Employee}, 'enums': {}},
]

TABLE_NAMES = [config['table'] for config in TABLE_CONFIGS]

# Suivi de l'import en cours (lu par /api/admin/import/status)
import_status = {
    "running": False,
    "progress": "",
    "start_time": None,
    "end_time": None,
    "error": None,
    "results": {},
}


def parse_datetime(value: Any) -> Optional[datetime]:
    """ISO 8601 (suffixe Z accepté) -> datetime naïf"""
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).replace('Z', '+00:00')
    parsed = datetime.fromisoformat(text)
    return parsed.replace(tzinfo=None)


def parse_date(value: Any) -> Optional[date]:
    if value is None or (isinstance(value, date) and not isinstance(value, datetime)):
        return value
    if isinstance(value, datetime):
        return value.date()
    return date.fromisoformat(str(value)[:10])


class LegacyImportService:
    """Upsert des tables distantes dans la base locale"""

    def __init__(self, client: SupabaseAPIClient, db: Session):
        self.client = client
        self.db = db

    def run(self, tables: Optional[List[str]] = None,
            progress_callback: Callable[[str], None] = None) -> Dict[str, Dict]:
        """
        Importe les tables demandées (toutes par défaut) dans l'ordre des dépendances

        Returns:
            {table: {'fetched', 'created', 'updated', 'skipped'}}
        """
        unknown = set(tables or []) - set(TABLE_NAMES)
        if unknown:
            raise ValueError(f"Unknown legacy tables: {', '.join(sorted(unknown))}")

        results = {}
        for config in TABLE_CONFIGS:
            if tables and config['table'] not in tables:
                continue
            if progress_callback:
                progress_callback(f"Importing {config['table']}...")

            rows = self.client.get_all_rows(config['table'])
            results[config['table']] = self.import_rows(config, rows)

        return results

    def import_rows(self, config: Dict, rows: List[Dict]) -> Dict[str, int]:
        model = config['model']
        stats = {'fetched': len(rows), 'created': 0, 'updated': 0, 'skipped': 0}

        known = {
            obj.external_id: obj
            for obj in self.db.query(model).filter(model.external_id.isnot(None))
        }

        try:
            for row in rows:
                values = self._convert_row(config, row)
                if values is None:
                    stats['skipped'] += 1
                    continue

                external_id = str(row['id'])
                existing = known.get(external_id)
                if existing:
                    for key, value in values.items():
                        setattr(existing, key, value)
                    stats['updated'] += 1
                else:
                    known[external_id] = model(external_id=external_id, **values)
                    self.db.add(known[external_id])
                    stats['created'] += 1

            # les tables suivantes lisent les parents commités
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"📥 {config['table']}: {stats['created']} created, "
            f"{stats['updated']} updated, {stats['skipped']} skipped"
        )
        return stats

    def _convert_row(self, config: Dict, row: Dict) -> Optional[Dict]:
        """
        Colonnes distantes -> colonnes locales

        None si la ligne doit être ignorée (parent absent, colonne obligatoire vide).
        """
        if row.get('id') is None:
            return None

        columns = config['model'].__table__.columns
        values = {}

        for column in columns:
            name = column.name
            if name in ('id', 'external_id') or name not in row:
                continue

            raw = row[name]
            if name in config['foreign_keys']:
                value = self._translate_fk(config['foreign_keys'][name], raw)
                if value is None and not column.nullable:
                    logger.debug(f"{config['table']} {row['id']}: missing parent for {name}={raw}")
                    return None
            elif name in config['enums']:
                value = self._enum_value(config['enums'][name], raw)
            else:
                value = self._coerce(column.type, raw)

            values[name] = value

        for name, default in config.get('defaults', {}).items():
            if values.get(name) is None:
                values[name] = default

        for column in columns:
            if column.primary_key or column.name == 'external_id' or column.nullable:
                continue
            if values.get(column.name) is None and column.default is None:
                logger.debug(f"{config['table']} {row['id']}: missing required {column.name}")
                return None
            if column.name in values and values[column.name] is None:
                values.pop(column.name)

        return values

    def _translate_fk(self, parent_model, legacy_id: Any) -> Optional[int]:
        if legacy_id is None:
            return None
        parent = self.db.query(parent_model.id).filter(
            parent_model.external_id == str(legacy_id)
        ).first()
        return parent[0] if parent else None

    @staticmethod
    def _enum_value(default, raw: Any) -> str:
        enum_class = type(default)
        try:
            return enum_class(raw).value
        except ValueError:
            return default.value

    @staticmethod
    def _coerce(column_type, raw: Any) -> Any:
        if raw is None:
            return None
        if isinstance(column_type, DateTime):
            return parse_datetime(raw)
        if isinstance(column_type, Date):
            return parse_date(raw)
        if isinstance(column_type, Boolean):
            return bool(raw)
        if isinstance(column_type, Integer):
            return int(float(raw))
        if isinstance(column_type, Float):
            return float(raw)
        return raw


def run_legacy_import(tables: Optional[List[str]] = None) -> Dict[str, Dict]:
    """
    Import complet avec sa propre session, met à jour import_status

    Appelé dans un thread par la tâche de fond de /api/admin/import.
    """

    settings = get_settings()
    import_status.update({
        "running": True,
        "progress": "Starting...",
        "start_time": datetime.now(),
        "end_time": None,
        "error": None,
        "results": {},
    })

    db = SessionLocal()
    try:
        if not (settings.supabase_url and settings.supabase_key):
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")

        client = SupabaseAPIClient(api_url=settings.supabase_url, api_key=settings.supabase_key)
        service = LegacyImportService(client, db)

        def _progress(message: str):
            import_status["progress"] = message

        results = service.run(tables, progress_callback=_progress)
        import_status["results"] = results
        import_status["progress"] = "Completed"
        logger.info(f"✅ Legacy import completed: {len(results)} table(s)")
        return results

    except Exception as e:
        import_status["error"] = str(e)
        import_status["progress"] = "Failed"
        logger.error(f"❌ Legacy import failed: {e}", exc_info=True)
        raise
    finally:
        import_status["running"] = False
        import_status["end_time"] = datetime.now()
        db.close()
