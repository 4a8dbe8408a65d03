"""
Client Service - base clients et statistiques d'achat
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from database import Client, Sale
from app.core import SaleStatus
from services.common import matches, money

logger = logging.getLogger(__name__)


class ClientService:
    """Clients + statistiques calculées sur les ventes terminées"""

    def __init__(self, db: Session):
        self.db = db

    def list_clients(self, search: Optional[str] = None) -> List[Dict]:
        clients = self.db.query(Client).order_by(Client.created_at.desc(), Client.id.desc()).all()
        clients = [c for c in clients if matches(search, c.name, c.email, c.phone)]

        stats = self._calculate_stats([c.id for c in clients])
        return [self._serialize(c, stats.get(c.id)) for c in clients]

    def get_client(self, client_id: int) -> Optional[Dict]:
        client = self._get(client_id)
        if not client:
            return None
        stats = self._calculate_stats([client.id])
        return self._serialize(client, stats.get(client.id))

    def overview(self, search: Optional[str] = None) -> Dict:
        """
        Valeur totale des clients et top 5 par montant dépensé
        """
        clients = self.list_clients(search)
        total_value = sum(c['stats']['total_spent'] for c in clients)
        top_clients = sorted(clients, key=lambda c: c['stats']['total_spent'], reverse=True)[:5]

        return {
            'total_clients': len(clients),
            'total_clients_value': money(total_value),
            'top_clients': top_clients,
        }

    def create_client(self, data: Dict) -> Dict:
        client = Client(**self._clean(data))
        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        logger.info(f"Client created: {client.id} ({client.name})")
        return self._serialize(client, None)

    def update_client(self, client_id: int, data: Dict) -> Optional[Dict]:
        client = self._get(client_id)
        if not client:
            return None
        for key, value in self._clean(data).items():
            setattr(client, key, value)
        self.db.commit()
        self.db.refresh(client)
        return self.get_client(client_id)

    def delete_client(self, client_id: int) -> bool:
        client = self._get(client_id)
        if not client:
            return False
        try:
            self.db.delete(client)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Client deleted: {client_id}")
        return True

    def _get(self, client_id: int) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id).first()

    def _clean(self, data: Dict) -> Dict:
        """Les champs optionnels vides sont stockés à NULL"""
        return {
            key: (value or None) if key != 'name' else value
            for key, value in data.items()
        }

    def _calculate_stats(self, client_ids: List[int]) -> Dict[int, Dict]:
        if not client_ids:
            return {}

        sales = self.db.query(Sale).filter(
            Sale.client_id.in_(client_ids),
            Sale.status == SaleStatus.COMPLETED.value
        ).all()

        grouped = defaultdict(list)
        for sale in sales:
            grouped[sale.client_id].append(sale)

        stats = {}
        for client_id, client_sales in grouped.items():
            stats[client_id] = {
                'total_spent': money(sum(s.total_amount for s in client_sales)),
                'total_orders': len(client_sales),
                'last_order_date': max(s.sale_date for s in client_sales),
            }
        return stats

    def _serialize(self, client: Client, stats: Optional[Dict]) -> Dict:
        return {
            'id': client.id,
            'name': client.name,
            'email': client.email,
            'phone': client.phone,
            'address': client.address,
            'notes': client.notes,
            'created_at': client.created_at,
            'stats': stats or {
                'total_spent': 0.0,
                'total_orders': 0,
                'last_order_date': None,
            },
        }
