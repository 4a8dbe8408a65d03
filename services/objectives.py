"""
Objective Service - objectifs, avancement et statistiques par catégorie
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from database import Objective
from app.core import ObjectiveStatus, ObjectiveCategory
from services.common import matches, percentage

logger = logging.getLogger(__name__)


class ObjectiveService:
    """Suivi des objectifs"""

    def __init__(self, db: Session):
        self.db = db

    def list_objectives(self, search: Optional[str] = None) -> List[Dict]:
        objectives = self.db.query(Objective).order_by(
            Objective.start_date.desc(), Objective.id.desc()
        ).all()
        objectives = [
            o for o in objectives
            if matches(search, o.title, ObjectiveCategory(o.category).label)
        ]
        return [self._serialize(o) for o in objectives]

    def get_objective(self, objective_id: int) -> Optional[Dict]:
        objective = self._get(objective_id)
        return self._serialize(objective) if objective else None

    def create_objective(self, data: Dict) -> Dict:
        objective = Objective(**self._fields(data), current_value=0.0)
        self.db.add(objective)
        self.db.commit()
        self.db.refresh(objective)
        logger.info(f"🎯 Objective created: {objective.id} ({objective.target_value} {objective.unit})")
        return self._serialize(objective)

    def update_objective(self, objective_id: int, data: Dict) -> Optional[Dict]:
        """current_value est conservée"""
        objective = self._get(objective_id)
        if not objective:
            return None
        for key, value in self._fields(data).items():
            setattr(objective, key, value)
        self.db.commit()
        self.db.refresh(objective)
        return self._serialize(objective)

    def update_current_value(self, objective_id: int, current_value: float) -> Optional[Dict]:
        """
        Met à jour la valeur atteinte

        Un objectif actif dont la valeur atteint la cible passe à 'completed'.
        """
        objective = self._get(objective_id)
        if not objective:
            return None

        objective.current_value = current_value
        if (objective.status == ObjectiveStatus.ACTIVE.value
                and current_value >= (objective.target_value or 0.0)):
            objective.status = ObjectiveStatus.COMPLETED.value
            logger.info(f"✅ Objective {objective_id} reached its target")

        self.db.commit()
        self.db.refresh(objective)
        return self._serialize(objective)

    def set_status(self, objective_id: int, status: ObjectiveStatus) -> Optional[Dict]:
        objective = self._get(objective_id)
        if not objective:
            return None
        objective.status = ObjectiveStatus(status).value
        self.db.commit()
        self.db.refresh(objective)
        return self._serialize(objective)

    def delete_objective(self, objective_id: int) -> bool:
        objective = self._get(objective_id)
        if not objective:
            return False
        self.db.delete(objective)
        self.db.commit()
        return True

    def category_stats(self) -> Dict[str, Dict]:
        """{catégorie: {total, completed}}"""
        stats = defaultdict(lambda: {'total': 0, 'completed': 0})
        for objective in self.db.query(Objective).all():
            entry = stats[objective.category]
            entry['total'] += 1
            if objective.status == ObjectiveStatus.COMPLETED.value:
                entry['completed'] += 1
        return dict(stats)

    @staticmethod
    def progress(objective: Objective) -> float:
        return round(percentage(objective.current_value or 0.0, objective.target_value or 0.0), 2)

    def _get(self, objective_id: int) -> Optional[Objective]:
        return self.db.query(Objective).filter(Objective.id == objective_id).first()

    def _fields(self, data: Dict) -> Dict:
        return {
            'title': data.get('title') or None,
            'description': data.get('description') or None,
            'target_value': data['target_value'],
            'unit': data['unit'],
            'start_date': data['start_date'],
            'end_date': data['end_date'],
            'status': ObjectiveStatus(data.get('status') or ObjectiveStatus.ACTIVE).value,
            'category': ObjectiveCategory(data.get('category') or ObjectiveCategory.PRODUCTION).value,
        }

    def _serialize(self, objective: Objective) -> Dict:
        status = ObjectiveStatus(objective.status)
        category = ObjectiveCategory(objective.category)
        return {
            'id': objective.id,
            'title': objective.title,
            'description': objective.description,
            'target_value': objective.target_value or 0.0,
            'current_value': objective.current_value or 0.0,
            'unit': objective.unit,
            'start_date': objective.start_date,
            'end_date': objective.end_date,
            'status': status,
            'status_label': status.label,
            'category': category,
            'category_label': category.label,
            'progress': self.progress(objective),
        }
