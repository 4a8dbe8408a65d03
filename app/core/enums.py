"""
Core Enums - statuts et règles métier de GESCO
"""
from enum import Enum


class SaleStatus(str, Enum):
    """Statuts d'une vente"""
    PENDING = "pending"        # En attente
    COMPLETED = "completed"    # Terminée
    CANCELLED = "cancelled"    # Annulée

    @property
    def label(self) -> str:
        return {
            "pending": "En attente",
            "completed": "Terminée",
            "cancelled": "Annulée",
        }[self.value]


class QuotationStatus(str, Enum):
    """Statuts d'un devis"""
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"

    @property
    def label(self) -> str:
        return {
            "draft": "Brouillon",
            "sent": "Envoyé",
            "accepted": "Accepté",
            "rejected": "Rejeté",
            "expired": "Expiré",
        }[self.value]


class InvoiceStatus(str, Enum):
    """Statuts d'une facture"""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return {
            "draft": "Brouillon",
            "sent": "Envoyée",
            "paid": "Payée",
            "overdue": "En retard",
            "cancelled": "Annulée",
        }[self.value]


class DeliveryStatus(str, Enum):
    """Statuts d'une livraison"""
    SCHEDULED = "scheduled"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    FAILED = "failed"

    @property
    def label(self) -> str:
        return {
            "scheduled": "Programmée",
            "in_transit": "En transit",
            "delivered": "Livrée",
            "failed": "Échouée",
        }[self.value]


class ProductionStatus(str, Enum):
    """Statuts d'un ordre de production"""
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return {
            "planned": "Planifié",
            "in_progress": "En cours",
            "completed": "Terminé",
            "cancelled": "Annulé",
        }[self.value]


class LossType(str, Enum):
    """Types de perte"""
    DAMAGE = "damage"
    EXPIRY = "expiry"
    THEFT = "theft"
    OTHER = "other"

    @property
    def label(self) -> str:
        return {
            "damage": "Dommage",
            "expiry": "Péremption",
            "theft": "Vol",
            "other": "Autre",
        }[self.value]


class ObjectiveStatus(str, Enum):
    """Statuts d'un objectif"""
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return {
            "active": "Actif",
            "completed": "Terminé",
            "cancelled": "Annulé",
        }[self.value]


class ObjectiveCategory(str, Enum):
    """Catégories d'objectifs"""
    PRODUCTION = "production"
    SALES = "sales"
    QUALITY = "quality"
    EFFICIENCY = "efficiency"
    OTHER = "other"

    @property
    def label(self) -> str:
        return {
            "production": "Production",
            "sales": "Ventes",
            "quality": "Qualité",
            "efficiency": "Efficacité",
            "other": "Autre",
        }[self.value]


class EmployeeRole(str, Enum):
    """Rôles du personnel"""
    ADMIN = "admin"
    PRODUCTION = "production"
    VENTE = "vente"
    LIVRAISON = "livraison"
    COMPTABILITE = "comptabilite"
    USER = "user"

    @property
    def label(self) -> str:
        return {
            "admin": "Administrateur",
            "production": "Production",
            "vente": "Vente",
            "livraison": "Livraison",
            "comptabilite": "Comptabilité",
            "user": "Utilisateur",
        }[self.value]


class StockLevel(str, Enum):
    """
    Classification d'une ligne de stock par rapport à ses seuils
    """
    LOW = "low"          # quantité <= seuil minimum
    HIGH = "high"        # quantité >= seuil maximum
    NORMAL = "normal"

    @property
    def label(self) -> str:
        return {
            "low": "Stock faible",
            "high": "Stock élevé",
            "normal": "Normal",
        }[self.value]

    @classmethod
    def classify(cls, current_quantity: int, min_threshold: int, max_threshold: int) -> "StockLevel":
        """Le seuil minimum est testé en premier"""
        if current_quantity <= min_threshold:
            return cls.LOW
        if current_quantity >= max_threshold:
            return cls.HIGH
        return cls.NORMAL


class ReportPeriod(str, Enum):
    """Périodes de rapport et de comptabilité"""
    CURRENT_MONTH = "current_month"
    LAST_MONTH = "last_month"
    CURRENT_QUARTER = "current_quarter"
    CURRENT_YEAR = "current_year"

    @property
    def label(self) -> str:
        return {
            "current_month": "Ce mois",
            "last_month": "Mois dernier",
            "current_quarter": "Ce trimestre",
            "current_year": "Cette année",
        }[self.value]


class ExpenseCategory:
    """
    Catégories de dépenses proposées dans le formulaire comptable

    La colonne reste libre: une dépense importée peut porter une autre catégorie.
    """
    CATEGORIES = [
        "Matières premières",
        "Salaires",
        "Transport",
        "Électricité",
        "Maintenance",
        "Carburant",
        "Assurance",
        "Taxes",
        "Marketing",
        "Fournitures",
        "Autre",
    ]

    @classmethod
    def get_all_values(cls):
        return list(cls.CATEGORIES)
