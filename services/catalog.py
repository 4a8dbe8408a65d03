"""
Catalog - contenus statiques: FAQ et modules du tableau de bord
"""
from typing import Dict, List, Optional

from app.core import EmployeeRole
from services.common import matches


FAQ_ITEMS = [
    {
        'question': "Comment créer une nouvelle vente ?",
        'answer': "Allez dans le module Ventes, cliquez sur \"Nouvelle vente\", sélectionnez "
                  "le client et le produit, puis saisissez la quantité.",
    },
    {
        'question': "Comment gérer les stocks ?",
        'answer': "Le module Stock permet de voir les niveaux actuels, définir des seuils "
                  "min/max et suivre les mouvements.",
    },
    {
        'question': "Comment programmer une livraison ?",
        'answer': "Dans le module Livraisons, sélectionnez une vente terminée et programmez "
                  "la date de livraison.",
    },
    {
        'question': "Comment facturer une vente ?",
        'answer': "Dans le module Factures, choisissez une vente terminée sans facture. "
                  "La TVA est calculée avec le taux des paramètres (18% par défaut).",
    },
    {
        'question': "Comment convertir un devis en vente ?",
        'answer': "Dans le module Devis, utilisez l'action \"Convertir en vente\": une vente "
                  "en attente est créée et le devis passe au statut accepté.",
    },
]

ALL_ROLES = [role.value for role in EmployeeRole]

DASHBOARD_MODULES = [
    {'id': 'stock', 'title': "Stock", 'description': "Gestion des stocks de briques",
     'roles': ['admin', 'production', 'vente']},
    {'id': 'sales', 'title': "Ventes", 'description': "Enregistrement des ventes",
     'roles': ['admin', 'vente']},
    {'id': 'quotations', 'title': "Devis", 'description': "Création et gestion des devis",
     'roles': ['admin', 'vente']},
    {'id': 'invoices', 'title': "Factures", 'description': "Facturation et suivi",
     'roles': ['admin', 'vente', 'comptabilite']},
    {'id': 'deliveries', 'title': "Livraisons", 'description': "Gestion des livraisons",
     'roles': ['admin', 'livraison', 'vente']},
    {'id': 'production', 'title': "Production", 'description': "Ordres de production",
     'roles': ['admin', 'production']},
    {'id': 'losses', 'title': "Pertes", 'description': "Suivi des pertes et casses",
     'roles': ['admin', 'production', 'livraison']},
    {'id': 'accounting', 'title': "Comptabilité", 'description': "Gestion comptable",
     'roles': ['admin', 'comptabilite']},
    {'id': 'employees', 'title': "Employés", 'description': "Gestion du personnel",
     'roles': ['admin']},
    {'id': 'objectives', 'title': "Objectifs", 'description': "Objectifs et suivi",
     'roles': ['admin', 'production']},
    {'id': 'reports', 'title': "Rapports", 'description': "Analyses et statistiques",
     'roles': ['admin', 'comptabilite']},
    {'id': 'clients', 'title': "Clients", 'description': "Base clients",
     'roles': ['admin', 'vente']},
    {'id': 'settings', 'title': "Paramètres", 'description': "Configuration système",
     'roles': ['admin']},
    {'id': 'faq', 'title': "FAQ & Aide", 'description': "Documentation et aide",
     'roles': ALL_ROLES},
]


def search_faq(search: Optional[str] = None) -> List[Dict]:
    return [item for item in FAQ_ITEMS if matches(search, item['question'], item['answer'])]


def dashboard_modules(role: Optional[EmployeeRole] = None) -> List[Dict]:
    """Modules visibles pour un rôle (tous sans filtre)"""
    if role is None:
        return list(DASHBOARD_MODULES)
    role = EmployeeRole(role)
    return [module for module in DASHBOARD_MODULES if role.value in module['roles']]
