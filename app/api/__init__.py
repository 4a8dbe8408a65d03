"""API module"""
# Import all routers
from . import (
    health,
    products,
    clients,
    stock,
    sales,
    quotations,
    invoices,
    deliveries,
    production,
    losses,
    accounting,
    employees,
    objectives,
    reports,
    settings,
    catalog,
    admin,
    maintenance,
)

__all__ = [
    "health",
    "products",
    "clients",
    "stock",
    "sales",
    "quotations",
    "invoices",
    "deliveries",
    "production",
    "losses",
    "accounting",
    "employees",
    "objectives",
    "reports",
    "settings",
    "catalog",
    "admin",
    "maintenance",
]
