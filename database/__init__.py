"""Database module"""
from .connection import Base, engine, get_db, SessionLocal
from .models import (
    Product,
    Client,
    StockItem,
    Sale,
    Quotation,
    Invoice,
    Delivery,
    ProductionOrder,
    Loss,
    Objective,
    Expense,
    Employee,
    OvertimeHour,
    CompanySettings,
)

__all__ = [
    "Base",
    "engine",
    "get_db",
    "SessionLocal",
    "Product",
    "Client",
    "StockItem",
    "Sale",
    "Quotation",
    "Invoice",
    "Delivery",
    "ProductionOrder",
    "Loss",
    "Objective",
    "Expense",
    "Employee",
    "OvertimeHour",
    "CompanySettings",
]
