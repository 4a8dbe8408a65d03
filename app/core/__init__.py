"""Core module"""
from .config import Settings, get_settings
from .enums import (
    SaleStatus,
    QuotationStatus,
    InvoiceStatus,
    DeliveryStatus,
    ProductionStatus,
    LossType,
    ObjectiveStatus,
    ObjectiveCategory,
    EmployeeRole,
    StockLevel,
    ReportPeriod,
    ExpenseCategory,
)

__all__ = [
    "Settings",
    "get_settings",
    "SaleStatus",
    "QuotationStatus",
    "InvoiceStatus",
    "DeliveryStatus",
    "ProductionStatus",
    "LossType",
    "ObjectiveStatus",
    "ObjectiveCategory",
    "EmployeeRole",
    "StockLevel",
    "ReportPeriod",
    "ExpenseCategory",
]
