"""Services module"""
from .common import ConflictError
from .products import ProductService
from .clients import ClientService
from .stock import StockService
from .sales import SalesService
from .quotations import QuotationService
from .invoices import InvoiceService
from .deliveries import DeliveryService
from .production import ProductionService
from .losses import LossService
from .objectives import ObjectiveService
from .accounting import AccountingService
from .employees import EmployeeService
from .reports import ReportService
from .company_settings import CompanySettingsService

__all__ = [
    "ConflictError",
    "ProductService",
    "ClientService",
    "StockService",
    "SalesService",
    "QuotationService",
    "InvoiceService",
    "DeliveryService",
    "ProductionService",
    "LossService",
    "ObjectiveService",
    "AccountingService",
    "EmployeeService",
    "ReportService",
    "CompanySettingsService",
]
