"""
Pydantic Models - Request/Response schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, Dict, List
from datetime import date, datetime

from app.core.enums import (
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
)

# type des champs nommés "date"
DateType = date


# ============================================================================
# PRODUITS
# ============================================================================

class ProductRequest(BaseModel):
    """Création / modification d'un produit"""
    name: str = Field(..., min_length=1, description="Nom du produit")
    type: Optional[str] = Field(None, description="Type (brique pleine, creuse, hourdis...)")
    unit: str = Field("pièce", description="Unité de mesure")
    price: float = Field(0.0, ge=0, description="Prix unitaire (XOF)")


class ProductResponse(BaseModel):
    id: int
    name: str
    type: Optional[str] = None
    unit: Optional[str] = None
    price: float

    class Config:
        from_attributes = True


# ============================================================================
# CLIENTS
# ============================================================================

class ClientRequest(BaseModel):
    """Formulaire client"""
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class ClientStats(BaseModel):
    """Statistiques calculées sur les ventes terminées du client"""
    total_spent: float
    total_orders: int
    last_order_date: Optional[datetime] = None


class ClientResponse(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    stats: ClientStats


class ClientsOverviewResponse(BaseModel):
    """Vue d'ensemble: valeur totale et top 5 clients"""
    total_clients: int
    total_clients_value: float
    top_clients: List[ClientResponse]


# ============================================================================
# STOCK
# ============================================================================

class StockRequest(BaseModel):
    """Formulaire de stock"""
    product_id: int
    current_quantity: int = Field(..., description="Quantité actuelle")
    min_threshold: int = Field(..., description="Seuil minimum")
    max_threshold: int = Field(..., description="Seuil maximum")


class StockResponse(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    product_type: Optional[str] = None
    product_unit: Optional[str] = None
    current_quantity: int
    min_threshold: int
    max_threshold: int
    last_updated: Optional[datetime] = None
    level: StockLevel
    level_label: str


class StockSummaryResponse(BaseModel):
    total_items: int
    low_stock_items: int
    high_stock_items: int
    total_value: float


# ============================================================================
# VENTES
# ============================================================================

class SaleRequest(BaseModel):
    """
    Formulaire de vente

    Sans client_id, un nouveau client est créé à partir de client_name.
    """
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    payment_method: Optional[str] = None
    product_id: int
    quantity: int = Field(..., ge=0)
    unit_price: float = Field(..., ge=0)
    status: SaleStatus = SaleStatus.PENDING


class SaleResponse(BaseModel):
    id: int
    client_id: int
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_address: Optional[str] = None
    product_id: int
    product_name: Optional[str] = None
    product_type: Optional[str] = None
    product_unit: Optional[str] = None
    quantity: int
    unit_price: float
    total_amount: float
    sale_date: datetime
    status: SaleStatus
    status_label: str
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    has_invoice: bool = False
    has_delivery: bool = False


class SaleInvoiceRequest(BaseModel):
    """Facture créée directement depuis une vente"""
    due_date: Optional[date] = Field(None, description="Par défaut: aujourd'hui + 30 jours")
    tax_rate: Optional[float] = Field(None, ge=0, description="Taux de TVA (%)")
    notes: Optional[str] = None


# ============================================================================
# DEVIS
# ============================================================================

class QuotationRequest(BaseModel):
    client_id: int
    product_id: int
    quantity: int = Field(..., ge=0)
    unit_price: float = Field(..., ge=0)
    valid_until: date
    status: QuotationStatus = QuotationStatus.DRAFT
    notes: Optional[str] = None


class QuotationResponse(BaseModel):
    id: int
    client_id: int
    client_name: Optional[str] = None
    product_id: int
    product_name: Optional[str] = None
    product_type: Optional[str] = None
    product_unit: Optional[str] = None
    quantity: int
    unit_price: float
    total_amount: float
    valid_until: date
    status: QuotationStatus
    status_label: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


# ============================================================================
# FACTURES
# ============================================================================

class InvoiceRequest(BaseModel):
    """Formulaire de facture"""
    sale_id: int
    due_date: date
    status: InvoiceStatus = InvoiceStatus.DRAFT
    tax_rate: Optional[float] = Field(None, ge=0, description="Taux de TVA (%)")
    notes: Optional[str] = None


class InvoiceStatusRequest(BaseModel):
    status: InvoiceStatus


class InvoiceResponse(BaseModel):
    id: int
    sale_id: int
    invoice_number: str
    issue_date: date
    due_date: date
    status: InvoiceStatus
    status_label: str
    amount_ht: float
    tax_amount: float
    total_amount: float
    tax_rate: float
    notes: Optional[str] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    product_name: Optional[str] = None
    product_type: Optional[str] = None
    quantity: Optional[int] = None
    unit_price: Optional[float] = None


class InvoiceLine(BaseModel):
    designation: str
    quantity: int
    unit_price: float
    total: float


class InvoiceDocumentResponse(BaseModel):
    """Document imprimable (en-tête société, client, lignes, totaux)"""
    company: Dict[str, str]
    invoice_number: str
    date: DateType
    due_date: date
    client_name: str
    client_address: Optional[str] = None
    items: List[InvoiceLine]
    subtotal: float
    tax_rate: float
    tax_amount: float
    total_ttc: float


# ============================================================================
# LIVRAISONS
# ============================================================================

class DeliveryRequest(BaseModel):
    sale_id: int
    delivery_date: date
    delivery_address: str = Field(..., min_length=1)
    status: DeliveryStatus = DeliveryStatus.SCHEDULED
    driver_name: Optional[str] = None
    vehicle_info: Optional[str] = None
    notes: Optional[str] = None


class DeliveryStatusRequest(BaseModel):
    status: DeliveryStatus


class DeliveryResponse(BaseModel):
    id: int
    sale_id: int
    delivery_date: date
    delivery_address: str
    status: DeliveryStatus
    status_label: str
    driver_name: Optional[str] = None
    vehicle_info: Optional[str] = None
    notes: Optional[str] = None
    client_name: Optional[str] = None
    product_name: Optional[str] = None
    product_unit: Optional[str] = None
    quantity: Optional[int] = None


# ============================================================================
# PRODUCTION
# ============================================================================

class ProductionOrderRequest(BaseModel):
    product_id: int
    planned_quantity: int = Field(..., ge=0)
    start_date: date
    end_date: Optional[date] = None
    status: ProductionStatus = ProductionStatus.PLANNED
    notes: Optional[str] = None


class ProductionStatusRequest(BaseModel):
    status: ProductionStatus


class ProducedQuantityRequest(BaseModel):
    produced_quantity: int = Field(..., ge=0)


class ProductionOrderResponse(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    product_type: Optional[str] = None
    product_unit: Optional[str] = None
    planned_quantity: int
    produced_quantity: int
    start_date: date
    end_date: Optional[datetime] = None
    status: ProductionStatus
    status_label: str
    notes: Optional[str] = None
    progress: float


# ============================================================================
# PERTES
# ============================================================================

class LossRequest(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=0)
    loss_type: LossType = LossType.DAMAGE
    loss_date: date
    description: Optional[str] = None


class LossResponse(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    product_type: Optional[str] = None
    product_unit: Optional[str] = None
    quantity: int
    loss_type: LossType
    loss_type_label: str
    loss_date: date
    description: Optional[str] = None
    value_lost: float


class LossListResponse(BaseModel):
    items: List[LossResponse]
    total_value_lost: float


# ============================================================================
# OBJECTIFS
# ============================================================================

class ObjectiveRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    target_value: float = Field(..., ge=0)
    unit: str
    start_date: date
    end_date: date
    status: ObjectiveStatus = ObjectiveStatus.ACTIVE
    category: ObjectiveCategory = ObjectiveCategory.PRODUCTION


class CurrentValueRequest(BaseModel):
    current_value: float


class ObjectiveStatusRequest(BaseModel):
    status: ObjectiveStatus


class ObjectiveResponse(BaseModel):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    target_value: float
    current_value: float
    unit: Optional[str] = None
    start_date: date
    end_date: date
    status: ObjectiveStatus
    status_label: str
    category: ObjectiveCategory
    category_label: str
    progress: float


class CategoryStats(BaseModel):
    total: int
    completed: int


# ============================================================================
# COMPTABILITÉ
# ============================================================================

class ExpenseRequest(BaseModel):
    amount: float = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    expense_date: date
    payment_method: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None


class ExpenseResponse(BaseModel):
    id: int
    amount: float
    category: str
    expense_date: date
    payment_method: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class CategoryTotal(BaseModel):
    category: str
    amount: float


class AccountingSummaryResponse(BaseModel):
    """Revenus, dépenses et résultat net d'une période"""
    period: str
    period_label: str
    start_date: date
    end_date: date
    revenue: float
    total_expenses: float
    net_profit: float
    top_categories: List[CategoryTotal]


# ============================================================================
# EMPLOYÉS
# ============================================================================

class EmployeeRequest(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    salary: Optional[float] = Field(None, ge=0)
    hire_date: Optional[date] = None
    role: EmployeeRole = EmployeeRole.USER
    is_active: bool = True


class EmployeeResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    salary: Optional[float] = None
    hire_date: Optional[date] = None
    role: EmployeeRole
    role_label: str
    is_active: bool


class OvertimeRequest(BaseModel):
    date: DateType
    hours_worked: float = Field(..., ge=0)
    hourly_rate: float = Field(..., ge=0)
    description: Optional[str] = None


class OvertimeResponse(BaseModel):
    id: int
    employee_id: int
    date: DateType
    hours_worked: float
    hourly_rate: float
    total_amount: float
    description: Optional[str] = None

    class Config:
        from_attributes = True


class OvertimeSummaryResponse(BaseModel):
    employee_id: int
    year: int
    month: int
    total_amount: float
    entries: List[OvertimeResponse]


# ============================================================================
# RAPPORTS
# ============================================================================

class SalesReport(BaseModel):
    total_revenue: float
    total_sales: int
    avg_order_value: float


class ProductionReport(BaseModel):
    total_produced: int
    production_orders: int
    efficiency_rate: float


class StockReport(BaseModel):
    total_products: int
    low_stock_items: int
    total_value: float


class MonthlyData(BaseModel):
    month: str
    sales: float
    production: int
    expenses: float


class ReportResponse(BaseModel):
    period: str
    period_label: str
    start_date: date
    end_date: date
    sales: SalesReport
    production: ProductionReport
    stock: StockReport
    monthly: List[MonthlyData]
    generated_at: datetime


# ============================================================================
# PARAMÈTRES, FAQ, DASHBOARD
# ============================================================================

class CompanySettingsRequest(BaseModel):
    company_name: str = Field(..., min_length=1)
    address: str = ""
    phone: str = ""
    email: str = ""
    tax_rate: float = Field(18.0, ge=0)


class CompanySettingsResponse(BaseModel):
    company_name: str
    address: str
    phone: str
    email: str
    tax_rate: float

    class Config:
        from_attributes = True


class FaqItem(BaseModel):
    question: str
    answer: str


class DashboardModule(BaseModel):
    id: str
    title: str
    description: str
    roles: List[str]


# ============================================================================
# IMPORT, HEALTH
# ============================================================================

class ImportRequest(BaseModel):
    """Import depuis l'ancien backend Supabase"""
    tables: Optional[List[str]] = Field(None, description="Tables à importer (toutes par défaut)")


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    timestamp: datetime
    database_connection: str
    legacy_backend_connection: str
    version: str
