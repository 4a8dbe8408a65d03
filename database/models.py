"""
Database Models - tables de GESCO
"""
from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime, Text, Boolean, ForeignKey, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import datetime

from .connection import Base


class Product(Base):
    """
    Produits fabriqués (briques, hourdis, pavés...)
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    name = Column(String(200), nullable=False)
    type = Column(String(100))
    unit = Column(String(50), default="pièce")
    price = Column(Float, default=0.0)  # Prix unitaire de vente (XOF)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class Client(Base):
    """Base clients"""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    name = Column(String(200), nullable=False, index=True)
    email = Column(String(200))
    phone = Column(String(50))
    address = Column(String(500))
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.now, index=True)

    sales = relationship("Sale", back_populates="client")


class StockItem(Base):
    """
    Niveau de stock par produit avec seuils min/max
    """
    __tablename__ = "stock"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    current_quantity = Column(Integer, default=0)
    min_threshold = Column(Integer, default=0)
    max_threshold = Column(Integer, default=0)

    last_updated = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    product = relationship("Product")


class Sale(Base):
    """
    Ventes - une ligne = un client, un produit
    total_amount = quantity * unit_price
    """
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Integer, default=0)
    unit_price = Column(Float, default=0.0)
    total_amount = Column(Float, default=0.0)

    sale_date = Column(DateTime, default=datetime.now, nullable=False, index=True)
    status = Column(String(20), default="pending", nullable=False, index=True)
    payment_method = Column(String(100))
    notes = Column(Text)

    client = relationship("Client", back_populates="sales")
    product = relationship("Product")
    invoice = relationship("Invoice", back_populates="sale", uselist=False)
    delivery = relationship("Delivery", back_populates="sale", uselist=False)

    __table_args__ = (
        Index('idx_sales_status_date', 'status', 'sale_date'),
    )


class Quotation(Base):
    """Devis"""
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Integer, default=0)
    unit_price = Column(Float, default=0.0)
    total_amount = Column(Float, default=0.0)

    valid_until = Column(Date, nullable=False)
    status = Column(String(20), default="draft", nullable=False, index=True)
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.now, index=True)

    client = relationship("Client")
    product = relationship("Product")


class Invoice(Base):
    """
    Factures - une facture par vente
    total_amount est TTC, tax_amount la TVA
    """
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, unique=True, index=True)
    invoice_number = Column(String(50), unique=True, nullable=False, index=True)

    issue_date = Column(Date, nullable=False, index=True)
    due_date = Column(Date, nullable=False)
    status = Column(String(20), default="draft", nullable=False, index=True)

    total_amount = Column(Float, default=0.0)
    tax_amount = Column(Float, default=0.0)
    tax_rate = Column(Float, default=18.0)
    notes = Column(Text)

    sale = relationship("Sale", back_populates="invoice")


class Delivery(Base):
    """Livraisons - une livraison par vente"""
    __tablename__ = "deliveries"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, unique=True, index=True)
    delivery_date = Column(Date, nullable=False, index=True)
    delivery_address = Column(String(500), nullable=False)
    status = Column(String(20), default="scheduled", nullable=False, index=True)

    driver_name = Column(String(200))
    vehicle_info = Column(String(200))
    notes = Column(Text)

    sale = relationship("Sale", back_populates="delivery")


class ProductionOrder(Base):
    """Ordres de production"""
    __tablename__ = "production_orders"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    planned_quantity = Column(Integer, default=0)
    produced_quantity = Column(Integer, default=0)

    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(DateTime, nullable=True)
    status = Column(String(20), default="planned", nullable=False, index=True)
    notes = Column(Text)

    product = relationship("Product")


class Loss(Base):
    """
    Pertes et casses
    value_lost = quantity * product.price au moment de la saisie
    """
    __tablename__ = "losses"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, default=0)
    loss_type = Column(String(20), default="damage", nullable=False)
    loss_date = Column(Date, nullable=False, index=True)
    description = Column(Text)
    value_lost = Column(Float, default=0.0)

    product = relationship("Product")


class Objective(Base):
    """Objectifs et suivi"""
    __tablename__ = "objectives"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    title = Column(String(200))
    description = Column(Text)
    target_value = Column(Float, default=0.0)
    current_value = Column(Float, default=0.0)
    unit = Column(String(50))

    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    status = Column(String(20), default="active", nullable=False, index=True)
    category = Column(String(20), default="production", nullable=False)


class Expense(Base):
    """Dépenses (comptabilité)"""
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    amount = Column(Float, default=0.0)
    category = Column(String(100), nullable=False, index=True)
    expense_date = Column(Date, nullable=False, index=True)
    payment_method = Column(String(100))
    description = Column(String(500))
    notes = Column(Text)


class Employee(Base):
    """Personnel"""
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(200))
    phone = Column(String(50))
    address = Column(String(500))
    department = Column(String(100))
    position = Column(String(100))
    salary = Column(Float)
    hire_date = Column(Date)
    role = Column(String(20), default="user", nullable=False)
    is_active = Column(Boolean, default=True)

    overtime_hours = relationship(
        "OvertimeHour", back_populates="employee", cascade="all, delete-orphan"
    )


class OvertimeHour(Base):
    """
    Heures supplémentaires
    total_amount = hours_worked * hourly_rate
    """
    __tablename__ = "overtime_hours"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(64), unique=True, index=True, nullable=True)

    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    hours_worked = Column(Float, default=0.0)
    hourly_rate = Column(Float, default=0.0)
    total_amount = Column(Float, default=0.0)
    description = Column(Text)

    employee = relationship("Employee", back_populates="overtime_hours")


class CompanySettings(Base):
    """
    Paramètres de l'entreprise - une seule ligne
    """
    __tablename__ = "company_settings"

    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String(200), default="Cornerstone GESCO")
    address = Column(String(500), default="")
    phone = Column(String(50), default="")
    email = Column(String(200), default="")
    tax_rate = Column(Float, default=18.0)

    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
