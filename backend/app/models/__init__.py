"""
SQLAlchemy Models for ERP System
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, Date, Numeric,
    ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base


# ==================== ENUMS ====================

class UserRole(str, enum.Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"
    ACCOUNTANT = "ACCOUNTANT"
    HR = "HR"


class InvoiceStatus(str, enum.Enum):
    SENT = "SENT"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


class PurchaseOrderStatus(str, enum.Enum):
    SENT = "SENT"
    CONFIRMED = "CONFIRMED"
    RECEIVED = "RECEIVED"


class PayrollStatus(str, enum.Enum):
    PENDING = "PENDING"
    PROCESSED = "PROCESSED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class AccountType(str, enum.Enum):
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class TransactionType(str, enum.Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class TransactionStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"


# ==================== CORE MODELS ====================

class Company(Base):
    """Tenant: every business row belongs to exactly one company"""
    __tablename__ = 'companies'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    legal_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    currency = Column(String(10), default="INR", nullable=False)
    timezone = Column(String(64), default="Asia/Kolkata", nullable=False)
    tax_id = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    users = relationship("User", back_populates="company", cascade="all, delete-orphan")
    customers = relationship("Customer", back_populates="company", cascade="all, delete-orphan")
    suppliers = relationship("Supplier", back_populates="company", cascade="all, delete-orphan")
    products = relationship("Product", back_populates="company", cascade="all, delete-orphan")
    warehouses = relationship("Warehouse", back_populates="company", cascade="all, delete-orphan")
    invoices = relationship("Invoice", back_populates="company", cascade="all, delete-orphan")
    purchase_orders = relationship("PurchaseOrder", back_populates="company", cascade="all, delete-orphan")
    employees = relationship("Employee", back_populates="company", cascade="all, delete-orphan")
    payrolls = relationship("Payroll", back_populates="company", cascade="all, delete-orphan")
    accounts = relationship("Account", back_populates="company", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="company", cascade="all, delete-orphan")


class User(Base):
    """User account"""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    is_active = Column(Boolean, default=True, nullable=False)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_by = Column(Integer, nullable=True)
    updated_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="users")

    __table_args__ = (
        Index('ix_users_company_id', 'company_id'),
    )


# ==================== CRM MODELS ====================

class Customer(Base):
    """Customer"""
    __tablename__ = 'customers'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    gst_number = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="customers")
    invoices = relationship("Invoice", back_populates="customer")
    transactions = relationship("Transaction", back_populates="customer")

    __table_args__ = (
        Index('ix_customers_company_id', 'company_id'),
    )


class Supplier(Base):
    """Supplier"""
    __tablename__ = 'suppliers'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    gst_number = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="suppliers")
    purchase_orders = relationship("PurchaseOrder", back_populates="supplier")
    transactions = relationship("Transaction", back_populates="supplier")

    __table_args__ = (
        Index('ix_suppliers_company_id', 'company_id'),
    )


# ==================== INVENTORY MODELS ====================

class Product(Base):
    """Product/Item"""
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    sku = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(String(100), nullable=True)
    unit = Column(String(20), default="pcs", nullable=False)
    price = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    cost_price = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    gst_rate = Column(Numeric(5, 2), default=Decimal("0.00"), nullable=False)
    min_stock = Column(Integer, default=0, nullable=False)
    max_stock = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="products")
    stocks = relationship("Stock", back_populates="product", cascade="all, delete-orphan")
    invoice_items = relationship("InvoiceItem", back_populates="product")
    purchase_order_items = relationship("PurchaseOrderItem", back_populates="product")

    __table_args__ = (
        UniqueConstraint('company_id', 'sku', name='uq_product_sku'),
        Index('ix_products_company_id', 'company_id'),
    )


class Warehouse(Base):
    """Storage location"""
    __tablename__ = 'warehouses'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="warehouses")
    stocks = relationship("Stock", back_populates="warehouse", cascade="all, delete-orphan")

    __table_args__ = (
        Index('ix_warehouses_company_id', 'company_id'),
    )


class Stock(Base):
    """Quantity of one product held in one warehouse"""
    __tablename__ = 'stocks'

    id = Column(Integer, primary_key=True)
    quantity = Column(Integer, default=0, nullable=False)
    reserved = Column(Integer, default=0, nullable=False)
    available = Column(Integer, default=0, nullable=False)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    warehouse_id = Column(Integer, ForeignKey('warehouses.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    product = relationship("Product", back_populates="stocks")
    warehouse = relationship("Warehouse", back_populates="stocks")

    __table_args__ = (
        UniqueConstraint('product_id', 'warehouse_id', name='uq_stock_product_warehouse'),
    )


# ==================== SALES MODELS ====================

class Invoice(Base):
    """Sales Invoice"""
    __tablename__ = 'invoices'

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String(50), nullable=False)
    date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    subtotal = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    tax_amount = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    total = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    status = Column(String(20), default=InvoiceStatus.SENT.value, nullable=False)
    notes = Column(Text, nullable=True)
    customer_id = Column(Integer, ForeignKey('customers.id', ondelete='CASCADE'), nullable=False)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    customer = relationship("Customer", back_populates="invoices")
    company = relationship("Company", back_populates="invoices")
    items = relationship(
        "InvoiceItem", back_populates="invoice",
        cascade="all, delete-orphan", order_by="InvoiceItem.position"
    )

    __table_args__ = (
        UniqueConstraint('company_id', 'invoice_number', name='uq_invoice_number'),
        Index('ix_invoices_company_id', 'company_id'),
    )


class InvoiceItem(Base):
    """Sales Invoice Line Item"""
    __tablename__ = 'invoice_items'

    id = Column(Integer, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(15, 2), nullable=False)
    tax_rate = Column(Numeric(5, 2), default=Decimal("0.00"), nullable=False)
    tax_amount = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    discount = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    total = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    invoice_id = Column(Integer, ForeignKey('invoices.id', ondelete='CASCADE'), nullable=False)

    # Relationships
    product = relationship("Product", back_populates="invoice_items")
    invoice = relationship("Invoice", back_populates="items")


# ==================== PURCHASE MODELS ====================

class PurchaseOrder(Base):
    """Purchase order sent to a supplier"""
    __tablename__ = 'purchase_orders'

    id = Column(Integer, primary_key=True)
    po_number = Column(String(50), nullable=False)
    date = Column(Date, nullable=False)
    expected_date = Column(Date, nullable=True)
    subtotal = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    tax_amount = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    total = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    status = Column(String(20), default=PurchaseOrderStatus.SENT.value, nullable=False)
    notes = Column(Text, nullable=True)
    supplier_id = Column(Integer, ForeignKey('suppliers.id', ondelete='CASCADE'), nullable=False)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    supplier = relationship("Supplier", back_populates="purchase_orders")
    company = relationship("Company", back_populates="purchase_orders")
    items = relationship(
        "PurchaseOrderItem", back_populates="purchase_order",
        cascade="all, delete-orphan", order_by="PurchaseOrderItem.position"
    )

    __table_args__ = (
        UniqueConstraint('company_id', 'po_number', name='uq_po_number'),
        Index('ix_purchase_orders_company_id', 'company_id'),
    )


class PurchaseOrderItem(Base):
    """Purchase Order Line Item"""
    __tablename__ = 'purchase_order_items'

    id = Column(Integer, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(15, 2), nullable=False)
    tax_rate = Column(Numeric(5, 2), default=Decimal("0.00"), nullable=False)
    tax_amount = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    total = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    purchase_order_id = Column(Integer, ForeignKey('purchase_orders.id', ondelete='CASCADE'), nullable=False)

    # Relationships
    product = relationship("Product", back_populates="purchase_order_items")
    purchase_order = relationship("PurchaseOrder", back_populates="items")


# ==================== HR MODELS ====================

class Employee(Base):
    """Employee"""
    __tablename__ = 'employees'

    id = Column(Integer, primary_key=True)
    employee_id = Column(String(50), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    date_of_joining = Column(Date, nullable=False)
    department = Column(String(100), nullable=True)
    designation = Column(String(100), nullable=True)
    salary = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="employees")
    payrolls = relationship("Payroll", back_populates="employee", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('company_id', 'employee_id', name='uq_employee_code'),
        Index('ix_employees_company_id', 'company_id'),
    )


class Payroll(Base):
    """Monthly payroll record for one employee"""
    __tablename__ = 'payrolls'

    id = Column(Integer, primary_key=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    basic_salary = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    allowances = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    deductions = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    net_salary = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    status = Column(String(20), default=PayrollStatus.PENDING.value, nullable=False)
    paid_date = Column(DateTime, nullable=True)
    employee_id = Column(Integer, ForeignKey('employees.id', ondelete='CASCADE'), nullable=False)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    employee = relationship("Employee", back_populates="payrolls")
    company = relationship("Company", back_populates="payrolls")

    __table_args__ = (
        UniqueConstraint('employee_id', 'month', 'year', name='uq_payroll_period'),
        Index('ix_payrolls_company_id', 'company_id'),
    )


# ==================== ACCOUNTING MODELS ====================

class Account(Base):
    """Chart of Accounts"""
    __tablename__ = 'accounts'

    id = Column(Integer, primary_key=True)
    code = Column(String(20), nullable=False)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    parent_id = Column(Integer, ForeignKey('accounts.id', ondelete='SET NULL'), nullable=True)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="accounts")
    parent = relationship("Account", remote_side=[id], backref="children")
    transactions = relationship("Transaction", back_populates="account")

    __table_args__ = (
        Index('ix_accounts_company_id', 'company_id'),
        Index('ix_accounts_code', 'code'),
    )


class Transaction(Base):
    """Single-sided money movement posted against an account"""
    __tablename__ = 'transactions'

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    reference = Column(String(100), nullable=True)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    type = Column(String(10), nullable=False)
    status = Column(String(20), default=TransactionStatus.PENDING.value, nullable=False)
    account_id = Column(Integer, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False)
    customer_id = Column(Integer, ForeignKey('customers.id', ondelete='SET NULL'), nullable=True)
    supplier_id = Column(Integer, ForeignKey('suppliers.id', ondelete='SET NULL'), nullable=True)
    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="transactions")
    customer = relationship("Customer", back_populates="transactions")
    supplier = relationship("Supplier", back_populates="transactions")
    company = relationship("Company", back_populates="transactions")

    __table_args__ = (
        Index('ix_transactions_company_id', 'company_id'),
    )
