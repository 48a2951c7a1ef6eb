"""
Pydantic Schemas for API Validation
"""
from pydantic import BaseModel, EmailStr, Field, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel
from typing import Annotated, Generic, List, Optional, TypeVar
from datetime import datetime, date as date_type
from decimal import Decimal

from app.models import UserRole, PayrollStatus, AccountType, TransactionType


# Decimals go out as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True, use_enum_values=True
    )


class Page(CamelModel, Generic[T]):
    items: List[T]
    total: int


class MessageResponse(CamelModel):
    message: str


class SuccessResponse(CamelModel):
    success: bool = True


# ==================== COMPANY SCHEMAS ====================

class CompanySummary(CamelModel):
    id: int
    name: str
    currency: Optional[str] = None
    timezone: Optional[str] = None


class CompanyResponse(CompanySummary):
    legal_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class CompanyUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    legal_name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=10)
    timezone: Optional[str] = Field(None, max_length=64)
    tax_id: Optional[str] = Field(None, max_length=50)


# ==================== USER SCHEMAS ====================

class UserBase(CamelModel):
    email: EmailStr
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.USER.value
    is_active: bool = True


class UserUpdate(CamelModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=2, max_length=100)
    last_name: Optional[str] = Field(None, min_length=2, max_length=100)
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserResponse(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    is_active: bool
    company_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserWithCompany(UserResponse):
    company: CompanySummary


# ==================== AUTH SCHEMAS ====================

class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(UserBase):
    password: str = Field(..., min_length=6)
    company_name: str = Field(..., min_length=2, max_length=255)
    role: Optional[UserRole] = None


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class AuthResponse(CamelModel):
    token: str
    user: UserWithCompany


class MeResponse(CamelModel):
    user: UserWithCompany


# ==================== CUSTOMER / SUPPLIER SCHEMAS ====================

class PartyBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    gst_number: Optional[str] = Field(None, max_length=50)


class PartyUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    gst_number: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None


class PartyResponse(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    gst_number: Optional[str] = None
    is_active: bool
    company_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class PartySummary(CamelModel):
    id: int
    name: str
    email: Optional[str] = None


class CustomerCreate(PartyBase):
    pass


class CustomerUpdate(PartyUpdate):
    pass


class CustomerResponse(PartyResponse):
    pass


class SupplierCreate(PartyBase):
    pass


class SupplierUpdate(PartyUpdate):
    pass


class SupplierResponse(PartyResponse):
    pass


# ==================== PRODUCT SCHEMAS ====================

class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    sku: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    category_id: Optional[str] = Field(None, max_length=100)
    unit: str = Field("pcs", max_length=20)
    price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    cost_price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    gst_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    min_stock: int = Field(0, ge=0)
    max_stock: Optional[int] = Field(None, ge=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    sku: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    category_id: Optional[str] = Field(None, max_length=100)
    unit: Optional[str] = Field(None, max_length=20)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    cost_price: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    gst_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    min_stock: Optional[int] = Field(None, ge=0)
    max_stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ProductSummary(CamelModel):
    id: int
    name: str
    sku: str


class ProductResponse(CamelModel):
    id: int
    name: str
    sku: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    unit: Optional[str] = None
    price: Money
    cost_price: Money
    gst_rate: Money
    min_stock: int
    max_stock: Optional[int] = None
    is_active: bool
    company_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


# ==================== WAREHOUSE / STOCK SCHEMAS ====================

class WarehouseBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)


class WarehouseCreate(WarehouseBase):
    pass


class WarehouseUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class WarehouseSummary(CamelModel):
    id: int
    name: str


class WarehouseResponse(WarehouseBase):
    id: int
    is_active: bool
    company_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class StockCreate(CamelModel):
    product_id: int
    warehouse_id: int
    quantity: int = Field(..., ge=0)
    reserved: int = Field(0, ge=0)
    available: Optional[int] = Field(None, ge=0)


class StockUpdate(CamelModel):
    quantity: Optional[int] = Field(None, ge=0)
    reserved: Optional[int] = Field(None, ge=0)
    available: Optional[int] = Field(None, ge=0)


class StockResponse(CamelModel):
    id: int
    product_id: int
    warehouse_id: int
    quantity: int
    reserved: int
    available: int
    product: ProductSummary
    warehouse: WarehouseSummary
    created_at: datetime
    updated_at: Optional[datetime] = None


# ==================== INVOICE SCHEMAS ====================

class InvoiceItemCreate(CamelModel):
    product_id: int
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    discount: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)


class InvoiceCreate(CamelModel):
    invoice_number: Optional[str] = Field(None, min_length=1, max_length=50)
    customer_id: int
    date: Optional[date_type] = None
    due_date: Optional[date_type] = None
    notes: Optional[str] = None
    items: List[InvoiceItemCreate] = Field(..., min_length=1)


class InvoiceUpdate(CamelModel):
    date: Optional[date_type] = None
    due_date: Optional[date_type] = None
    notes: Optional[str] = None


class InvoiceItemResponse(CamelModel):
    id: int
    product_id: int
    quantity: int
    unit_price: Money
    tax_rate: Money
    tax_amount: Money
    discount: Money
    total: Money
    product: Optional[ProductSummary] = None


class InvoiceResponse(CamelModel):
    id: int
    invoice_number: str
    customer_id: int
    date: date_type
    due_date: Optional[date_type] = None
    subtotal: Money
    tax_amount: Money
    total: Money
    status: str
    notes: Optional[str] = None
    company_id: int
    customer: Optional[PartySummary] = None
    items: List[InvoiceItemResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None


# ==================== PURCHASE ORDER SCHEMAS ====================

class PurchaseOrderItemCreate(CamelModel):
    product_id: int
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100)


class PurchaseOrderCreate(CamelModel):
    po_number: Optional[str] = Field(None, min_length=1, max_length=50)
    supplier_id: int
    date: Optional[date_type] = None
    expected_date: Optional[date_type] = None
    notes: Optional[str] = None
    items: List[PurchaseOrderItemCreate] = Field(..., min_length=1)


class PurchaseOrderUpdate(CamelModel):
    date: Optional[date_type] = None
    expected_date: Optional[date_type] = None
    notes: Optional[str] = None


class PurchaseOrderItemResponse(CamelModel):
    id: int
    product_id: int
    quantity: int
    unit_price: Money
    tax_rate: Money
    tax_amount: Money
    total: Money
    product: Optional[ProductSummary] = None


class PurchaseOrderResponse(CamelModel):
    id: int
    po_number: str
    supplier_id: int
    date: date_type
    expected_date: Optional[date_type] = None
    subtotal: Money
    tax_amount: Money
    total: Money
    status: str
    notes: Optional[str] = None
    company_id: int
    supplier: Optional[PartySummary] = None
    items: List[PurchaseOrderItemResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None


# ==================== EMPLOYEE SCHEMAS ====================

class EmployeeBase(CamelModel):
    employee_id: str = Field(..., min_length=1, max_length=50)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date_type] = None
    date_of_joining: date_type
    department: Optional[str] = Field(None, max_length=100)
    designation: Optional[str] = Field(None, max_length=100)
    salary: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(CamelModel):
    employee_id: Optional[str] = Field(None, min_length=1, max_length=50)
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date_type] = None
    date_of_joining: Optional[date_type] = None
    department: Optional[str] = Field(None, max_length=100)
    designation: Optional[str] = Field(None, max_length=100)
    salary: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    is_active: Optional[bool] = None


class EmployeeSummary(CamelModel):
    id: int
    employee_id: str
    first_name: str
    last_name: str


class EmployeeResponse(CamelModel):
    id: int
    employee_id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    date_of_birth: Optional[date_type] = None
    date_of_joining: date_type
    department: Optional[str] = None
    designation: Optional[str] = None
    salary: Money
    is_active: bool
    company_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


# ==================== PAYROLL SCHEMAS ====================

class PayrollCreate(CamelModel):
    employee_id: int
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000)
    basic_salary: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    allowances: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    deductions: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)


class PayrollUpdate(CamelModel):
    basic_salary: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    allowances: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    deductions: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    status: Optional[PayrollStatus] = None


class PayrollResponse(CamelModel):
    id: int
    employee_id: int
    month: int
    year: int
    basic_salary: Money
    allowances: Money
    deductions: Money
    net_salary: Money
    status: str
    paid_date: Optional[datetime] = None
    company_id: int
    employee: Optional[EmployeeSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# ==================== ACCOUNT SCHEMAS ====================

class AccountBase(CamelModel):
    code: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=255)
    type: AccountType
    parent_id: Optional[int] = None


class AccountCreate(AccountBase):
    pass


class AccountUpdate(CamelModel):
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[AccountType] = None
    parent_id: Optional[int] = None
    is_active: Optional[bool] = None


class AccountSummary(CamelModel):
    id: int
    code: str
    name: str


class AccountResponse(CamelModel):
    id: int
    code: str
    name: str
    type: str
    parent_id: Optional[int] = None
    is_active: bool
    company_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


# ==================== TRANSACTION SCHEMAS ====================

class TransactionCreate(CamelModel):
    date: date_type
    description: str = Field(..., min_length=1)
    reference: Optional[str] = Field(None, max_length=100)
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    type: TransactionType
    account_id: int
    customer_id: Optional[int] = None
    supplier_id: Optional[int] = None


class TransactionUpdate(CamelModel):
    date: Optional[date_type] = None
    description: Optional[str] = Field(None, min_length=1)
    reference: Optional[str] = Field(None, max_length=100)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    type: Optional[TransactionType] = None
    account_id: Optional[int] = None
    customer_id: Optional[int] = None
    supplier_id: Optional[int] = None


class TransactionResponse(CamelModel):
    id: int
    date: date_type
    description: str
    reference: Optional[str] = None
    amount: Money
    type: str
    status: str
    account_id: int
    customer_id: Optional[int] = None
    supplier_id: Optional[int] = None
    company_id: int
    account: Optional[AccountSummary] = None
    customer: Optional[PartySummary] = None
    supplier: Optional[PartySummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# ==================== DASHBOARD SCHEMAS ====================

class OverviewCounts(CamelModel):
    customers: int
    suppliers: int
    products: int
    employees: int
    invoices: int
    purchase_orders: int


class LowStockLocation(CamelModel):
    id: int
    warehouse: WarehouseSummary
    quantity: int
    reserved: int
    available: int


class LowStockItem(CamelModel):
    product: ProductSummary
    available: int
    stocks: List[LowStockLocation]


class DueInvoice(CamelModel):
    id: int
    invoice_number: str
    customer: Optional[PartySummary] = None
    due_date: Optional[date_type] = None
    total: Money
    status: str


class RecentTransaction(CamelModel):
    id: int
    date: date_type
    description: str
    amount: Money
    type: str
    status: str
    account: Optional[AccountSummary] = None


class DashboardOverview(CamelModel):
    counts: OverviewCounts
    monthly_revenue: Money
    monthly_expenses: Money
    low_stock_products: List[LowStockItem]
    recent_transactions: List[RecentTransaction]
    pending_invoices: List[DueInvoice]


class SalesInvoice(CamelModel):
    id: int
    invoice_number: str
    date: date_type
    total: Money
    customer: Optional[PartySummary] = None


class TopCustomer(CamelModel):
    customer: PartySummary
    total: Money
    invoice_count: int


class DashboardSales(CamelModel):
    period: str
    start_date: date_type
    end_date: date_type
    total_sales: Money
    invoice_count: int
    invoices: List[SalesInvoice]
    top_customers: List[TopCustomer]


class WarehouseStockTotal(CamelModel):
    warehouse: WarehouseSummary
    quantity: int
    reserved: int
    available: int


class TopProduct(CamelModel):
    product: ProductSummary
    quantity: int
    revenue: Money


class DashboardInventory(CamelModel):
    warehouses: List[WarehouseStockTotal]
    low_stock: List[LowStockItem]
    top_products: List[TopProduct]


class MonthlyFigure(CamelModel):
    month: int
    revenue: Money
    expenses: Money


class AccountBalance(CamelModel):
    account: AccountSummary
    type: str
    balance: Money


class DashboardFinancial(CamelModel):
    year: int
    monthly: List[MonthlyFigure]
    account_balances: List[AccountBalance]
