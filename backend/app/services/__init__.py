# Services Package
from app.services.user_service import UserService
from app.services.company_service import CompanyService
from app.services.crm_service import CustomerService, SupplierService
from app.services.inventory_service import ProductService, WarehouseService, StockService
from app.services.sales_service import SalesService
from app.services.purchase_service import PurchaseService
from app.services.hr_service import EmployeeService, PayrollService
from app.services.accounting_service import AccountService, TransactionService
from app.services.dashboard_service import DashboardService

__all__ = [
    'UserService',
    'CompanyService',
    'CustomerService',
    'SupplierService',
    'ProductService',
    'WarehouseService',
    'StockService',
    'SalesService',
    'PurchaseService',
    'EmployeeService',
    'PayrollService',
    'AccountService',
    'TransactionService',
    'DashboardService',
]
