"""
CRM Service - Business Logic for Customers and Suppliers
"""
from app.models import Customer, Supplier
from app.services.base import CompanyScopedService


class CustomerService(CompanyScopedService):
    model = Customer
    resource_name = "Customer"
    search_fields = ("name", "email", "phone")
    default_take = 20


class SupplierService(CompanyScopedService):
    model = Supplier
    resource_name = "Supplier"
    search_fields = ("name", "email", "phone")
    default_take = 20
