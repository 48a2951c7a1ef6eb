"""
CRM API Routes - Customers and Suppliers
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from app.api.deps import Pagination
from app.core.database import get_db
from app.core.security import get_current_user, CurrentUser
from app.schemas import (
    Page, SuccessResponse,
    CustomerCreate, CustomerUpdate, CustomerResponse,
    SupplierCreate, SupplierUpdate, SupplierResponse
)
from app.services.crm_service import CustomerService, SupplierService

router = APIRouter(tags=["CRM"])


# ==================== CUSTOMERS ====================

@router.get("/customers", response_model=Page[CustomerResponse])
async def list_customers(
    q: Optional[str] = None,
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """List active customers, optionally matching name, email or phone"""
    items, total = CustomerService(db).list(current_user.company_id, q, page.skip, page.take)
    return {"items": items, "total": total}


@router.get("/customers/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return CustomerService(db).get_by_id(customer_id, current_user.company_id)


@router.post("/customers", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: CustomerCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a new customer"""
    customer = CustomerService(db).create(customer_data, current_user.company_id)
    db.commit()
    return customer


@router.put("/customers/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Update customer"""
    customer = CustomerService(db).update(customer_id, current_user.company_id, customer_data)
    db.commit()
    return customer


@router.delete("/customers/{customer_id}", response_model=SuccessResponse)
async def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Deactivate customer"""
    CustomerService(db).delete(customer_id, current_user.company_id)
    db.commit()
    return {"success": True}


# ==================== SUPPLIERS ====================

@router.get("/suppliers", response_model=Page[SupplierResponse])
async def list_suppliers(
    q: Optional[str] = None,
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """List active suppliers, optionally matching name, email or phone"""
    items, total = SupplierService(db).list(current_user.company_id, q, page.skip, page.take)
    return {"items": items, "total": total}


@router.get("/suppliers/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return SupplierService(db).get_by_id(supplier_id, current_user.company_id)


@router.post("/suppliers", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    supplier_data: SupplierCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a new supplier"""
    supplier = SupplierService(db).create(supplier_data, current_user.company_id)
    db.commit()
    return supplier


@router.put("/suppliers/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: int,
    supplier_data: SupplierUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Update supplier"""
    supplier = SupplierService(db).update(supplier_id, current_user.company_id, supplier_data)
    db.commit()
    return supplier


@router.delete("/suppliers/{supplier_id}", response_model=SuccessResponse)
async def delete_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Deactivate supplier"""
    SupplierService(db).delete(supplier_id, current_user.company_id)
    db.commit()
    return {"success": True}
