"""
Sales API Routes - Invoices
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.api.deps import Pagination
from app.core.database import get_db
from app.core.security import get_current_user, CurrentUser
from app.models import InvoiceStatus
from app.schemas import Page, SuccessResponse, InvoiceCreate, InvoiceUpdate, InvoiceResponse
from app.services.sales_service import SalesService

router = APIRouter(prefix="/invoices", tags=["Sales"])


@router.get("", response_model=Page[InvoiceResponse])
async def list_invoices(
    q: Optional[str] = None,
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """List invoices; status=OVERDUE also matches sent invoices past their due date"""
    items, total = SalesService(db).list(
        current_user.company_id,
        q=q,
        status=status_filter.value if status_filter else None,
        skip=page.skip,
        take=page.take
    )
    return {"items": items, "total": total}


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return SalesService(db).get_by_id(invoice_id, current_user.company_id)


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_data: InvoiceCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create an invoice with its line items"""
    sales_service = SalesService(db)
    invoice = sales_service.create(invoice_data, current_user.company_id)
    db.commit()
    return sales_service.get_by_id(invoice.id, current_user.company_id)


@router.put("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: int,
    invoice_data: InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Update header fields; items and totals are fixed at creation"""
    invoice = SalesService(db).update(invoice_id, current_user.company_id, invoice_data)
    db.commit()
    return invoice


@router.post("/{invoice_id}/mark-paid", response_model=InvoiceResponse)
async def mark_invoice_paid(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    invoice = SalesService(db).mark_paid(invoice_id, current_user.company_id)
    db.commit()
    return invoice


@router.post("/{invoice_id}/cancel", response_model=InvoiceResponse)
async def cancel_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    invoice = SalesService(db).cancel(invoice_id, current_user.company_id)
    db.commit()
    return invoice


@router.delete("/{invoice_id}", response_model=SuccessResponse)
async def delete_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    SalesService(db).delete(invoice_id, current_user.company_id)
    db.commit()
    return {"success": True}
