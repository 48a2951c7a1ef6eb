"""
Purchases API Routes - Purchase Orders
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.api.deps import Pagination
from app.core.database import get_db
from app.core.security import get_current_user, CurrentUser
from app.models import PurchaseOrderStatus
from app.schemas import (
    Page, SuccessResponse, PurchaseOrderCreate, PurchaseOrderUpdate, PurchaseOrderResponse
)
from app.services.purchase_service import PurchaseService

router = APIRouter(prefix="/purchase-orders", tags=["Purchases"])


@router.get("", response_model=Page[PurchaseOrderResponse])
async def list_purchase_orders(
    q: Optional[str] = None,
    status_filter: Optional[PurchaseOrderStatus] = Query(None, alias="status"),
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    items, total = PurchaseService(db).list(
        current_user.company_id,
        q=q,
        status=status_filter.value if status_filter else None,
        skip=page.skip,
        take=page.take
    )
    return {"items": items, "total": total}


@router.get("/{po_id}", response_model=PurchaseOrderResponse)
async def get_purchase_order(
    po_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return PurchaseService(db).get_by_id(po_id, current_user.company_id)


@router.post("", response_model=PurchaseOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase_order(
    po_data: PurchaseOrderCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a purchase order with its line items"""
    purchase_service = PurchaseService(db)
    po = purchase_service.create(po_data, current_user.company_id)
    db.commit()
    return purchase_service.get_by_id(po.id, current_user.company_id)


@router.put("/{po_id}", response_model=PurchaseOrderResponse)
async def update_purchase_order(
    po_id: int,
    po_data: PurchaseOrderUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Update header fields; items and totals are fixed at creation"""
    po = PurchaseService(db).update(po_id, current_user.company_id, po_data)
    db.commit()
    return po


@router.post("/{po_id}/confirm", response_model=PurchaseOrderResponse)
async def confirm_purchase_order(
    po_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    po = PurchaseService(db).confirm(po_id, current_user.company_id)
    db.commit()
    return po


@router.post("/{po_id}/receive", response_model=PurchaseOrderResponse)
async def receive_purchase_order(
    po_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    po = PurchaseService(db).receive(po_id, current_user.company_id)
    db.commit()
    return po


@router.delete("/{po_id}", response_model=SuccessResponse)
async def delete_purchase_order(
    po_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    PurchaseService(db).delete(po_id, current_user.company_id)
    db.commit()
    return {"success": True}
