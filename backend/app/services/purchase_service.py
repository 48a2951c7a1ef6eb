"""
Purchase Service - Purchase Orders sent to suppliers
"""
from typing import Optional, List, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from datetime import date

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import PurchaseOrder, PurchaseOrderItem, Supplier, PurchaseOrderStatus
from app.schemas import PurchaseOrderCreate, PurchaseOrderUpdate
from app.services import workflow
from app.services.sales_service import next_document_number, load_products
from app.services.totals import calculate_document


class PurchaseService:
    def __init__(self, db: Session):
        self.db = db

    def _query(self, company_id: int):
        return self.db.query(PurchaseOrder).filter(PurchaseOrder.company_id == company_id)

    def get_by_id(self, po_id: int, company_id: int) -> PurchaseOrder:
        po = self._query(company_id).options(
            joinedload(PurchaseOrder.items).joinedload(PurchaseOrderItem.product),
            joinedload(PurchaseOrder.supplier)
        ).filter(PurchaseOrder.id == po_id).first()
        if not po:
            raise NotFoundError("Purchase order")
        return po

    def list(self, company_id: int, q: Optional[str] = None, status: str = None,
             skip: int = 0, take: Optional[int] = None) -> Tuple[List[PurchaseOrder], int]:
        query = self._query(company_id).join(Supplier, PurchaseOrder.supplier_id == Supplier.id)
        if status:
            query = query.filter(PurchaseOrder.status == status)
        if q:
            pattern = f"%{q.strip()}%"
            query = query.filter(or_(PurchaseOrder.po_number.ilike(pattern), Supplier.name.ilike(pattern)))

        total = query.count()
        items = query.options(
            joinedload(PurchaseOrder.supplier),
            joinedload(PurchaseOrder.items).joinedload(PurchaseOrderItem.product)
        ).order_by(PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc()).offset(skip).limit(take or 100).all()
        return items, total

    def get_next_number(self, company_id: int) -> str:
        """Generate next purchase order number"""
        return next_document_number(self.db, PurchaseOrder.po_number, PurchaseOrder.company_id, company_id, "PO")

    def create(self, po_data: PurchaseOrderCreate, company_id: int) -> PurchaseOrder:
        supplier = self.db.query(Supplier).filter(
            Supplier.id == po_data.supplier_id,
            Supplier.company_id == company_id
        ).first()
        if not supplier:
            raise NotFoundError("Supplier")

        load_products(self.db, [item.product_id for item in po_data.items], company_id)

        po_number = po_data.po_number or self.get_next_number(company_id)
        if self._query(company_id).filter(PurchaseOrder.po_number == po_number).first():
            raise ConflictError(f"Purchase order number '{po_number}' already exists")

        # Purchase order lines carry no discount
        totals = calculate_document(po_data.items)

        po = PurchaseOrder(
            po_number=po_number,
            supplier_id=supplier.id,
            date=po_data.date or date.today(),
            expected_date=po_data.expected_date,
            notes=po_data.notes,
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            total=totals.total,
            status=PurchaseOrderStatus.SENT.value,
            company_id=company_id
        )

        for position, (item_data, line) in enumerate(zip(po_data.items, totals.lines)):
            po.items.append(PurchaseOrderItem(
                position=position,
                product_id=item_data.product_id,
                quantity=item_data.quantity,
                unit_price=item_data.unit_price,
                tax_rate=item_data.tax_rate,
                tax_amount=line.tax_amount,
                total=line.total
            ))

        self.db.add(po)
        self.db.flush()
        return po

    def update(self, po_id: int, company_id: int, po_data: PurchaseOrderUpdate) -> PurchaseOrder:
        po = self.get_by_id(po_id, company_id)

        update_data = po_data.model_dump(exclude_unset=True)
        if "date" in update_data and update_data["date"] is None:
            raise ValidationError("must not be null", field="date")
        for key, value in update_data.items():
            setattr(po, key, value)

        self.db.flush()
        return po

    def set_status(self, po_id: int, company_id: int, status: str) -> PurchaseOrder:
        po = self.get_by_id(po_id, company_id)
        workflow.transition(po, workflow.PURCHASE_ORDER, status)
        self.db.flush()
        return po

    def confirm(self, po_id: int, company_id: int) -> PurchaseOrder:
        return self.set_status(po_id, company_id, PurchaseOrderStatus.CONFIRMED.value)

    def receive(self, po_id: int, company_id: int) -> PurchaseOrder:
        return self.set_status(po_id, company_id, PurchaseOrderStatus.RECEIVED.value)

    def delete(self, po_id: int, company_id: int):
        po = self.get_by_id(po_id, company_id)
        self.db.delete(po)
        self.db.flush()
