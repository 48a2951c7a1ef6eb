"""
Sales Service - Invoices and their line items
"""
from typing import Optional, List, Tuple
from sqlalchemy import or_, and_
from sqlalchemy.orm import Session, joinedload
from datetime import date

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Invoice, InvoiceItem, Customer, Product, InvoiceStatus
from app.schemas import InvoiceCreate, InvoiceUpdate
from app.services import workflow
from app.services.totals import calculate_document


def next_document_number(db: Session, number_column, company_column, company_id: int, prefix: str) -> str:
    """Next ``PREFIX-00001`` style number, skipping numbers that don't parse"""
    numbers = db.query(number_column).filter(
        company_column == company_id,
        number_column.like(f"{prefix}-%")
    ).all()

    highest = 0
    for (number,) in numbers:
        try:
            highest = max(highest, int(number[len(prefix) + 1:]))
        except ValueError:
            continue
    return f"{prefix}-{highest + 1:05d}"


def load_products(db: Session, product_ids, company_id: int) -> dict:
    """Map product id to Product for ids owned by the company; foreign ids raise NotFoundError"""
    wanted = set(product_ids)
    products = db.query(Product).filter(
        Product.id.in_(wanted),
        Product.company_id == company_id
    ).all()
    found = {product.id: product for product in products}
    if wanted - set(found):
        raise NotFoundError("Product")
    return found


class SalesService:
    def __init__(self, db: Session):
        self.db = db

    def _query(self, company_id: int):
        return self.db.query(Invoice).filter(Invoice.company_id == company_id)

    def get_by_id(self, invoice_id: int, company_id: int) -> Invoice:
        invoice = self._query(company_id).options(
            joinedload(Invoice.items).joinedload(InvoiceItem.product),
            joinedload(Invoice.customer)
        ).filter(Invoice.id == invoice_id).first()
        if not invoice:
            raise NotFoundError("Invoice")
        return invoice

    def list(self, company_id: int, q: Optional[str] = None, status: str = None,
             skip: int = 0, take: Optional[int] = None, today: date = None) -> Tuple[List[Invoice], int]:
        query = self._query(company_id).join(Customer, Invoice.customer_id == Customer.id)

        if status == InvoiceStatus.OVERDUE.value:
            # OVERDUE also covers sent invoices whose due date has passed
            today = today or date.today()
            query = query.filter(or_(
                Invoice.status == InvoiceStatus.OVERDUE.value,
                and_(Invoice.status == InvoiceStatus.SENT.value, Invoice.due_date < today)
            ))
        elif status:
            query = query.filter(Invoice.status == status)

        if q:
            pattern = f"%{q.strip()}%"
            query = query.filter(or_(Invoice.invoice_number.ilike(pattern), Customer.name.ilike(pattern)))

        total = query.count()
        items = query.options(
            joinedload(Invoice.customer),
            joinedload(Invoice.items).joinedload(InvoiceItem.product)
        ).order_by(Invoice.created_at.desc(), Invoice.id.desc()).offset(skip).limit(take or 100).all()
        return items, total

    def get_next_number(self, company_id: int) -> str:
        """Generate next invoice number"""
        return next_document_number(self.db, Invoice.invoice_number, Invoice.company_id, company_id, "INV")

    def create(self, invoice_data: InvoiceCreate, company_id: int) -> Invoice:
        customer = self.db.query(Customer).filter(
            Customer.id == invoice_data.customer_id,
            Customer.company_id == company_id
        ).first()
        if not customer:
            raise NotFoundError("Customer")

        load_products(self.db, [item.product_id for item in invoice_data.items], company_id)

        invoice_number = invoice_data.invoice_number or self.get_next_number(company_id)
        if self._query(company_id).filter(Invoice.invoice_number == invoice_number).first():
            raise ConflictError(f"Invoice number '{invoice_number}' already exists")

        totals = calculate_document(invoice_data.items)

        invoice = Invoice(
            invoice_number=invoice_number,
            customer_id=customer.id,
            date=invoice_data.date or date.today(),
            due_date=invoice_data.due_date,
            notes=invoice_data.notes,
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            total=totals.total,
            status=InvoiceStatus.SENT.value,
            company_id=company_id
        )

        for position, (item_data, line) in enumerate(zip(invoice_data.items, totals.lines)):
            invoice.items.append(InvoiceItem(
                position=position,
                product_id=item_data.product_id,
                quantity=item_data.quantity,
                unit_price=item_data.unit_price,
                tax_rate=item_data.tax_rate,
                discount=item_data.discount,
                tax_amount=line.tax_amount,
                total=line.total
            ))

        self.db.add(invoice)
        self.db.flush()
        return invoice

    def update(self, invoice_id: int, company_id: int, invoice_data: InvoiceUpdate) -> Invoice:
        invoice = self.get_by_id(invoice_id, company_id)

        update_data = invoice_data.model_dump(exclude_unset=True)
        if "date" in update_data and update_data["date"] is None:
            raise ValidationError("must not be null", field="date")
        for key, value in update_data.items():
            setattr(invoice, key, value)

        self.db.flush()
        return invoice

    def set_status(self, invoice_id: int, company_id: int, status: str) -> Invoice:
        invoice = self.get_by_id(invoice_id, company_id)
        workflow.transition(invoice, workflow.INVOICE, status)
        self.db.flush()
        return invoice

    def mark_paid(self, invoice_id: int, company_id: int) -> Invoice:
        return self.set_status(invoice_id, company_id, InvoiceStatus.PAID.value)

    def cancel(self, invoice_id: int, company_id: int) -> Invoice:
        return self.set_status(invoice_id, company_id, InvoiceStatus.CANCELLED.value)

    def delete(self, invoice_id: int, company_id: int):
        invoice = self.get_by_id(invoice_id, company_id)
        self.db.delete(invoice)
        self.db.flush()
