"""
Dashboard Service - Analytics and Reporting
"""
from typing import Dict, List
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from decimal import Decimal
from datetime import date, timedelta

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.models import (
    Customer, Supplier, Product, Employee, Invoice, InvoiceItem, PurchaseOrder,
    Stock, Warehouse, Transaction, InvoiceStatus, PurchaseOrderStatus
)
from app.services.accounting_service import AccountService
from app.services.totals import to_money

PERIODS = ("week", "month", "quarter", "year")


def period_start(period: str, today: date) -> date:
    if period == "week":
        return today - timedelta(days=7)
    if period == "month":
        return today.replace(day=1)
    if period == "quarter":
        return date(today.year, ((today.month - 1) // 3) * 3 + 1, 1)
    if period == "year":
        return date(today.year, 1, 1)
    raise ValidationError(f"must be one of {', '.join(PERIODS)}", field="period")


def month_bounds(today: date):
    start = today.replace(day=1)
    if start.month == 12:
        next_month = date(start.year + 1, 1, 1)
    else:
        next_month = date(start.year, start.month + 1, 1)
    return start, next_month - timedelta(days=1)


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def _sum(self, column, *criteria) -> Decimal:
        result = self.db.query(func.sum(column)).filter(*criteria).scalar()
        return to_money(result or 0)

    def _low_stock(self, company_id: int, limit: int = None) -> List[Dict]:
        """
        One entry per active product with a stock row at or below the threshold.

        Products are ordered by their lowest ``available``; ``stocks`` lists the
        low rows for that product across warehouses.
        """
        low_rows = self.db.query(Stock).join(Product, Stock.product_id == Product.id).options(
            joinedload(Stock.product), joinedload(Stock.warehouse)
        ).filter(
            Product.company_id == company_id,
            Product.is_active == True,
            Stock.available <= settings.LOW_STOCK_THRESHOLD
        ).order_by(Stock.available.asc(), Stock.product_id.asc(), Stock.id.asc()).all()

        per_product: Dict[int, Dict] = {}
        for stock in low_rows:
            entry = per_product.get(stock.product_id)
            if entry is None:
                if limit and len(per_product) >= limit:
                    continue
                entry = per_product[stock.product_id] = {
                    "product": stock.product, "available": stock.available, "stocks": []
                }
            entry["stocks"].append(stock)
        return list(per_product.values())

    def get_overview(self, company_id: int, today: date = None) -> Dict:
        """Counts, this month's revenue and expenses, and the short lists"""
        today = today or date.today()
        month_start, month_end = month_bounds(today)

        counts = {
            "customers": self.db.query(Customer).filter(Customer.company_id == company_id, Customer.is_active == True).count(),
            "suppliers": self.db.query(Supplier).filter(Supplier.company_id == company_id, Supplier.is_active == True).count(),
            "products": self.db.query(Product).filter(Product.company_id == company_id, Product.is_active == True).count(),
            "employees": self.db.query(Employee).filter(Employee.company_id == company_id, Employee.is_active == True).count(),
            "invoices": self.db.query(Invoice).filter(Invoice.company_id == company_id).count(),
            "purchase_orders": self.db.query(PurchaseOrder).filter(PurchaseOrder.company_id == company_id).count(),
        }

        monthly_revenue = self._sum(
            Invoice.total,
            Invoice.company_id == company_id,
            Invoice.status == InvoiceStatus.PAID.value,
            Invoice.date >= month_start,
            Invoice.date <= month_end
        )
        monthly_expenses = self._sum(
            PurchaseOrder.total,
            PurchaseOrder.company_id == company_id,
            PurchaseOrder.status == PurchaseOrderStatus.RECEIVED.value,
            PurchaseOrder.date >= month_start,
            PurchaseOrder.date <= month_end
        )

        recent_transactions = self.db.query(Transaction).options(joinedload(Transaction.account)).filter(
            Transaction.company_id == company_id
        ).order_by(Transaction.created_at.desc(), Transaction.id.desc()).limit(10).all()

        # Nearest due first; invoices without a due date go last
        pending_invoices = self.db.query(Invoice).options(joinedload(Invoice.customer)).filter(
            Invoice.company_id == company_id,
            Invoice.status.in_([InvoiceStatus.SENT.value, InvoiceStatus.OVERDUE.value])
        ).order_by(Invoice.due_date.is_(None), Invoice.due_date.asc(), Invoice.id.asc()).limit(5).all()

        return {
            "counts": counts,
            "monthly_revenue": monthly_revenue,
            "monthly_expenses": monthly_expenses,
            "low_stock_products": self._low_stock(company_id, limit=5),
            "recent_transactions": recent_transactions,
            "pending_invoices": pending_invoices,
        }

    def get_sales(self, company_id: int, period: str = "month", today: date = None) -> Dict:
        """Paid invoices in the period and the top five customers by paid total"""
        today = today or date.today()
        start = period_start(period, today)

        invoices = self.db.query(Invoice).options(joinedload(Invoice.customer)).filter(
            Invoice.company_id == company_id,
            Invoice.status == InvoiceStatus.PAID.value,
            Invoice.date >= start,
            Invoice.date <= today
        ).order_by(Invoice.date.asc(), Invoice.id.asc()).all()

        per_customer: Dict[int, Dict] = {}
        for invoice in invoices:
            entry = per_customer.setdefault(
                invoice.customer_id, {"customer": invoice.customer, "total": Decimal("0.00"), "invoice_count": 0}
            )
            entry["total"] += invoice.total
            entry["invoice_count"] += 1

        # Highest total first, ties by customer id
        top_customers = sorted(per_customer.items(), key=lambda kv: (-kv[1]["total"], kv[0]))[:5]

        return {
            "period": period,
            "start_date": start,
            "end_date": today,
            "total_sales": sum((invoice.total for invoice in invoices), Decimal("0.00")),
            "invoice_count": len(invoices),
            "invoices": invoices,
            "top_customers": [entry for _, entry in top_customers],
        }

    def get_inventory(self, company_id: int) -> Dict:
        """Per-warehouse totals, low stock alerts and the ten best selling products"""
        rows = self.db.query(
            Stock.warehouse_id,
            func.sum(Stock.quantity),
            func.sum(Stock.reserved),
            func.sum(Stock.available)
        ).join(Product, Stock.product_id == Product.id).filter(
            Product.company_id == company_id,
            Product.is_active == True
        ).group_by(Stock.warehouse_id).order_by(Stock.warehouse_id).all()

        warehouses = {
            warehouse.id: warehouse
            for warehouse in self.db.query(Warehouse).filter(Warehouse.company_id == company_id).all()
        }
        warehouse_totals = [
            {
                "warehouse": warehouses[warehouse_id],
                "quantity": int(quantity or 0),
                "reserved": int(reserved or 0),
                "available": int(available or 0),
            }
            for warehouse_id, quantity, reserved, available in rows
            if warehouse_id in warehouses
        ]

        sold = self.db.query(
            InvoiceItem.product_id,
            func.sum(InvoiceItem.quantity),
            func.sum(InvoiceItem.total)
        ).join(Invoice, InvoiceItem.invoice_id == Invoice.id).filter(
            Invoice.company_id == company_id,
            Invoice.status == InvoiceStatus.PAID.value
        ).group_by(InvoiceItem.product_id).all()

        # Most units first, ties by product id
        sold = sorted(sold, key=lambda row: (-int(row[1] or 0), row[0]))[:10]
        products = {
            product.id: product
            for product in self.db.query(Product).filter(Product.id.in_([row[0] for row in sold])).all()
        } if sold else {}

        top_products = [
            {"product": products[product_id], "quantity": int(quantity or 0), "revenue": to_money(revenue or 0)}
            for product_id, quantity, revenue in sold
            if product_id in products
        ]

        return {
            "warehouses": warehouse_totals,
            "low_stock": self._low_stock(company_id),
            "top_products": top_products,
        }

    def get_financial(self, company_id: int, today: date = None) -> Dict:
        """Year-to-date monthly revenue and expenses plus account balances"""
        today = today or date.today()
        year_start = date(today.year, 1, 1)

        monthly = {month: {"month": month, "revenue": Decimal("0.00"), "expenses": Decimal("0.00")}
                   for month in range(1, today.month + 1)}

        paid_invoices = self.db.query(Invoice.date, Invoice.total).filter(
            Invoice.company_id == company_id,
            Invoice.status == InvoiceStatus.PAID.value,
            Invoice.date >= year_start,
            Invoice.date <= today
        ).all()
        for invoice_date, total in paid_invoices:
            monthly[invoice_date.month]["revenue"] += total

        received_orders = self.db.query(PurchaseOrder.date, PurchaseOrder.total).filter(
            PurchaseOrder.company_id == company_id,
            PurchaseOrder.status == PurchaseOrderStatus.RECEIVED.value,
            PurchaseOrder.date >= year_start,
            PurchaseOrder.date <= today
        ).all()
        for order_date, total in received_orders:
            monthly[order_date.month]["expenses"] += total

        return {
            "year": today.year,
            "monthly": [monthly[month] for month in sorted(monthly)],
            "account_balances": AccountService(self.db).get_balances(company_id),
        }
