"""
Inventory Service - Products, Warehouses, Stock Management
"""
from typing import Optional, List, Tuple
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Product, Warehouse, Stock
from app.schemas import StockCreate, StockUpdate
from app.services.base import CompanyScopedService


class ProductService(CompanyScopedService):
    model = Product
    resource_name = "Product"
    search_fields = ("name", "sku")
    default_take = 20
    # Deactivated products stay in the catalogue listing
    active_only = False

    def is_sku_unique(self, sku: str, company_id: int, exclude_product_id: int = None) -> bool:
        """Check if SKU is unique within the company"""
        query = self.db.query(Product).filter(
            Product.sku == sku,
            Product.company_id == company_id
        )
        if exclude_product_id:
            query = query.filter(Product.id != exclude_product_id)
        return query.first() is None

    def validate(self, values: dict, company_id: int, entity=None):
        sku = values.get("sku")
        if sku and not self.is_sku_unique(sku, company_id, entity.id if entity else None):
            raise ConflictError(f"Product with SKU '{sku}' already exists")

        min_stock = values.get("min_stock", entity.min_stock if entity else 0)
        max_stock = values.get("max_stock", entity.max_stock if entity else None)
        if max_stock is not None and min_stock is not None and max_stock < min_stock:
            raise ValidationError("must not be less than minStock", field="maxStock")


class WarehouseService(CompanyScopedService):
    model = Warehouse
    resource_name = "Warehouse"
    search_fields = ("name", "city")
    default_take = 100


class StockService:
    """
    Stock rows belong to a company through their product.

    ``available`` is always ``quantity - reserved``; callers may send it but
    it must agree with the other two.
    """

    def __init__(self, db: Session):
        self.db = db

    def _query(self, company_id: int):
        return self.db.query(Stock).join(Product, Stock.product_id == Product.id).filter(
            Product.company_id == company_id
        )

    def list(self, company_id: int, skip: int = 0, take: Optional[int] = None,
             warehouse_id: int = None, product_id: int = None) -> Tuple[List[Stock], int]:
        query = self._query(company_id)
        if warehouse_id:
            query = query.filter(Stock.warehouse_id == warehouse_id)
        if product_id:
            query = query.filter(Stock.product_id == product_id)

        total = query.count()
        items = query.options(
            joinedload(Stock.product), joinedload(Stock.warehouse)
        ).order_by(Stock.updated_at.desc(), Stock.id.desc()).offset(skip).limit(take or 100).all()
        return items, total

    def get_by_id(self, stock_id: int, company_id: int) -> Stock:
        stock = self._query(company_id).filter(Stock.id == stock_id).first()
        if not stock:
            raise NotFoundError("Stock")
        return stock

    @staticmethod
    def compute_available(quantity: int, reserved: int, available: int = None) -> int:
        if reserved > quantity:
            raise ValidationError("must not exceed quantity", field="reserved")
        computed = quantity - reserved
        if available is not None and available != computed:
            raise ValidationError(f"must equal quantity - reserved ({computed})", field="available")
        return computed

    def create(self, stock_data: StockCreate, company_id: int) -> Stock:
        product = self.db.query(Product).filter(
            Product.id == stock_data.product_id,
            Product.company_id == company_id
        ).first()
        if not product:
            raise NotFoundError("Product")

        warehouse = self.db.query(Warehouse).filter(
            Warehouse.id == stock_data.warehouse_id,
            Warehouse.company_id == company_id
        ).first()
        if not warehouse:
            raise NotFoundError("Warehouse")

        existing = self.db.query(Stock).filter(
            Stock.product_id == product.id,
            Stock.warehouse_id == warehouse.id
        ).first()
        if existing:
            raise ConflictError("Stock for this product and warehouse already exists")

        stock = Stock(
            product_id=product.id,
            warehouse_id=warehouse.id,
            quantity=stock_data.quantity,
            reserved=stock_data.reserved,
            available=self.compute_available(stock_data.quantity, stock_data.reserved, stock_data.available)
        )
        self.db.add(stock)
        self.db.flush()
        return stock

    def update(self, stock_id: int, company_id: int, stock_data: StockUpdate) -> Stock:
        stock = self.get_by_id(stock_id, company_id)

        update_data = stock_data.model_dump(exclude_unset=True)
        quantity = update_data.get("quantity")
        reserved = update_data.get("reserved")
        quantity = stock.quantity if quantity is None else quantity
        reserved = stock.reserved if reserved is None else reserved

        stock.available = self.compute_available(quantity, reserved, update_data.get("available"))
        stock.quantity = quantity
        stock.reserved = reserved

        self.db.flush()
        return stock
