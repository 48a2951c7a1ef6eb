"""
Inventory API Routes - Products, Warehouses, Stock
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.api.deps import Pagination
from app.core.database import get_db
from app.core.security import get_current_user, CurrentUser
from app.schemas import (
    Page, SuccessResponse,
    ProductCreate, ProductUpdate, ProductResponse,
    WarehouseCreate, WarehouseUpdate, WarehouseResponse,
    StockCreate, StockUpdate, StockResponse
)
from app.services.inventory_service import ProductService, WarehouseService, StockService

router = APIRouter(tags=["Inventory"])


# ==================== PRODUCTS ====================

@router.get("/products", response_model=Page[ProductResponse])
async def list_products(
    q: Optional[str] = None,
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """List products, optionally matching name or SKU"""
    items, total = ProductService(db).list(current_user.company_id, q, page.skip, page.take)
    return {"items": items, "total": total}


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return ProductService(db).get_by_id(product_id, current_user.company_id)


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a new product"""
    product = ProductService(db).create(product_data, current_user.company_id)
    db.commit()
    return product


@router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Update product"""
    product = ProductService(db).update(product_id, current_user.company_id, product_data)
    db.commit()
    return product


@router.delete("/products/{product_id}", response_model=SuccessResponse)
async def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Deactivate product"""
    ProductService(db).delete(product_id, current_user.company_id)
    db.commit()
    return {"success": True}


# ==================== WAREHOUSES ====================

@router.get("/inventory/warehouses", response_model=Page[WarehouseResponse])
async def list_warehouses(
    q: Optional[str] = None,
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """List active warehouses"""
    items, total = WarehouseService(db).list(current_user.company_id, q, page.skip, page.take)
    return {"items": items, "total": total}


@router.get("/inventory/warehouses/{warehouse_id}", response_model=WarehouseResponse)
async def get_warehouse(
    warehouse_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return WarehouseService(db).get_by_id(warehouse_id, current_user.company_id)


@router.post("/inventory/warehouses", response_model=WarehouseResponse, status_code=status.HTTP_201_CREATED)
async def create_warehouse(
    warehouse_data: WarehouseCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a new warehouse"""
    warehouse = WarehouseService(db).create(warehouse_data, current_user.company_id)
    db.commit()
    return warehouse


@router.put("/inventory/warehouses/{warehouse_id}", response_model=WarehouseResponse)
async def update_warehouse(
    warehouse_id: int,
    warehouse_data: WarehouseUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    warehouse = WarehouseService(db).update(warehouse_id, current_user.company_id, warehouse_data)
    db.commit()
    return warehouse


@router.delete("/inventory/warehouses/{warehouse_id}", response_model=SuccessResponse)
async def delete_warehouse(
    warehouse_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Deactivate warehouse"""
    WarehouseService(db).delete(warehouse_id, current_user.company_id)
    db.commit()
    return {"success": True}


# ==================== STOCK ====================

@router.get("/inventory/stock", response_model=Page[StockResponse])
async def list_stock(
    warehouse_id: Optional[int] = Query(None, alias="warehouseId"),
    product_id: Optional[int] = Query(None, alias="productId"),
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """List stock levels, most recently updated first"""
    items, total = StockService(db).list(
        current_user.company_id,
        page.skip,
        page.take,
        warehouse_id=warehouse_id,
        product_id=product_id
    )
    return {"items": items, "total": total}


@router.post("/inventory/stock", response_model=StockResponse, status_code=status.HTTP_201_CREATED)
async def create_stock(
    stock_data: StockCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Record stock for a product in a warehouse"""
    stock = StockService(db).create(stock_data, current_user.company_id)
    db.commit()
    return stock


@router.put("/inventory/stock/{stock_id}", response_model=StockResponse)
async def update_stock(
    stock_id: int,
    stock_data: StockUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Update quantity and reserved; available is derived"""
    stock = StockService(db).update(stock_id, current_user.company_id, stock_data)
    db.commit()
    return stock
