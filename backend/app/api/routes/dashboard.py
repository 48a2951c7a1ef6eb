"""
Dashboard API Routes
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import get_current_user, CurrentUser
from app.schemas import DashboardOverview, DashboardSales, DashboardInventory, DashboardFinancial
from app.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/overview", response_model=DashboardOverview)
async def get_overview(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Get dashboard statistics"""
    return DashboardService(db).get_overview(current_user.company_id)


@router.get("/sales", response_model=DashboardSales)
async def get_sales(
    period: str = Query("month", pattern="^(week|month|quarter|year)$"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Paid invoices and top customers for the period"""
    return DashboardService(db).get_sales(current_user.company_id, period)


@router.get("/inventory", response_model=DashboardInventory)
async def get_inventory(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return DashboardService(db).get_inventory(current_user.company_id)


@router.get("/financial", response_model=DashboardFinancial)
async def get_financial(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Year-to-date revenue, expenses and account balances"""
    return DashboardService(db).get_financial(current_user.company_id)
