"""
HR API Routes - Employees, Payroll
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.api.deps import Pagination
from app.core.database import get_db
from app.core.security import get_current_user, CurrentUser
from app.models import PayrollStatus
from app.schemas import (
    Page, SuccessResponse,
    EmployeeCreate, EmployeeUpdate, EmployeeResponse,
    PayrollCreate, PayrollUpdate, PayrollResponse
)
from app.services.hr_service import EmployeeService, PayrollService

router = APIRouter(tags=["HR"])


# ==================== EMPLOYEES ====================

@router.get("/employees", response_model=Page[EmployeeResponse])
async def list_employees(
    q: Optional[str] = None,
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """List active employees"""
    items, total = EmployeeService(db).list(current_user.company_id, q, page.skip, page.take)
    return {"items": items, "total": total}


@router.get("/employees/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return EmployeeService(db).get_by_id(employee_id, current_user.company_id)


@router.post("/employees", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a new employee"""
    employee = EmployeeService(db).create(employee_data, current_user.company_id)
    db.commit()
    return employee


@router.put("/employees/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: int,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Update employee"""
    employee = EmployeeService(db).update(employee_id, current_user.company_id, employee_data)
    db.commit()
    return employee


@router.delete("/employees/{employee_id}", response_model=SuccessResponse)
async def delete_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Deactivate employee"""
    EmployeeService(db).delete(employee_id, current_user.company_id)
    db.commit()
    return {"success": True}


# ==================== PAYROLL ====================

@router.get("/payrolls", response_model=Page[PayrollResponse])
async def list_payrolls(
    q: Optional[str] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    status_filter: Optional[PayrollStatus] = Query(None, alias="status"),
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    items, total = PayrollService(db).list(
        current_user.company_id,
        q=q,
        month=month,
        year=year,
        status=status_filter.value if status_filter else None,
        skip=page.skip,
        take=page.take
    )
    return {"items": items, "total": total}


@router.get("/payrolls/{payroll_id}", response_model=PayrollResponse)
async def get_payroll(
    payroll_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return PayrollService(db).get_by_id(payroll_id, current_user.company_id)


@router.post("/payrolls", response_model=PayrollResponse, status_code=status.HTTP_201_CREATED)
async def create_payroll(
    payroll_data: PayrollCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a pending payroll; net salary is computed here"""
    payroll = PayrollService(db).create(payroll_data, current_user.company_id)
    db.commit()
    return payroll


@router.put("/payrolls/{payroll_id}", response_model=PayrollResponse)
async def update_payroll(
    payroll_id: int,
    payroll_data: PayrollUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    payroll = PayrollService(db).update(payroll_id, current_user.company_id, payroll_data)
    db.commit()
    return payroll


@router.post("/payrolls/{payroll_id}/process", response_model=PayrollResponse)
async def process_payroll(
    payroll_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    payroll = PayrollService(db).process(payroll_id, current_user.company_id)
    db.commit()
    return payroll


@router.post("/payrolls/{payroll_id}/pay", response_model=PayrollResponse)
async def pay_payroll(
    payroll_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    payroll = PayrollService(db).pay(payroll_id, current_user.company_id)
    db.commit()
    return payroll


@router.delete("/payrolls/{payroll_id}", response_model=SuccessResponse)
async def delete_payroll(
    payroll_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    PayrollService(db).delete(payroll_id, current_user.company_id)
    db.commit()
    return {"success": True}
