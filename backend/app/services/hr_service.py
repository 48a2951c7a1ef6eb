"""
HR Service - Employees and monthly Payroll
"""
from typing import Optional, List, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from datetime import datetime

from app.core.exceptions import ConflictError, NotFoundError
from app.models import Employee, Payroll, PayrollStatus
from app.schemas import PayrollCreate, PayrollUpdate
from app.services import workflow
from app.services.base import CompanyScopedService
from app.services.totals import calculate_net_salary


class EmployeeService(CompanyScopedService):
    model = Employee
    resource_name = "Employee"
    search_fields = ("first_name", "last_name", "email", "employee_id")
    default_take = 100

    def is_code_unique(self, code: str, company_id: int, exclude_id: int = None) -> bool:
        """Employee codes are unique within a company"""
        query = self.db.query(Employee).filter(
            Employee.employee_id == code,
            Employee.company_id == company_id
        )
        if exclude_id:
            query = query.filter(Employee.id != exclude_id)
        return query.first() is None

    def validate(self, values: dict, company_id: int, entity=None):
        code = values.get("employee_id")
        if code and not self.is_code_unique(code, company_id, entity.id if entity else None):
            raise ConflictError(f"Employee with ID '{code}' already exists")


class PayrollService:
    def __init__(self, db: Session):
        self.db = db

    def _query(self, company_id: int):
        return self.db.query(Payroll).filter(Payroll.company_id == company_id)

    def get_by_id(self, payroll_id: int, company_id: int) -> Payroll:
        payroll = self._query(company_id).options(
            joinedload(Payroll.employee)
        ).filter(Payroll.id == payroll_id).first()
        if not payroll:
            raise NotFoundError("Payroll")
        return payroll

    def list(self, company_id: int, q: Optional[str] = None, month: int = None, year: int = None,
             status: str = None, skip: int = 0, take: Optional[int] = None) -> Tuple[List[Payroll], int]:
        query = self._query(company_id).join(Employee, Payroll.employee_id == Employee.id)
        if month:
            query = query.filter(Payroll.month == month)
        if year:
            query = query.filter(Payroll.year == year)
        if status:
            query = query.filter(Payroll.status == status)
        if q:
            pattern = f"%{q.strip()}%"
            query = query.filter(or_(
                Employee.first_name.ilike(pattern),
                Employee.last_name.ilike(pattern),
                Employee.employee_id.ilike(pattern)
            ))

        total = query.count()
        items = query.options(joinedload(Payroll.employee)).order_by(
            Payroll.created_at.desc(), Payroll.id.desc()
        ).offset(skip).limit(take or 100).all()
        return items, total

    def create(self, payroll_data: PayrollCreate, company_id: int) -> Payroll:
        employee = self.db.query(Employee).filter(
            Employee.id == payroll_data.employee_id,
            Employee.company_id == company_id
        ).first()
        if not employee:
            raise NotFoundError("Employee")

        existing = self.db.query(Payroll).filter(
            Payroll.employee_id == employee.id,
            Payroll.month == payroll_data.month,
            Payroll.year == payroll_data.year
        ).first()
        if existing:
            raise ConflictError(
                f"Payroll for employee {employee.employee_id} already exists for {payroll_data.month}/{payroll_data.year}"
            )

        payroll = Payroll(
            employee_id=employee.id,
            month=payroll_data.month,
            year=payroll_data.year,
            basic_salary=payroll_data.basic_salary,
            allowances=payroll_data.allowances,
            deductions=payroll_data.deductions,
            net_salary=calculate_net_salary(
                payroll_data.basic_salary, payroll_data.allowances, payroll_data.deductions
            ),
            status=PayrollStatus.PENDING.value,
            company_id=company_id
        )
        self.db.add(payroll)
        self.db.flush()
        return payroll

    def update(self, payroll_id: int, company_id: int, payroll_data: PayrollUpdate) -> Payroll:
        payroll = self.get_by_id(payroll_id, company_id)

        update_data = payroll_data.model_dump(exclude_unset=True)
        status = update_data.pop("status", None)

        components = {key: value for key, value in update_data.items() if value is not None}
        if components:
            workflow.ensure_editable(payroll, workflow.PAYROLL)
            for key, value in components.items():
                setattr(payroll, key, value)
            payroll.net_salary = calculate_net_salary(payroll.basic_salary, payroll.allowances, payroll.deductions)

        if status is not None:
            self._move(payroll, status.value if hasattr(status, "value") else status)

        self.db.flush()
        return payroll

    def _move(self, payroll: Payroll, status: str):
        changed = workflow.transition(payroll, workflow.PAYROLL, status)
        if changed and status == PayrollStatus.PAID.value:
            payroll.paid_date = datetime.utcnow()

    def process(self, payroll_id: int, company_id: int) -> Payroll:
        payroll = self.get_by_id(payroll_id, company_id)
        self._move(payroll, PayrollStatus.PROCESSED.value)
        self.db.flush()
        return payroll

    def pay(self, payroll_id: int, company_id: int) -> Payroll:
        payroll = self.get_by_id(payroll_id, company_id)
        self._move(payroll, PayrollStatus.PAID.value)
        self.db.flush()
        return payroll

    def delete(self, payroll_id: int, company_id: int):
        payroll = self.get_by_id(payroll_id, company_id)
        self.db.delete(payroll)
        self.db.flush()
