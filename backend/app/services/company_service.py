"""
Company Service - tenant profile
"""
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.models import Company
from app.schemas import CompanyUpdate


class CompanyService:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, company_id: int) -> Company:
        company = self.db.query(Company).filter(Company.id == company_id).first()
        if not company:
            raise NotFoundError("Company")
        return company

    def update(self, company_id: int, company_data: CompanyUpdate) -> Company:
        company = self.get_by_id(company_id)

        update_data = company_data.model_dump(exclude_unset=True)
        for key in ("name", "currency", "timezone"):
            if key in update_data and update_data[key] is None:
                raise ValidationError("must not be null", field=key)
        for key, value in update_data.items():
            setattr(company, key, value)

        self.db.flush()
        return company
