"""
Company-scoped CRUD shared by the master-data services
"""
from typing import List, Optional, Tuple
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError


class CompanyScopedService:
    """
    Every query filters on ``company_id``; a row owned by another company is
    reported as not found.

    Subclasses set:
        model          - SQLAlchemy model with ``company_id``
        resource_name  - used in error messages ("Customer not found")
        search_fields  - columns matched case-insensitively by ``q``
        default_take   - page size when the caller gives none
        active_only    - hide ``is_active == False`` rows from ``list``
        soft_delete    - ``delete`` flips ``is_active`` instead of removing
    """

    model = None
    resource_name = "Resource"
    search_fields: Tuple[str, ...] = ()
    default_take = 20
    active_only = True
    soft_delete = True

    def __init__(self, db: Session):
        self.db = db

    def query(self, company_id: int):
        return self.db.query(self.model).filter(self.model.company_id == company_id)

    def ordering(self) -> list:
        return [self.model.created_at.desc(), self.model.id.desc()]

    def list(self, company_id: int, q: Optional[str] = None, skip: int = 0,
             take: Optional[int] = None) -> Tuple[List, int]:
        query = self.query(company_id)
        if self.active_only:
            query = query.filter(self.model.is_active == True)
        if q and self.search_fields:
            pattern = f"%{q.strip()}%"
            query = query.filter(or_(*[getattr(self.model, name).ilike(pattern) for name in self.search_fields]))

        total = query.count()
        items = query.order_by(*self.ordering()).offset(skip).limit(take or self.default_take).all()
        return items, total

    def get_by_id(self, entity_id: int, company_id: int):
        entity = self.query(company_id).filter(self.model.id == entity_id).first()
        if not entity:
            raise NotFoundError(self.resource_name)
        return entity

    def validate(self, values: dict, company_id: int, entity=None):
        """Hook for uniqueness and cross-reference checks before a write"""

    def create(self, data: BaseModel, company_id: int):
        values = data.model_dump()
        self.validate(values, company_id)
        entity = self.model(**values, company_id=company_id)
        self.db.add(entity)
        self.db.flush()
        return entity

    def update(self, entity_id: int, company_id: int, data: BaseModel):
        entity = self.get_by_id(entity_id, company_id)

        update_data = data.model_dump(exclude_unset=True)
        self._reject_nulls(update_data)
        self.validate(update_data, company_id, entity)
        for key, value in update_data.items():
            setattr(entity, key, value)

        self.db.flush()
        return entity

    def delete(self, entity_id: int, company_id: int):
        entity = self.get_by_id(entity_id, company_id)
        if self.soft_delete:
            entity.is_active = False
        else:
            self.db.delete(entity)
        self.db.flush()
        return entity

    def _reject_nulls(self, update_data: dict):
        columns = self.model.__table__.columns
        for key, value in update_data.items():
            if value is None and key in columns and not columns[key].nullable:
                raise ValidationError("must not be null", field=to_camel(key))

    def require(self, model, entity_id: int, company_id: int, resource_name: str):
        """Load a referenced row of this company or raise NotFoundError"""
        entity = self.db.query(model).filter(
            model.id == entity_id,
            model.company_id == company_id
        ).first()
        if not entity:
            raise NotFoundError(resource_name)
        return entity
