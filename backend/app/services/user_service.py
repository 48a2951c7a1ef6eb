"""
User Service - Business Logic for User Operations
"""
from typing import Optional, List, Tuple
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.exceptions import (
    AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from app.core.security import get_password_hash, verify_password
from app.models import User, Company, UserRole
from app.schemas import UserCreate, UserUpdate, RegisterRequest

logger = logging.getLogger(__name__)

ADMIN_ROLES = {UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value}


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_with_company(self, user_id: int) -> Optional[User]:
        return self.db.query(User).options(joinedload(User.company)).filter(User.id == user_id).first()

    def get_by_id(self, user_id: int, company_id: int) -> User:
        user = self.db.query(User).filter(
            User.id == user_id,
            User.company_id == company_id
        ).first()
        if not user:
            raise NotFoundError("User")
        return user

    def list(self, company_id: int, q: Optional[str] = None, skip: int = 0,
             take: Optional[int] = None) -> Tuple[List[User], int]:
        query = self.db.query(User).filter(User.company_id == company_id)
        if q:
            pattern = f"%{q.strip()}%"
            query = query.filter(or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.email.ilike(pattern)
            ))
        total = query.count()
        items = query.order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(take or 50).all()
        return items, total

    # ==================== AUTHENTICATION ====================

    def authenticate(self, email: str, password: str) -> User:
        user = self.get_with_company_by_email(email)
        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            logger.info(f"Failed login for {email}")
            raise AuthenticationError("Invalid credentials")
        logger.info(f"User {user.id} logged in")
        return user

    def get_with_company_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).options(joinedload(User.company)).filter(User.email == email).first()

    def register(self, data: RegisterRequest) -> User:
        """Create a company and its first user in the current transaction"""
        if self.get_by_email(data.email):
            logger.info(f"Registration refused, {data.email} already exists")
            raise ConflictError("User already exists")

        role = data.role or UserRole.ADMIN.value
        if role == UserRole.SUPER_ADMIN.value:
            raise ValidationError("SUPER_ADMIN cannot be self-registered", field="role")

        company = Company(
            name=data.company_name,
            currency=settings.DEFAULT_CURRENCY,
            timezone=settings.DEFAULT_TIMEZONE
        )
        self.db.add(company)
        self.db.flush()

        user = User(
            email=data.email,
            hashed_password=get_password_hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=role,
            is_active=True,
            company_id=company.id
        )
        self.db.add(user)
        self.db.flush()
        logger.info(f"Registered company {company.id} with user {user.id}")
        return user

    def change_password(self, user_id: int, current_password: str, new_password: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User")
        if not verify_password(current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect", field="currentPassword")
        user.hashed_password = get_password_hash(new_password)
        self.db.flush()
        logger.info(f"User {user.id} changed password")
        return user

    # ==================== MANAGEMENT ====================

    def _check_role_grant(self, role: Optional[str], actor_role: str):
        # Only a super admin may hand out super admin
        if role == UserRole.SUPER_ADMIN.value and actor_role != UserRole.SUPER_ADMIN.value:
            raise AuthorizationError("Only SUPER_ADMIN can grant SUPER_ADMIN")

    def create(self, user_data: UserCreate, company_id: int, actor_id: int = None,
               actor_role: str = UserRole.ADMIN.value) -> User:
        self._check_role_grant(user_data.role, actor_role)
        if self.get_by_email(user_data.email):
            raise ConflictError("User with this email already exists")

        user = User(
            email=user_data.email,
            hashed_password=get_password_hash(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            role=user_data.role,
            is_active=user_data.is_active,
            company_id=company_id,
            created_by=actor_id,
            updated_by=actor_id
        )
        self.db.add(user)
        self.db.flush()
        return user

    def update(self, user_id: int, company_id: int, user_data: UserUpdate, actor_id: int = None,
               actor_role: str = UserRole.ADMIN.value) -> User:
        user = self.get_by_id(user_id, company_id)

        update_data = user_data.model_dump(exclude_unset=True)
        for key in ("email", "first_name", "last_name", "role", "is_active", "password"):
            if key in update_data and update_data[key] is None:
                update_data.pop(key)

        self._check_role_grant(update_data.get("role"), actor_role)
        if "email" in update_data and update_data["email"] != user.email:
            if self.get_by_email(update_data["email"]):
                raise ConflictError("User with this email already exists")

        password = update_data.pop("password", None)
        if password:
            user.hashed_password = get_password_hash(password)

        for key, value in update_data.items():
            setattr(user, key, value)
        user.updated_by = actor_id

        self.db.flush()
        return user

    def delete(self, user_id: int, company_id: int, actor_id: int = None):
        user = self.get_by_id(user_id, company_id)
        if actor_id is not None and user.id == actor_id:
            raise ValidationError("You cannot delete your own account")
        self.db.delete(user)
        self.db.flush()
