"""
Settings API Routes - Users and Company profile
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from app.api.deps import Pagination
from app.core.database import get_db
from app.core.security import get_current_user, require_admin, CurrentUser
from app.schemas import (
    Page, UserCreate, UserUpdate, UserResponse, CompanyResponse, CompanyUpdate
)
from app.services.company_service import CompanyService
from app.services.user_service import UserService

router = APIRouter(tags=["Settings"])


# ==================== USERS ====================

@router.get("/users", response_model=Page[UserResponse])
async def list_users(
    q: Optional[str] = None,
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """List users of the caller's company"""
    items, total = UserService(db).list(current_user.company_id, q, page.skip, page.take)
    return {"items": items, "total": total}


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    return UserService(db).get_by_id(user_id, current_user.company_id)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """Create a user in the caller's company"""
    user = UserService(db).create(
        user_data,
        current_user.company_id,
        actor_id=current_user.id,
        actor_role=current_user.role
    )
    db.commit()
    return user


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    user = UserService(db).update(
        user_id,
        current_user.company_id,
        user_data,
        actor_id=current_user.id,
        actor_role=current_user.role
    )
    db.commit()
    return user


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    UserService(db).delete(user_id, current_user.company_id, actor_id=current_user.id)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ==================== COMPANY ====================

@router.get("/companies/profile", response_model=CompanyResponse)
async def get_company_profile(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Get the caller's company"""
    return CompanyService(db).get_by_id(current_user.company_id)


@router.put("/companies/profile", response_model=CompanyResponse)
async def update_company_profile(
    company_data: CompanyUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """Update company profile"""
    company = CompanyService(db).update(current_user.company_id, company_data)
    db.commit()
    return company
