"""
Authentication API Routes
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import create_token_for_user, get_current_user, CurrentUser
from app.schemas import (
    LoginRequest, RegisterRequest, ChangePasswordRequest, AuthResponse, MeResponse, MessageResponse
)
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """Exchange email and password for a bearer token"""
    user_service = UserService(db)
    user = user_service.authenticate(login_data.email, login_data.password)
    return {"token": create_token_for_user(user), "user": user}


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    register_data: RegisterRequest,
    db: Session = Depends(get_db)
):
    """Register a new company together with its first user"""
    user_service = UserService(db)
    user = user_service.register(register_data)
    db.commit()

    user = user_service.get_with_company(user.id)
    return {"token": create_token_for_user(user), "user": user}


@router.get("/me", response_model=MeResponse)
async def get_me(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Get current user with company summary"""
    user = UserService(db).get_with_company(current_user.id)
    return {"user": user}


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    password_data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Change current user's password"""
    UserService(db).change_password(
        current_user.id,
        password_data.current_password,
        password_data.new_password
    )
    db.commit()
    return {"message": "Password updated successfully"}
