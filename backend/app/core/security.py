"""
Security Module - Authentication & Authorization
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, List
import logging

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)

# Bearer token scheme
bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def create_token_for_user(user) -> str:
    """Issue a token carrying the {id, email, role, companyId} claims"""
    return create_access_token({
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "companyId": user.company_id,
    })


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except JWTError:
        return None


@dataclass(frozen=True)
class CurrentUser:
    """Per-request caller context handed to route handlers"""
    id: int
    email: str
    role: str
    company_id: int


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> CurrentUser:
    """
    Dependency to get the current authenticated user from the Bearer token.

    A missing token is a 401; a token that fails to decode is a 403.
    The user row is reloaded so deactivated accounts lose access immediately.
    """
    from app.models import User

    if not credentials or not credentials.credentials:
        raise AuthenticationError("Access token required")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid or expired token", status_code=403)

    user_id = payload.get("id")
    if user_id is None:
        raise AuthenticationError("Invalid token payload", status_code=403)

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    return CurrentUser(
        id=user.id,
        email=user.email,
        role=user.role,
        company_id=user.company_id,
    )


class RoleChecker:
    """Dependency for restricting a route to a set of roles"""

    def __init__(self, allowed_roles: List[str]):
        self.allowed_roles = set(allowed_roles)

    def __call__(self, user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in self.allowed_roles:
            logger.info(f"User {user.id} with role {user.role} denied; needs one of {sorted(self.allowed_roles)}")
            raise AuthorizationError()
        return user


require_admin = RoleChecker(["ADMIN", "SUPER_ADMIN"])
