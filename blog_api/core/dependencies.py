"""
FastAPI dependencies for settings, authentication and authorization
"""
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging

from blog_api.core.config import Settings
from blog_api.core.database import get_db
from blog_api.core.security import decode_token
from blog_api.models.user import User, UserRole

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer()


def get_settings(request: Request) -> Settings:
    """Settings the running application was created with"""
    return request.app.state.settings


def _user_from_token(token: str, db: Session, settings: Settings) -> Optional[User]:
    payload = decode_token(token, settings=settings)
    if not payload:
        return None

    user_id = payload.get("sub")
    if user_id is None:
        logger.info("Token without subject rejected")
        return None

    try:
        # JWT subject is a string, DB ID is int
        uid_int = int(user_id)
    except ValueError:
        logger.info(f"Token subject {user_id!r} is not a valid user id")
        return None

    return db.query(User).filter(User.id == uid_int).first()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> User:
    """
    Dependency to get current authenticated user from JWT token

    Raises:
        HTTPException: If token is invalid or user not found
    """
    user = _user_from_token(credentials.credentials, db, settings)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> Optional[User]:
    """
    Dependency to get optional user (for endpoints that work with or without auth)
    Returns None if no token provided or token is invalid
    """
    if not credentials:
        return None
    return _user_from_token(credentials.credentials, db, settings)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency restricting an endpoint to ADMIN users"""
    if current_user.role != UserRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user
