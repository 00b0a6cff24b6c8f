"""
JWT helpers for bearer authentication
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import logging

from jose import jwt, JWTError

from blog_api.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def create_access_token(
    subject: Any,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None
) -> str:
    """
    Create signed access token

    Args:
        subject: User ID, stored as string in the ``sub`` claim
        expires_delta: Token lifetime (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)
        settings: Settings to sign with (defaults to global settings)

    Returns:
        Encoded JWT
    """
    settings = settings or default_settings
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": str(subject),
        "exp": datetime.now(timezone.utc) + expires_delta,
        "type": "access",
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, settings: Optional[Settings] = None) -> Optional[Dict[str, Any]]:
    """Decode and verify token, returning None if invalid or expired"""
    settings = settings or default_settings
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        return None
