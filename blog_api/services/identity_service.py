"""
Identity Service
Maps a commenter's email + display name to a user row
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
import logging

from blog_api.core.exceptions import ValidationError
from blog_api.models.user import User, UserRole

logger = logging.getLogger(__name__)


class IdentityService:
    """Service for resolving engagement identities"""

    @staticmethod
    def normalize_email(email: Optional[str]) -> str:
        return (email or "").strip().lower()

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(
            User.email == IdentityService.normalize_email(email)
        ).first()

    @staticmethod
    def resolve(db: Session, email: Optional[str], name: Optional[str]) -> User:
        """
        Find user by email or create an anonymous identity for it

        Args:
            db: Database session
            email: Natural key of the identity
            name: Display name, used only when creating

        Returns:
            User whose id is stable for the given email

        Raises:
            ValidationError: If email or name is missing
        """
        email = IdentityService.normalize_email(email)
        name = (name or "").strip()

        if not email:
            raise ValidationError("Email is required", field="email")
        if not name:
            raise ValidationError("Name is required", field="name")

        user = db.query(User).filter(User.email == email).first()
        if user:
            return user

        user = User(
            email=email,
            name=name,
            role=UserRole.USER.value,
            password=None
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Another request created the same email first; use its row
            db.rollback()
            user = db.query(User).filter(User.email == email).first()
            if user is None:
                raise
            logger.info(f"Identity for {email} created concurrently, reusing user {user.id}")
            return user

        db.refresh(user)
        logger.info(f"Created identity user {user.id} for {email}")
        return user

    @staticmethod
    def resolve_request_identity(
        db: Session,
        current_user: Optional[User],
        email: Optional[str],
        name: Optional[str]
    ) -> User:
        """Authenticated user if present, otherwise the identity for email/name"""
        if current_user is not None:
            return current_user
        return IdentityService.resolve(db, email, name)
