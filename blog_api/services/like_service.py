"""
Like Service
Per-user post likes backed by the (user_id, post_id) unique constraint
"""
from dataclasses import dataclass
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional, Tuple
import logging

from blog_api.core.exceptions import ConflictError
from blog_api.models.like import Like
from blog_api.models.user import User
from blog_api.services.comment_service import CommentService
from blog_api.services.identity_service import IdentityService
from blog_api.utils.pagination import paginate

logger = logging.getLogger(__name__)

LIKED = "liked"
UNLIKED = "unliked"


@dataclass
class LikeResult:
    action: str
    likes_count: int

    @property
    def is_liked(self) -> bool:
        return self.action == LIKED


class LikeService:
    """Service for like operations"""

    @staticmethod
    def get_count(db: Session, post_id: int) -> int:
        """Total likes of a post"""
        return db.query(func.count(Like.id)).filter(Like.post_id == post_id).scalar() or 0

    @staticmethod
    def is_liked(db: Session, post_id: int, user_id: int) -> bool:
        return db.query(Like.id).filter(
            Like.post_id == post_id,
            Like.user_id == user_id
        ).first() is not None

    @staticmethod
    def _delete_existing(db: Session, post_id: int, user_id: int) -> int:
        deleted = db.query(Like).filter(
            Like.post_id == post_id,
            Like.user_id == user_id
        ).delete(synchronize_session=False)
        db.commit()
        return deleted

    @staticmethod
    def _insert(db: Session, post_id: int, user_id: int) -> bool:
        """Insert like, returning False if the unique constraint rejected it"""
        db.add(Like(post_id=post_id, user_id=user_id))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            return False
        return True

    @staticmethod
    def toggle(db: Session, post_id: int, user: User, max_retries: int = 3) -> LikeResult:
        """
        Like the post if the user has not, otherwise remove the like

        Every call flips the state exactly once. When a concurrent request
        inserts the same like between our delete and insert, the toggle is
        replayed against the new state.

        Raises:
            NotFoundError: Post does not exist
            ConflictError: State kept changing under us for max_retries attempts
        """
        CommentService.get_post(db, post_id)

        for attempt in range(max_retries):
            if LikeService._delete_existing(db, post_id, user.id):
                action = UNLIKED
                break
            if LikeService._insert(db, post_id, user.id):
                action = LIKED
                break
            logger.warning(
                f"Like toggle for post {post_id} by user {user.id} raced "
                f"(attempt {attempt + 1}/{max_retries})"
            )
        else:
            raise ConflictError("Like state changed concurrently, please retry")

        result = LikeResult(action=action, likes_count=LikeService.get_count(db, post_id))
        logger.info(f"User {user.id} {action} post {post_id} ({result.likes_count} likes)")
        return result

    @staticmethod
    def toggle_for_identity(
        db: Session,
        post_id: int,
        current_user: Optional[User] = None,
        user_email: Optional[str] = None,
        user_name: Optional[str] = None,
        max_retries: int = 3
    ) -> LikeResult:
        """Toggle a like submitted from the public post page"""
        CommentService.get_post(db, post_id)
        user = IdentityService.resolve_request_identity(db, current_user, user_email, user_name)
        return LikeService.toggle(db, post_id, user, max_retries=max_retries)

    @staticmethod
    def like(db: Session, post_id: int, user: User) -> LikeResult:
        """Idempotently like a post; a duplicate under race counts as already liked"""
        CommentService.get_post(db, post_id)

        if not LikeService.is_liked(db, post_id, user.id):
            if not LikeService._insert(db, post_id, user.id):
                logger.info(f"Duplicate like for post {post_id} by user {user.id}, already liked")

        return LikeResult(action=LIKED, likes_count=LikeService.get_count(db, post_id))

    @staticmethod
    def unlike(db: Session, post_id: int, user: User) -> LikeResult:
        """Idempotently remove a like"""
        CommentService.get_post(db, post_id)
        LikeService._delete_existing(db, post_id, user.id)
        return LikeResult(action=UNLIKED, likes_count=LikeService.get_count(db, post_id))

    @staticmethod
    def list_for_user(
        db: Session,
        user_id: int,
        page: int = 1,
        per_page: Optional[int] = None
    ) -> Tuple[List[Like], int]:
        """Likes given by a user with their posts, newest-first"""
        query = db.query(Like).options(
            joinedload(Like.post)
        ).filter(
            Like.user_id == user_id
        ).order_by(Like.created_at.desc(), Like.id.desc())

        return paginate(query, page, per_page)
