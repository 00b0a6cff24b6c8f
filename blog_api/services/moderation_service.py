"""
Moderation Service
Comment status transitions and the admin comment table
"""
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from typing import Dict, List, Optional, Tuple, Any
import logging

from blog_api.core.exceptions import InvalidTransitionError
from blog_api.models.comment import Comment, CommentStatus
from blog_api.models.like import Like
from blog_api.services.comment_service import CommentService, parse_status
from blog_api.utils.pagination import paginate

logger = logging.getLogger(__name__)

# Legal moves of the moderation gate: current status -> allowed targets
TRANSITIONS: Dict[CommentStatus, Tuple[CommentStatus, ...]] = {
    CommentStatus.PENDING: (CommentStatus.APPROVED,),
    CommentStatus.APPROVED: (CommentStatus.PENDING,),
}


def can_transition(current: CommentStatus, target: CommentStatus) -> bool:
    return target in TRANSITIONS.get(current, ())


class ModerationService:
    """Service for admin comment moderation"""

    @staticmethod
    def set_status(db: Session, comment_id: int, new_status) -> Comment:
        """
        Move a comment to a new moderation status

        Args:
            db: Database session
            comment_id: Comment ID
            new_status: Target status (CommentStatus or its string value)

        Returns:
            Updated Comment

        Raises:
            NotFoundError: Comment does not exist
            ValidationError: Unknown status
            InvalidTransitionError: Move not in the transition table
        """
        target = parse_status(new_status)
        comment = CommentService.get(db, comment_id)
        current = parse_status(comment.status)

        if not can_transition(current, target):
            raise InvalidTransitionError(
                f"Cannot change comment status from {current.value} to {target.value}",
                field="status"
            )

        comment.status = target.value
        db.commit()
        db.refresh(comment)

        logger.info(f"Comment {comment_id} moved from {current.value} to {target.value}")
        return comment

    @staticmethod
    def approve(db: Session, comment_id: int) -> Comment:
        return ModerationService.set_status(db, comment_id, CommentStatus.APPROVED)

    @staticmethod
    def unapprove(db: Session, comment_id: int) -> Comment:
        return ModerationService.set_status(db, comment_id, CommentStatus.PENDING)

    @staticmethod
    def list_comments(
        db: Session,
        status: Optional[Any] = None,
        post_id: Optional[int] = None,
        page: int = 1,
        per_page: Optional[int] = None
    ) -> Tuple[List[Comment], int]:
        """All comments for the moderation table, newest-first"""
        query = db.query(Comment).options(
            joinedload(Comment.author),
            joinedload(Comment.post)
        )

        if status is not None:
            query = query.filter(Comment.status == parse_status(status).value)
        if post_id is not None:
            query = query.filter(Comment.post_id == post_id)

        query = query.order_by(Comment.created_at.desc(), Comment.id.desc())
        return paginate(query, page, per_page)

    @staticmethod
    def delete_comment(db: Session, comment_id: int) -> int:
        """Remove a comment and its replies, returning rows removed"""
        comment = CommentService.get(db, comment_id)
        removed = CommentService.remove(db, comment)
        logger.info(f"Comment {comment_id} removed by moderator ({removed} rows)")
        return removed

    @staticmethod
    def stats(db: Session, recent_limit: int = 5) -> Dict[str, Any]:
        """Engagement totals for the admin dashboard"""
        by_status = dict(
            db.query(Comment.status, func.count(Comment.id)).group_by(Comment.status).all()
        )
        total_likes = db.query(func.count(Like.id)).scalar() or 0

        recent = db.query(Comment).options(
            joinedload(Comment.author),
            joinedload(Comment.post)
        ).order_by(Comment.created_at.desc(), Comment.id.desc()).limit(recent_limit).all()

        return {
            "total_comments": sum(by_status.values()),
            "approved_comments": by_status.get(CommentStatus.APPROVED.value, 0),
            "pending_comments": by_status.get(CommentStatus.PENDING.value, 0),
            "total_likes": total_likes,
            "recent_comments": recent,
        }
