"""
Admin API endpoints
Comment moderation and engagement overview
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional, Tuple
import logging

from blog_api.core.database import get_db
from blog_api.core.dependencies import require_admin
from blog_api.core.exceptions import StorageError
from blog_api.models.comment import Comment, CommentStatus
from blog_api.schemas.comment import AdminCommentResponse, CommentStatusUpdate, UserCommentResponse
from blog_api.schemas.common import CamelModel
from blog_api.services.moderation_service import ModerationService
from blog_api.utils.pagination import pagination_params
from blog_api.utils.responses import paginated_response

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


# Schemas
class EngagementStats(CamelModel):
    """Dashboard statistics"""
    total_comments: int
    approved_comments: int
    pending_comments: int
    total_likes: int


def serialize_admin_comment(comment: Comment) -> dict:
    return AdminCommentResponse(
        **UserCommentResponse.model_validate(comment).model_dump(),
        reply_count=len(comment.replies)
    ).to_json()


@router.get("/admin/comments", response_model=dict)
async def list_comments(
    status: Optional[CommentStatus] = Query(None),
    post_id: Optional[int] = Query(None, alias="postId"),
    pagination: Tuple[int, int] = Depends(pagination_params),
    db: Session = Depends(get_db)
):
    """
    Get all comments for moderation

    - **status**: Optional PENDING or APPROVED filter
    - **postId**: Optional post filter
    """
    page, per_page = pagination
    try:
        items, total = ModerationService.list_comments(
            db, status=status, post_id=post_id, page=page, per_page=per_page
        )
        comments_data = [serialize_admin_comment(c) for c in items]
    except SQLAlchemyError as e:
        logger.exception("Error fetching comments for moderation")
        raise StorageError("Failed to fetch comments") from e

    return paginated_response(comments_data, page, per_page, total)


@router.patch("/admin/comments/{comment_id}", response_model=dict)
async def update_comment_status(
    comment_id: int,
    status_data: CommentStatusUpdate,
    db: Session = Depends(get_db)
):
    """
    Approve or unapprove a comment

    - **status**: APPROVED or PENDING
    """
    try:
        comment = ModerationService.set_status(db, comment_id, status_data.status)
        comment_dict = serialize_admin_comment(comment)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error updating status of comment {comment_id}")
        raise StorageError("Failed to update comment") from e

    return {
        "ok": True,
        "message": f"Comment status set to {comment.status}",
        "data": comment_dict
    }


@router.post("/admin/comments/{comment_id}/approve", response_model=dict)
async def approve_comment(comment_id: int, db: Session = Depends(get_db)):
    """Make a pending comment visible"""
    try:
        comment = ModerationService.approve(db, comment_id)
        comment_dict = serialize_admin_comment(comment)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error approving comment {comment_id}")
        raise StorageError("Failed to update comment") from e

    return {
        "ok": True,
        "message": "Comment approved",
        "data": comment_dict
    }


@router.post("/admin/comments/{comment_id}/unapprove", response_model=dict)
async def unapprove_comment(comment_id: int, db: Session = Depends(get_db)):
    """Hide an approved comment again"""
    try:
        comment = ModerationService.unapprove(db, comment_id)
        comment_dict = serialize_admin_comment(comment)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error unapproving comment {comment_id}")
        raise StorageError("Failed to update comment") from e

    return {
        "ok": True,
        "message": "Comment moved back to pending",
        "data": comment_dict
    }


@router.delete("/admin/comments/{comment_id}", response_model=dict)
async def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db)
):
    """Delete any comment together with its replies"""
    try:
        removed = ModerationService.delete_comment(db, comment_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error deleting comment {comment_id}")
        raise StorageError("Failed to delete comment") from e

    return {
        "ok": True,
        "message": "Comment deleted successfully",
        "data": {"deleted": removed}
    }


@router.get("/admin/engagement/stats", response_model=dict)
async def get_engagement_stats(db: Session = Depends(get_db)):
    """
    Get engagement statistics

    Returns comment totals by status, total likes and the latest comments
    """
    try:
        stats = ModerationService.stats(db)
        recent = [serialize_admin_comment(c) for c in stats.pop("recent_comments")]
    except SQLAlchemyError as e:
        logger.exception("Error computing engagement stats")
        raise StorageError("Failed to fetch statistics") from e

    return {
        "ok": True,
        "data": {
            **EngagementStats(**stats).to_json(),
            "recentComments": recent
        }
    }
