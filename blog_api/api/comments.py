"""
Comments API endpoints
Post discussions with one level of replies
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional, Tuple
import logging

from blog_api.core.config import Settings
from blog_api.core.database import get_db
from blog_api.core.dependencies import get_current_user, get_optional_user, get_settings
from blog_api.core.exceptions import StorageError
from blog_api.models.comment import Comment
from blog_api.models.user import User
from blog_api.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentThreadResponse,
    UserCommentResponse
)
from blog_api.services.comment_service import CommentService, CommentThread
from blog_api.utils.pagination import pagination_params
from blog_api.utils.responses import paginated_response

logger = logging.getLogger(__name__)

router = APIRouter()


def serialize_thread(thread: CommentThread) -> dict:
    return CommentThreadResponse(
        **CommentResponse.model_validate(thread.comment).model_dump(),
        replies=[CommentResponse.model_validate(reply) for reply in thread.replies],
        reply_count=thread.reply_count
    ).to_json()


def serialize_new_comment(comment: Comment) -> dict:
    return CommentThreadResponse(
        **CommentResponse.model_validate(comment).model_dump()
    ).to_json()


@router.get("/comments", response_model=dict)
async def list_comments(
    post_id: int = Query(..., alias="postId"),
    db: Session = Depends(get_db)
):
    """
    Get approved comments for a post

    - **postId**: Post ID

    Returns top-level comments newest-first, each with its approved
    replies oldest-first
    """
    try:
        threads = CommentService.list_for_post(db, post_id)
        comments_data = [serialize_thread(thread) for thread in threads]
        total = CommentService.count_for_post(db, post_id)
    except SQLAlchemyError as e:
        logger.exception(f"Error fetching comments for post {post_id}")
        raise StorageError("Failed to fetch comments") from e

    return {
        "ok": True,
        "data": comments_data,
        "total": total
    }


@router.post("/comments", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    Add comment or reply to a post

    - **postId**: Post ID
    - **content**: Comment text
    - **authorName**, **authorEmail**: Commenter identity, required without a bearer token
    - **parentId**: Optional comment being replied to

    Returns created comment
    """
    try:
        comment = CommentService.submit(
            db,
            post_id=comment_data.post_id,
            content=comment_data.content,
            current_user=current_user,
            author_email=comment_data.author_email,
            author_name=comment_data.author_name,
            parent_id=comment_data.parent_id,
            status=settings.COMMENT_DEFAULT_STATUS,
            max_length=settings.COMMENT_MAX_LENGTH
        )
        comment_dict = serialize_new_comment(comment)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error creating comment on post {comment_data.post_id}")
        raise StorageError("Failed to submit comment") from e

    return {
        "ok": True,
        "message": "Comment added successfully",
        "data": comment_dict
    }


@router.delete("/comments/{comment_id}", response_model=dict)
async def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Delete a comment (only comment owner can delete)

    Replies to the comment are deleted with it.
    """
    try:
        CommentService.delete(db, comment_id, current_user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error deleting comment {comment_id}")
        raise StorageError("Failed to delete comment") from e

    return {
        "ok": True,
        "message": "Comment deleted successfully"
    }


@router.get("/user/comments", response_model=dict)
async def list_my_comments(
    pagination: Tuple[int, int] = Depends(pagination_params),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get comments written by the current user, any status, newest-first
    """
    page, per_page = pagination
    try:
        items, total = CommentService.list_for_user(db, current_user.id, page, per_page)
        comments_data = [UserCommentResponse.model_validate(c).to_json() for c in items]
    except SQLAlchemyError as e:
        logger.exception(f"Error fetching comments of user {current_user.id}")
        raise StorageError("Failed to fetch comments") from e

    return paginated_response(comments_data, page, per_page, total)
