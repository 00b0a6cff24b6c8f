"""
Likes API endpoints
Post like toggle and counts
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional, Tuple
import logging

from blog_api.core.config import Settings
from blog_api.core.database import get_db
from blog_api.core.dependencies import get_current_user, get_optional_user, get_settings
from blog_api.core.exceptions import StorageError
from blog_api.models.user import User
from blog_api.schemas.like import (
    LikeToggleRequest,
    LikeToggleResponse,
    LikeCountResponse,
    LikedPostResponse
)
from blog_api.services.comment_service import CommentService
from blog_api.services.identity_service import IdentityService
from blog_api.services.like_service import LikeService
from blog_api.utils.pagination import pagination_params
from blog_api.utils.responses import paginated_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/likes", response_model=dict)
async def get_likes(
    post_id: int = Query(..., alias="postId"),
    user_email: Optional[str] = Query(None, alias="userEmail"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    Get like count of a post

    - **postId**: Post ID
    - **userEmail**: Optional, also report whether this identity liked the post

    Never creates users
    """
    try:
        CommentService.get_post(db, post_id)
        likes_count = LikeService.get_count(db, post_id)

        is_liked = None
        user = current_user
        if user is None and user_email:
            user = IdentityService.find_by_email(db, user_email)
            if user is None:
                is_liked = False
        if user is not None:
            is_liked = LikeService.is_liked(db, post_id, user.id)
    except SQLAlchemyError as e:
        logger.exception(f"Error fetching likes for post {post_id}")
        raise StorageError("Failed to fetch likes") from e

    return {
        "ok": True,
        "data": LikeCountResponse(likes_count=likes_count, is_liked=is_liked).to_json()
    }


@router.post("/likes", response_model=dict)
async def toggle_like(
    like_data: LikeToggleRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    Toggle like for a post

    - **postId**: Post ID
    - **userEmail**, **userName**: Liker identity, required without a bearer token

    Returns the action taken and the fresh like count
    """
    try:
        result = LikeService.toggle_for_identity(
            db,
            post_id=like_data.post_id,
            current_user=current_user,
            user_email=like_data.user_email,
            user_name=like_data.user_name,
            max_retries=settings.TOGGLE_MAX_RETRIES
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error toggling like on post {like_data.post_id}")
        raise StorageError("Failed to toggle like") from e

    return {
        "ok": True,
        "message": f"Post {result.action} successfully",
        "data": LikeToggleResponse(
            action=result.action,
            likes_count=result.likes_count,
            is_liked=result.is_liked
        ).to_json()
    }


@router.post("/posts/{post_id}/like", response_model=dict)
async def like_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Like a post as the signed-in user

    Liking twice is not an error
    """
    try:
        result = LikeService.like(db, post_id, current_user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error liking post {post_id}")
        raise StorageError("Failed to like post") from e

    return {
        "ok": True,
        "message": "Post liked successfully",
        "data": LikeToggleResponse(
            action=result.action,
            likes_count=result.likes_count,
            is_liked=True
        ).to_json()
    }


@router.delete("/posts/{post_id}/like", response_model=dict)
async def unlike_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove the signed-in user's like, if any"""
    try:
        result = LikeService.unlike(db, post_id, current_user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error unliking post {post_id}")
        raise StorageError("Failed to unlike post") from e

    return {
        "ok": True,
        "message": "Post unliked successfully",
        "data": LikeToggleResponse(
            action=result.action,
            likes_count=result.likes_count,
            is_liked=False
        ).to_json()
    }


@router.get("/user/likes", response_model=dict)
async def list_my_likes(
    pagination: Tuple[int, int] = Depends(pagination_params),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get posts liked by the current user, newest-first
    """
    page, per_page = pagination
    try:
        items, total = LikeService.list_for_user(db, current_user.id, page, per_page)
        likes_data = [LikedPostResponse.model_validate(like).to_json() for like in items]
    except SQLAlchemyError as e:
        logger.exception(f"Error fetching likes of user {current_user.id}")
        raise StorageError("Failed to fetch likes") from e

    return paginated_response(likes_data, page, per_page, total)
