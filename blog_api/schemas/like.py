"""
Like Pydantic schemas for request/response validation
"""
from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime

from blog_api.schemas.common import CamelModel
from blog_api.schemas.post import PostSummary


class LikeToggleRequest(CamelModel):
    """Schema for toggling a like"""
    post_id: int
    user_email: Optional[EmailStr] = None
    user_name: Optional[str] = Field(None, min_length=1, max_length=100)


class LikeToggleResponse(CamelModel):
    action: str  # liked or unliked
    likes_count: int
    is_liked: bool


class LikeCountResponse(CamelModel):
    likes_count: int
    is_liked: Optional[bool] = None


class LikedPostResponse(CamelModel):
    """Post liked by the current user"""
    post: PostSummary
    created_at: datetime
