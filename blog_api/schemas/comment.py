"""
Comment Pydantic schemas for request/response validation
"""
from pydantic import EmailStr, Field
from typing import Optional, List
from datetime import datetime

from blog_api.models.comment import CommentStatus
from blog_api.schemas.common import CamelModel
from blog_api.schemas.post import PostSummary
from blog_api.schemas.user import UserPublic


# ============ Request Schemas ============

class CommentCreate(CamelModel):
    """Schema for creating comment or reply"""
    post_id: int
    content: str = Field(..., min_length=1)
    author_name: Optional[str] = Field(None, min_length=1, max_length=100)
    author_email: Optional[EmailStr] = None
    parent_id: Optional[int] = None


class CommentStatusUpdate(CamelModel):
    """Schema for moderating a comment"""
    status: CommentStatus


# ============ Response Schemas ============

class CommentResponse(CamelModel):
    """Single comment with its author"""
    id: int
    post_id: int
    author_id: int
    parent_id: Optional[int] = None
    content: str
    status: str
    created_at: datetime
    author: Optional[UserPublic] = None


class CommentThreadResponse(CommentResponse):
    """Top-level comment with its visible replies"""
    replies: List[CommentResponse] = []
    reply_count: int = 0


class UserCommentResponse(CommentResponse):
    """Comment listed on the author's own page"""
    post: Optional[PostSummary] = None


class AdminCommentResponse(UserCommentResponse):
    """Row of the admin moderation table"""
    reply_count: int = 0
