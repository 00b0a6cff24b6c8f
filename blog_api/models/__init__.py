"""
Models package - Import all models here for easy access
"""
from blog_api.models.user import User, UserRole
from blog_api.models.post import Post
from blog_api.models.comment import Comment, CommentStatus
from blog_api.models.like import Like

__all__ = [
    # User
    "User",
    "UserRole",

    # Blog
    "Post",

    # Engagement
    "Comment",
    "CommentStatus",
    "Like",
]
