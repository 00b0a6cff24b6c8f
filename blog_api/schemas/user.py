"""
User Pydantic schemas for response serialization
"""
from typing import Optional

from blog_api.schemas.common import CamelModel


class UserPublic(CamelModel):
    """Public user info (for comments, likes, etc.)"""
    id: int
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
