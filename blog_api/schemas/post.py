"""
Post Pydantic schemas
"""
from blog_api.schemas.common import CamelModel


class PostSummary(CamelModel):
    """Post reference shown next to a comment or like"""
    id: int
    title: str
    slug: str
