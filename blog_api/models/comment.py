"""
Comment model for post discussions
"""
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from blog_api.core.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CommentStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"


class Comment(Base):
    """Comment on a post; replies point at a top-level comment of the same post"""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    post_id = Column(Integer, ForeignKey('posts.id', ondelete='CASCADE'), nullable=False)
    author_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey('comments.id', ondelete='CASCADE'), nullable=True, index=True)

    content = Column(Text, nullable=False)
    status = Column(String, default=CommentStatus.APPROVED.value, nullable=False, index=True)

    # Python-side defaults keep sub-second ordering on every backend
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index('ix_comments_post_created', 'post_id', 'created_at'),
    )

    # Relationships
    post = relationship("Post", back_populates="comments")
    author = relationship("User", back_populates="comments")
    parent = relationship("Comment", remote_side=[id], back_populates="replies")
    replies = relationship(
        "Comment",
        back_populates="parent",
        cascade="all, delete-orphan",
        order_by="Comment.created_at, Comment.id"
    )

    def __repr__(self):
        return f"<Comment(id={self.id}, post_id={self.post_id}, author_id={self.author_id}, status={self.status})>"
