"""
Like model for post likes
"""
from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship

from blog_api.core.database import Base
from blog_api.models.comment import utc_now


class Like(Base):
    """Model for post likes"""
    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    # Unique constraint - user can only like a post once
    __table_args__ = (
        UniqueConstraint('user_id', 'post_id', name='uq_likes_user_post'),
    )

    # Relationships
    post = relationship("Post", back_populates="likes")
    user = relationship("User", back_populates="likes")

    def __repr__(self):
        return f"<Like(post_id={self.post_id}, user_id={self.user_id})>"
