"""
Comment Service
Creation, threading and read queries for post comments
"""
from dataclasses import dataclass, field
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional, Dict, Tuple
import logging

from blog_api.core.exceptions import ValidationError, NotFoundError, PermissionDeniedError
from blog_api.models.comment import Comment, CommentStatus
from blog_api.models.post import Post
from blog_api.models.user import User
from blog_api.services.identity_service import IdentityService
from blog_api.utils.pagination import paginate

logger = logging.getLogger(__name__)

@dataclass
class CommentThread:
    """Top-level comment with the replies visible to readers"""
    comment: Comment
    replies: List[Comment] = field(default_factory=list)

    @property
    def reply_count(self) -> int:
        return len(self.replies)


def parse_status(value) -> CommentStatus:
    """Convert user input to CommentStatus, raising ValidationError if unknown"""
    if isinstance(value, CommentStatus):
        return value
    try:
        return CommentStatus(str(value).upper())
    except ValueError:
        raise ValidationError(f"Unknown comment status: {value}", field="status")


class CommentService:
    """Service for comment operations"""

    @staticmethod
    def get_post(db: Session, post_id: int) -> Post:
        post = db.query(Post).filter(Post.id == post_id).first()
        if not post:
            raise NotFoundError("Post not found")
        return post

    @staticmethod
    def get(db: Session, comment_id: int) -> Comment:
        comment = db.query(Comment).options(
            joinedload(Comment.author)
        ).filter(Comment.id == comment_id).first()
        if not comment:
            raise NotFoundError("Comment not found")
        return comment

    @staticmethod
    def validate_input(
        post_id: Optional[int],
        content: Optional[str],
        max_length: Optional[int] = None
    ) -> str:
        """Check required fields, returning the stripped content"""
        if post_id is None:
            raise ValidationError("Post ID is required", field="postId")
        content = (content or "").strip()
        if not content:
            raise ValidationError("Content is required", field="content")
        if max_length is not None and len(content) > max_length:
            raise ValidationError(
                f"Content must be at most {max_length} characters", field="content"
            )
        return content

    @staticmethod
    def resolve_parent(db: Session, post_id: int, parent_id: Optional[int]) -> Optional[int]:
        """
        Check the comment being replied to and return the id to store

        Raises:
            NotFoundError: Parent does not exist
            ValidationError: Parent is on another post
        """
        if parent_id is None:
            return None

        parent = db.query(Comment).filter(Comment.id == parent_id).first()
        if not parent:
            raise NotFoundError("Parent comment not found")
        if parent.post_id != post_id:
            raise ValidationError(
                "Parent comment belongs to a different post", field="parentId"
            )
        # Only one level is rendered; keep replies-to-replies in the root thread
        if parent.parent_id is not None:
            return parent.parent_id
        return parent.id

    @staticmethod
    def submit(
        db: Session,
        post_id: Optional[int],
        content: Optional[str],
        current_user: Optional[User] = None,
        author_email: Optional[str] = None,
        author_name: Optional[str] = None,
        parent_id: Optional[int] = None,
        status: CommentStatus = CommentStatus.APPROVED,
        max_length: Optional[int] = None
    ) -> Comment:
        """
        Create a comment from a public form submission

        Input and the post are checked before an identity is resolved, so a
        rejected submission never leaves a new user behind.
        """
        content = CommentService.validate_input(post_id, content, max_length)
        status = parse_status(status)
        CommentService.get_post(db, post_id)
        parent_id = CommentService.resolve_parent(db, post_id, parent_id)

        author = IdentityService.resolve_request_identity(
            db, current_user, author_email, author_name
        )
        return CommentService._insert(db, post_id, content, author, parent_id, status)

    @staticmethod
    def create(
        db: Session,
        post_id: Optional[int],
        content: Optional[str],
        author: User,
        parent_id: Optional[int] = None,
        status: CommentStatus = CommentStatus.APPROVED,
        max_length: Optional[int] = None
    ) -> Comment:
        """
        Create comment or reply on a post

        Args:
            db: Database session
            post_id: Post being discussed
            content: Comment text
            author: Resolved identity of the commenter
            parent_id: Comment being replied to
            status: Initial moderation status
            max_length: Maximum content length, None for no limit

        Returns:
            Created Comment with author loaded

        Raises:
            ValidationError: Missing content or parent on another post
            NotFoundError: Post or parent comment does not exist
        """
        content = CommentService.validate_input(post_id, content, max_length)
        CommentService.get_post(db, post_id)
        parent_id = CommentService.resolve_parent(db, post_id, parent_id)

        return CommentService._insert(db, post_id, content, author, parent_id, status)

    @staticmethod
    def _insert(
        db: Session,
        post_id: int,
        content: str,
        author: User,
        parent_id: Optional[int],
        status: CommentStatus
    ) -> Comment:
        """Store an already validated comment"""
        comment = Comment(
            post_id=post_id,
            author_id=author.id,
            parent_id=parent_id,
            content=content,
            status=parse_status(status).value
        )
        db.add(comment)
        db.commit()
        db.refresh(comment)

        logger.info(
            f"Comment {comment.id} created on post {post_id} by user {author.id} "
            f"(parent={parent_id}, status={comment.status})"
        )
        return CommentService.get(db, comment.id)

    @staticmethod
    def list_for_post(db: Session, post_id: int) -> List[CommentThread]:
        """
        Approved top-level comments newest-first, each carrying its approved
        replies oldest-first
        """
        CommentService.get_post(db, post_id)

        top_level = db.query(Comment).options(
            joinedload(Comment.author)
        ).filter(
            Comment.post_id == post_id,
            Comment.parent_id.is_(None),
            Comment.status == CommentStatus.APPROVED.value
        ).order_by(Comment.created_at.desc(), Comment.id.desc()).all()

        if not top_level:
            return []

        threads: Dict[int, CommentThread] = {
            comment.id: CommentThread(comment) for comment in top_level
        }

        replies = db.query(Comment).options(
            joinedload(Comment.author)
        ).filter(
            Comment.parent_id.in_(list(threads.keys())),
            Comment.status == CommentStatus.APPROVED.value
        ).order_by(Comment.created_at.asc(), Comment.id.asc()).all()

        for reply in replies:
            threads[reply.parent_id].replies.append(reply)

        return [threads[comment.id] for comment in top_level]

    @staticmethod
    def list_for_user(
        db: Session,
        user_id: int,
        page: int = 1,
        per_page: Optional[int] = None
    ) -> Tuple[List[Comment], int]:
        """All comments written by a user regardless of status, newest-first"""
        query = db.query(Comment).options(
            joinedload(Comment.post)
        ).filter(
            Comment.author_id == user_id
        ).order_by(Comment.created_at.desc(), Comment.id.desc())

        return paginate(query, page, per_page)

    @staticmethod
    def count_for_post(
        db: Session,
        post_id: int,
        status: Optional[CommentStatus] = CommentStatus.APPROVED
    ) -> int:
        query = db.query(func.count(Comment.id)).filter(Comment.post_id == post_id)
        if status is not None:
            query = query.filter(Comment.status == parse_status(status).value)
        return query.scalar() or 0

    @staticmethod
    def delete(db: Session, comment_id: int, user: User) -> None:
        """
        Delete a comment and its replies

        Only the author or an admin may delete a comment.
        """
        comment = CommentService.get(db, comment_id)

        if comment.author_id != user.id and not user.is_admin:
            raise PermissionDeniedError("You can only delete your own comments")

        CommentService.remove(db, comment)
        logger.info(f"Comment {comment_id} deleted by user {user.id}")

    @staticmethod
    def remove(db: Session, comment: Comment) -> int:
        """Delete comment with its replies, returning the number of rows removed"""
        removed = 1 + len(comment.replies)
        db.delete(comment)
        db.commit()
        return removed
