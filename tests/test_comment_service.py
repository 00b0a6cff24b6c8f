import pytest

from blog_api.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from blog_api.models import Comment, CommentStatus, User
from blog_api.services.comment_service import CommentService
from blog_api.services.identity_service import IdentityService
from blog_api.services.moderation_service import ModerationService


def test_create_then_list_for_post(db, post):
    comment = CommentService.submit(
        db, post.id, "Nice post!", author_email="bob@x.com", author_name="Bob"
    )

    threads = CommentService.list_for_post(db, post.id)

    assert len(threads) == 1
    assert threads[0].comment.id == comment.id
    assert threads[0].comment.content == "Nice post!"
    assert threads[0].comment.author.name == "Bob"
    assert threads[0].replies == []


def test_create_defaults_to_approved(db, post, reader):
    comment = CommentService.create(db, post.id, "Hello", reader)

    assert comment.status == CommentStatus.APPROVED.value


def test_pending_comment_hidden_from_post_listing(db, post, reader):
    CommentService.create(db, post.id, "Awaiting review", reader, status="PENDING")

    assert CommentService.list_for_post(db, post.id) == []
    assert CommentService.count_for_post(db, post.id) == 0
    assert CommentService.count_for_post(db, post.id, status=None) == 1


def test_list_for_post_orders_threads_and_replies(db, post, reader):
    first = CommentService.create(db, post.id, "first", reader)
    second = CommentService.create(db, post.id, "second", reader)
    reply_a = CommentService.create(db, post.id, "reply a", reader, parent_id=first.id)
    reply_b = CommentService.create(db, post.id, "reply b", reader, parent_id=first.id)
    CommentService.create(db, post.id, "hidden reply", reader, parent_id=first.id, status="PENDING")

    threads = CommentService.list_for_post(db, post.id)

    assert [t.comment.id for t in threads] == [second.id, first.id]
    first_thread = threads[1]
    assert [r.id for r in first_thread.replies] == [reply_a.id, reply_b.id]
    assert first_thread.reply_count == 2
    assert threads[0].replies == []


def test_replies_of_pending_comment_are_hidden(db, post, reader):
    parent = CommentService.create(db, post.id, "parent", reader, status="PENDING")
    CommentService.create(db, post.id, "reply", reader, parent_id=parent.id)

    assert CommentService.list_for_post(db, post.id) == []


def test_reply_to_reply_joins_root_thread(db, post, reader):
    root = CommentService.create(db, post.id, "root", reader)
    reply = CommentService.create(db, post.id, "reply", reader, parent_id=root.id)
    nested = CommentService.create(db, post.id, "nested", reader, parent_id=reply.id)

    assert nested.parent_id == root.id


def test_reply_must_belong_to_same_post(db, post, other_post, reader):
    parent = CommentService.create(db, other_post.id, "elsewhere", reader)

    with pytest.raises(ValidationError) as exc_info:
        CommentService.create(db, post.id, "reply", reader, parent_id=parent.id)

    assert exc_info.value.field == "parentId"


def test_reply_to_missing_parent(db, post, reader):
    with pytest.raises(NotFoundError):
        CommentService.create(db, post.id, "reply", reader, parent_id=999)


def test_create_on_missing_post(db, reader):
    with pytest.raises(NotFoundError):
        CommentService.create(db, 999, "hello", reader)


@pytest.mark.parametrize("content", ["", "   ", None])
def test_create_requires_content(db, post, reader, content):
    with pytest.raises(ValidationError) as exc_info:
        CommentService.create(db, post.id, content, reader)

    assert exc_info.value.field == "content"


def test_create_rejects_overlong_content(db, post, reader):
    with pytest.raises(ValidationError):
        CommentService.create(db, post.id, "x" * 11, reader, max_length=10)


def test_submit_validates_before_creating_identity(db):
    with pytest.raises(NotFoundError):
        CommentService.submit(
            db, 999, "hello", author_email="new@x.com", author_name="New"
        )

    assert db.query(User).count() == 0


def test_submit_rejects_bad_parent_before_creating_identity(db, post):
    with pytest.raises(NotFoundError):
        CommentService.submit(
            db, post.id, "hello", author_email="new@x.com", author_name="New", parent_id=42
        )

    assert IdentityService.find_by_email(db, "new@x.com") is None


def test_list_for_user_includes_every_status(db, post, other_post, reader):
    CommentService.create(db, post.id, "approved", reader)
    CommentService.create(db, other_post.id, "pending", reader, status="PENDING")

    items, total = CommentService.list_for_user(db, reader.id)

    assert total == 2
    assert [c.content for c in items] == ["pending", "approved"]
    assert items[0].post.slug == "second-post"


def test_author_deletes_comment_with_replies(db, post, reader):
    parent = CommentService.create(db, post.id, "parent", reader)
    CommentService.create(db, post.id, "reply", reader, parent_id=parent.id)

    CommentService.delete(db, parent.id, reader)

    assert db.query(Comment).count() == 0


def test_only_author_or_admin_may_delete(db, post, reader, admin):
    stranger = IdentityService.resolve(db, "stranger@x.com", "Stranger")
    comment = CommentService.create(db, post.id, "mine", reader)

    with pytest.raises(PermissionDeniedError):
        CommentService.delete(db, comment.id, stranger)

    CommentService.delete(db, comment.id, admin)
    with pytest.raises(NotFoundError):
        CommentService.get(db, comment.id)


def test_moderation_toggles_visibility(db, post, reader):
    comment = CommentService.create(db, post.id, "moderated", reader, status="PENDING")
    assert CommentService.list_for_post(db, post.id) == []

    ModerationService.set_status(db, comment.id, CommentStatus.APPROVED)
    assert [t.comment.id for t in CommentService.list_for_post(db, post.id)] == [comment.id]

    ModerationService.set_status(db, comment.id, "PENDING")
    assert CommentService.list_for_post(db, post.id) == []


def test_submit_checks_post_once(db, post, monkeypatch):
    calls = []
    get_post = CommentService.get_post

    def counting_get_post(db, post_id):
        calls.append(post_id)
        return get_post(db, post_id)

    monkeypatch.setattr(CommentService, "get_post", staticmethod(counting_get_post))

    comment = CommentService.submit(
        db, post.id, "  hello  ", author_email="new@x.com", author_name="New"
    )

    assert calls == [post.id]
    assert comment.content == "hello"


def test_submit_rejects_unknown_status_before_creating_identity(db, post):
    with pytest.raises(ValidationError):
        CommentService.submit(
            db, post.id, "hello", author_email="new@x.com", author_name="New", status="SPAM"
        )

    assert IdentityService.find_by_email(db, "new@x.com") is None


def test_list_for_user_without_page_size_returns_everything(db, post, reader):
    for i in range(3):
        CommentService.create(db, post.id, f"c{i}", reader)

    items, total = CommentService.list_for_user(db, reader.id)

    assert total == 3
    assert len(items) == 3
