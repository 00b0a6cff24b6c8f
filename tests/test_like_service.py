import pytest

from blog_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from blog_api.models import Like, User
from blog_api.services.identity_service import IdentityService
from blog_api.services.like_service import LikeService


def test_toggle_like_then_unlike(db, post):
    result = LikeService.toggle_for_identity(db, post.id, user_email="a@x.com", user_name="A")
    assert result.action == "liked"
    assert result.likes_count == 1
    assert result.is_liked

    result = LikeService.toggle_for_identity(db, post.id, user_email="a@x.com", user_name="A")
    assert result.action == "unliked"
    assert result.likes_count == 0
    assert not result.is_liked


def test_toggle_counts_each_user_once(db, post, reader):
    LikeService.toggle(db, post.id, reader)
    LikeService.toggle_for_identity(db, post.id, user_email="b@x.com", user_name="B")

    assert LikeService.get_count(db, post.id) == 2
    assert LikeService.is_liked(db, post.id, reader.id)


@pytest.mark.parametrize("calls,liked", [(1, True), (2, False), (5, True), (6, False)])
def test_toggle_final_state_follows_parity(db, post, reader, calls, liked):
    for _ in range(calls):
        LikeService.toggle(db, post.id, reader)

    assert LikeService.is_liked(db, post.id, reader.id) is liked
    assert db.query(Like).filter(Like.user_id == reader.id).count() == (1 if liked else 0)


def test_toggle_replays_when_concurrent_like_wins(db, database, post, reader, monkeypatch):
    original_insert = LikeService._insert
    raced = []

    def racing_insert(session, post_id, user_id):
        if not raced:
            raced.append(True)
            other = database.session()
            other.add(Like(post_id=post_id, user_id=user_id))
            other.commit()
            other.close()
        return original_insert(session, post_id, user_id)

    monkeypatch.setattr(LikeService, "_insert", staticmethod(racing_insert))

    result = LikeService.toggle(db, post.id, reader)

    # The concurrent request liked, this one unliked: two toggles, even parity
    assert result.action == "unliked"
    assert result.likes_count == 0
    assert db.query(Like).count() == 0


def test_toggle_gives_up_after_retries(db, post, reader, monkeypatch):
    monkeypatch.setattr(LikeService, "_delete_existing", staticmethod(lambda *args: 0))
    monkeypatch.setattr(LikeService, "_insert", staticmethod(lambda *args: False))

    with pytest.raises(ConflictError):
        LikeService.toggle(db, post.id, reader, max_retries=2)


def test_unique_constraint_rejects_duplicate_rows(db, post, reader):
    assert LikeService._insert(db, post.id, reader.id)
    assert not LikeService._insert(db, post.id, reader.id)
    assert LikeService.get_count(db, post.id) == 1


def test_like_is_idempotent(db, post, reader):
    assert LikeService.like(db, post.id, reader).likes_count == 1
    assert LikeService.like(db, post.id, reader).likes_count == 1

    assert LikeService.unlike(db, post.id, reader).likes_count == 0
    assert LikeService.unlike(db, post.id, reader).likes_count == 0


def test_toggle_missing_post_creates_nothing(db):
    with pytest.raises(NotFoundError):
        LikeService.toggle_for_identity(db, 999, user_email="a@x.com", user_name="A")

    assert db.query(User).count() == 0


def test_toggle_requires_identity(db, post):
    with pytest.raises(ValidationError):
        LikeService.toggle_for_identity(db, post.id, user_email=None, user_name="A")


def test_list_for_user(db, post, other_post, reader):
    LikeService.toggle(db, post.id, reader)
    LikeService.toggle(db, other_post.id, reader)

    items, total = LikeService.list_for_user(db, reader.id)

    assert total == 2
    assert [like.post.slug for like in items] == ["second-post", "hello-world"]


def test_get_count_has_no_side_effects(db, post):
    assert LikeService.get_count(db, post.id) == 0
    assert IdentityService.find_by_email(db, "a@x.com") is None
