import pytest
from sqlalchemy import event

from blog_api.core.exceptions import ValidationError
from blog_api.models import User
from blog_api.services.identity_service import IdentityService


def test_resolve_creates_anonymous_user(db):
    user = IdentityService.resolve(db, "bob@x.com", "Bob")

    assert user.id is not None
    assert user.email == "bob@x.com"
    assert user.name == "Bob"
    assert user.role == "USER"
    assert user.password is None


def test_resolve_returns_same_user_for_same_email(db):
    first = IdentityService.resolve(db, "bob@x.com", "Bob")
    second = IdentityService.resolve(db, "  BOB@x.com ", "Robert")

    assert second.id == first.id
    # Existing display name is kept
    assert second.name == "Bob"
    assert db.query(User).count() == 1


def test_resolve_returns_registered_user(db, reader):
    user = IdentityService.resolve(db, "reader@x.com", "Someone Else")

    assert user.id == reader.id
    assert user.password == "hashed"


@pytest.mark.parametrize("email,name,field", [
    ("", "Bob", "email"),
    (None, "Bob", "email"),
    ("bob@x.com", "", "name"),
    ("bob@x.com", "   ", "name"),
])
def test_resolve_requires_email_and_name(db, email, name, field):
    with pytest.raises(ValidationError) as exc_info:
        IdentityService.resolve(db, email, name)

    assert exc_info.value.field == field
    assert db.query(User).count() == 0


def test_resolve_reuses_row_created_concurrently(db, database):
    def create_same_email_elsewhere(session, flush_context, instances):
        other = database.session()
        other.add(User(email="race@x.com", name="Winner"))
        other.commit()
        other.close()

    event.listen(db, "before_flush", create_same_email_elsewhere, once=True)

    user = IdentityService.resolve(db, "race@x.com", "Loser")

    assert user.name == "Winner"
    assert db.query(User).filter(User.email == "race@x.com").count() == 1


def test_resolve_request_identity_prefers_authenticated_user(db, reader):
    user = IdentityService.resolve_request_identity(db, reader, "other@x.com", "Other")

    assert user is reader
    assert IdentityService.find_by_email(db, "other@x.com") is None
