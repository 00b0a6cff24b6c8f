import pytest
from fastapi.testclient import TestClient

from blog_api.core.config import Settings
from blog_api.core.database import Database
from blog_api.core.security import create_access_token
from blog_api.main import create_app
from blog_api.models import Post, User, UserRole


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        AUTO_CREATE_TABLES=False,
        JWT_SECRET_KEY="test-secret",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def database(settings):
    database = Database(settings.DATABASE_URL)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(settings, database):
    return TestClient(create_app(settings, database))


def make_post(db, slug="hello-world", title="Hello World"):
    post = Post(title=title, slug=slug)
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def make_user(db, email, name, role=UserRole.USER):
    user = User(email=email, name=name, role=role.value, password="hashed")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def post(db):
    return make_post(db)


@pytest.fixture
def other_post(db):
    return make_post(db, slug="second-post", title="Second Post")


@pytest.fixture
def reader(db):
    return make_user(db, "reader@x.com", "Reader")


@pytest.fixture
def admin(db):
    return make_user(db, "admin@x.com", "Admin", role=UserRole.ADMIN)


@pytest.fixture
def auth_headers(settings):
    def _headers(user):
        token = create_access_token(user.id, settings=settings)
        return {"Authorization": f"Bearer {token}"}
    return _headers
