# tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from taskmanager.config import Settings
from taskmanager.main import create_app
from taskmanager.models import User
from taskmanager.security import TokenCodec, hash_password

PASSWORD = "Abc12345!"


@pytest.fixture()
def settings() -> Settings:
    """
    Settings built directly instead of from the environment, so tests never
    depend on a local .env file. In-memory SQLite keeps every test isolated.
    """
    return Settings(secret_key="test-secret", database_url="sqlite://")


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def tokens(app) -> TokenCodec:
    return app.state.tokens


def make_user(db, email="a@b.com", full_name="A") -> User:
    user = User(email=email, full_name=full_name, password_hash=hash_password(PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def alice(db) -> User:
    return make_user(db, "alice@example.com", "Alice")


@pytest.fixture()
def bob(db) -> User:
    return make_user(db, "bob@example.com", "Bob")


@pytest.fixture()
def auth_headers(tokens):
    def build(user: User) -> dict:
        return {"Authorization": f"Bearer {tokens.issue(user.id)}"}
    return build
