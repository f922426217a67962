import pytest

from db import engine, get_session
from main import create_app
from services.tenant_context import Actor, default_actor
from tests.factories import ALL_FACTORIES


@pytest.fixture
def app():
    """Application on a fresh in-memory database."""
    app = create_app("sqlite://", testing=True)
    yield app
    engine.dispose()


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def session(app):
    """
    A session bound to the test database, with the factories attached.

    The in-memory database is a single shared connection: commit before
    making requests through ``client``.
    """
    s = get_session()
    for f in ALL_FACTORIES:
        f._meta.sqlalchemy_session = s
    yield s
    s.rollback()
    s.close()
    for f in ALL_FACTORIES:
        f._meta.sqlalchemy_session = None


@pytest.fixture
def actor():
    return default_actor()


@pytest.fixture
def other_actor():
    return Actor(tenant_id="tenant-2", user_id="user-9")
