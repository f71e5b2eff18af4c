import os

# Must be set before `models` builds its storage singletons
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest

from api import create_app
from models import storage, cache
from models.user import User


class FakeRedis:
    """In-process stand-in for the handful of redis commands TokenCache uses."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def get(self, key):
        return self.data.get(key)

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                self.ttls.pop(key, None)
                removed += 1
        return removed

    def ping(self):
        return True


@pytest.fixture(scope="session")
def app():
    return create_app("test")


@pytest.fixture(autouse=True)
def _clean_state(app):
    fake = FakeRedis()
    original = cache.client
    cache.client = fake
    app.extensions["mail_outbox"] = []
    with app.app_context():
        storage.clear()
    yield fake
    cache.client = original
    with app.app_context():
        storage.clear()


@pytest.fixture
def redis_store(_clean_state):
    return _clean_state


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def outbox(app):
    return app.extensions["mail_outbox"]


USER = {"name": "Ada Lovelace", "email": "ada@example.com", "password": "Engines1843"}


def register(client, **overrides):
    payload = {**USER, **overrides}
    return client.post("/api/v1/auth/register", json=payload)


def get_user(app, email=USER["email"]):
    with app.app_context():
        return storage.find_one(User, email=email)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def registered(client):
    """Register the default user; returns its token pair."""
    resp = register(client)
    assert resp.status_code == 200
    return resp.get_json()


@pytest.fixture
def verified(app, client, registered):
    """Registered user whose email has been confirmed."""
    user = get_user(app)
    resp = client.get(f"/api/v1/auth/verifyemail?token={user.email_token}")
    assert resp.status_code == 200
    return registered
