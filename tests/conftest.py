from datetime import datetime, timezone

import pytest
from sqlalchemy import delete

from api import create_app
from models.db_storage import DBStorage
from models.refresh_token import RefreshToken
from models.user import User
from services.credentials import CredentialService
from services.refresh_tokens import RefreshTokenManager
from utils.security import AccessTokenIssuer, PasswordHasher

SECRET = "testing-secret-key-with-enough-length-for-hs256"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now = self.now + delta


def tokens_for(storage, user_id):
    """Refresh token rows owned by a user, oldest first."""
    session = storage.get_session()
    rows = session.query(RefreshToken).filter(RefreshToken.user_id == user_id).order_by(RefreshToken.id).all()
    session.commit()
    return rows


def remove_user(storage, user_id):
    """Delete a user row directly; the database cascades to its tokens."""
    session = storage.get_session()
    session.execute(delete(User).where(User.id == user_id))
    session.commit()


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    storage = app.extensions["credential_service"].storage
    storage.close()
    storage.drop_all()
    storage.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage():
    storage = DBStorage("sqlite://")
    storage.reload()
    yield storage
    storage.close()
    storage.drop_all()
    storage.dispose()


@pytest.fixture(scope="session")
def password_hasher():
    return PasswordHasher()


@pytest.fixture
def utc_clock():
    return FrozenClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store_clock():
    # naive UTC, the storage convention
    return FrozenClock(datetime(2026, 1, 1, 12, 0))


@pytest.fixture
def issuer():
    return AccessTokenIssuer(SECRET)


@pytest.fixture
def service(storage, issuer, password_hasher):
    return CredentialService(storage, issuer, password_hasher=password_hasher)


@pytest.fixture
def clocked_service(storage, password_hasher, store_clock):
    manager = RefreshTokenManager(storage, clock=store_clock)
    return CredentialService(
        storage,
        AccessTokenIssuer(SECRET),
        password_hasher=password_hasher,
        refresh_tokens=manager,
    )


@pytest.fixture
def registered(client):
    response = client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "p@ss1234", "confirmPassword": "p@ss1234"},
    )
    assert response.status_code == 200, response.get_data(as_text=True)
    return response.get_json()
