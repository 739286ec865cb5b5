from datetime import datetime, timedelta, timezone

import pytest

from app import create_app
from practice.crypto import CredentialCipher, generate_key
from practice.store import PracticeStore


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def encryption_key():
    return generate_key()


@pytest.fixture
def cipher(encryption_key):
    return CredentialCipher(encryption_key)


@pytest.fixture
def store(cipher, clock):
    return PracticeStore(cipher, clock=clock)


@pytest.fixture
def app(tmp_path, store, encryption_key):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret-key-0123456789abcdef0123456789",
            "ENCRYPTION_KEY": encryption_key,
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
            "ADMIN_USERNAME": "admin",
            "ADMIN_PASSWORD": "admin123",
        },
        store=store,
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(client):
    response = client.post("/api/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


@pytest.fixture
def sample_client(client, auth_headers):
    response = client.post(
        "/api/clients",
        json={
            "fullName": "Ali Khan",
            "phone": "+923001234567",
            "email": "ali@example.com",
            "portalCredentials": {"fbr": {"username": "ali.fbr", "password": "s3cret"}},
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.get_json()
