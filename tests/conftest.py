from datetime import datetime, timedelta, timezone

import pytest
from flask_jwt_extended import create_access_token

from gramasathi import create_app
from gramasathi.services.auth_service import hash_password
from gramasathi.utils import cache, rate_limit, s3_helpers
from tests.fakes import FakeRedis, FakeStore, UploadRecorder

TEST_CONFIG = {
    "TESTING": True,
    "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
    "RATE_LIMIT_ENABLED": False,
    "SOCKETIO_ASYNC_MODE": "threading",
    "PROGRESS_CACHE_SECONDS": 30,
}


@pytest.fixture
def store(monkeypatch):
    fake = FakeStore()
    fake.install(monkeypatch)
    return fake


@pytest.fixture
def redis_fake(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(cache, "_client", fake)
    return fake


@pytest.fixture
def uploads(monkeypatch):
    recorder = UploadRecorder()
    monkeypatch.setattr(s3_helpers, "put_object", recorder.put_object)
    return recorder


@pytest.fixture
def app(store, redis_fake, uploads):
    rate_limit.reset()
    app = create_app(dict(TEST_CONFIG))
    yield app
    rate_limit.reset()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app, store):
    """Create a stored user and return (user_row, auth_headers)."""

    def _make(name="Asha", email=None, role="user", password="password123"):
        email = email or f"{name.lower()}@example.com"
        user = store.create_user(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
        )
        with app.app_context():
            token = create_access_token(identity=user["id"])
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def organizer(make_user):
    return make_user("Ravi")


@pytest.fixture
def donor(make_user):
    return make_user("Meena")


@pytest.fixture
def admin(make_user):
    return make_user("Admin", role="admin")


def campaign_payload(**overrides):
    end = datetime.now(timezone.utc) + timedelta(days=30)
    payload = {
        "title": "Winter blankets for elders",
        "description": "Warm blankets for the elders of Rampur",
        "category": "elderly",
        "targetAmount": 1000,
        "endDate": end.isoformat(),
        "beneficiaries": 40,
        "village": "Rampur",
        "district": "Varanasi",
        "state": "Uttar Pradesh",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_campaign(client, organizer):
    """POST a campaign as the organizer (or the given headers) and return its JSON."""

    def _create(headers=None, **overrides):
        resp = client.post(
            "/api/campaigns",
            json=campaign_payload(**overrides),
            headers=headers or organizer[1],
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _create
