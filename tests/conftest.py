"""
Test configuration for the Talent Portal backend.

The app runs against an in-memory mongomock collection and test settings
(cheap bcrypt cost, fixed JWT secret, generous rate limits) injected via
FastAPI dependency overrides, so no MongoDB server is needed.
"""
import copy

import mongomock
import pytest
from fastapi.testclient import TestClient

from talent_portal.core.config import Settings, get_settings
from talent_portal.core.rate_limit import RateLimiter
from talent_portal.db.mongodb import ensure_user_indexes, get_users_collection
from talent_portal.main import app
from talent_portal.services.user_service import CredentialStore, build_pwd_context

VALID_REGISTRATION = {
    "email": "a@b.com",
    "password": "Abcd123!",
    "designation": "Mr",
    "firstName": "A",
    "lastName": "B",
    "country": "India",
    "gender": "Male",
    "dob": "1990-05-15",
    "totalExperience": 5.5,
    "currentCTC": 1200000,
    "expectedCTC": 1500000,
    "noticePeriod": "Yes",
    "noticePeriodDays": 30,
}


def registration(**overrides) -> dict:
    """A valid registration body with ``overrides`` applied (None removes a key)."""
    body = copy.deepcopy(VALID_REGISTRATION)
    for key, value in overrides.items():
        if value is None:
            body.pop(key, None)
        else:
            body[key] = value
    return body


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        jwt_secret_key="test-secret",
        jwt_expire_minutes=60,
        bcrypt_rounds=4,
        register_rate_limit=1000,
        login_rate_limit=1000,
        environment="test",
    )


@pytest.fixture
def users_collection():
    collection = mongomock.MongoClient().talent_portal_test.users
    ensure_user_indexes(collection)
    return collection


@pytest.fixture
def store(users_collection) -> CredentialStore:
    return CredentialStore(users_collection, build_pwd_context(rounds=4))


@pytest.fixture
def client(users_collection, test_settings):
    """TestClient wired to the in-memory collection; no lifespan, so no real MongoDB."""
    app.dependency_overrides[get_users_collection] = lambda: users_collection
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.state.rate_limiter = RateLimiter()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def registered(client):
    """Register the default user; returns (response body, auth headers)."""
    response = client.post("/api/auth/register", json=registration())
    assert response.status_code == 201, response.text
    body = response.json()
    return body, {"Authorization": f"Bearer {body['token']}"}
