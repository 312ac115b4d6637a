"""
Unit tests for token issuance and verification with a controllable clock.
"""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from talent_portal.core.exceptions import AuthenticationFailed
from talent_portal.schemas.schemas import RegisterRequest
from talent_portal.services.session_service import SessionIssuer

from tests.conftest import registration

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(T0)


@pytest.fixture
def issuer(test_settings, store, clock):
    return SessionIssuer(test_settings, store, clock=clock)


@pytest.fixture
def user(store):
    request = RegisterRequest.model_validate(registration())
    return store.register(request.to_document(), request.password)


def test_issue_embeds_identity_and_window(issuer, user, test_settings):
    token = issuer.issue(user)
    claims = jwt.get_unverified_claims(token)

    assert claims["sub"] == str(user["_id"])
    assert claims["email"] == "a@b.com"
    assert claims["iat"] == int(T0.timestamp())
    assert claims["exp"] - claims["iat"] == test_settings.jwt_expire_minutes * 60


@pytest.mark.parametrize("offset", [timedelta(0), timedelta(minutes=30), timedelta(minutes=59, seconds=59)])
def test_token_valid_inside_window(issuer, user, clock, offset):
    token = issuer.issue(user)
    clock.now = T0 + offset

    assert issuer.verify(token)["_id"] == user["_id"]


@pytest.mark.parametrize("offset", [timedelta(minutes=60), timedelta(days=2)])
def test_token_rejected_at_and_after_expiry(issuer, user, clock, offset):
    token = issuer.issue(user)
    clock.now = T0 + offset

    assert issuer.decode(token) is None
    with pytest.raises(AuthenticationFailed):
        issuer.verify(token)


def test_token_for_removed_user_rejected_before_expiry(issuer, user, users_collection):
    token = issuer.issue(user)
    users_collection.delete_one({"_id": user["_id"]})

    assert issuer.decode(token) is not None
    with pytest.raises(AuthenticationFailed):
        issuer.verify(token)


def test_tampered_token_rejected(issuer, user):
    token = issuer.issue(user)
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    with pytest.raises(AuthenticationFailed):
        issuer.verify(tampered)


def test_token_signed_with_other_key_rejected(issuer, user, test_settings, store, clock):
    other = SessionIssuer(
        test_settings.model_copy(update={"jwt_secret_key": "someone-else"}), store, clock=clock
    )
    with pytest.raises(AuthenticationFailed):
        issuer.verify(other.issue(user))


@pytest.mark.parametrize("token", ["", "abc", "a.b.c"])
def test_malformed_tokens_rejected(issuer, token):
    with pytest.raises(AuthenticationFailed):
        issuer.verify(token)


def test_failures_share_one_message(issuer, user, clock):
    token = issuer.issue(user)

    with pytest.raises(AuthenticationFailed) as malformed:
        issuer.verify("garbage")
    clock.now = T0 + timedelta(days=1)
    with pytest.raises(AuthenticationFailed) as expired:
        issuer.verify(token)

    assert malformed.value.message == expired.value.message == "Token is not valid."


def test_token_without_subject_rejected(issuer, test_settings):
    token = jwt.encode(
        {"exp": int((T0 + timedelta(hours=1)).timestamp())},
        test_settings.jwt_secret_key,
        algorithm=test_settings.jwt_algorithm,
    )
    assert issuer.decode(token) is None


def test_expiry_keeps_sub_second_issue_time(issuer, user, clock, test_settings):
    issued = T0 + timedelta(milliseconds=900)
    lifetime = timedelta(minutes=test_settings.jwt_expire_minutes)
    clock.now = issued
    token = issuer.issue(user)

    clock.now = issued + lifetime - timedelta(milliseconds=500)
    assert issuer.decode(token) is not None

    clock.now = issued + lifetime - timedelta(microseconds=1)
    assert issuer.decode(token) is not None

    clock.now = issued + lifetime
    assert issuer.decode(token) is None
