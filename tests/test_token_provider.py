from datetime import timedelta

import pytest
from jose import jwt

from studytrack.errors import (
    ConfigurationError,
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
    TokenError,
)
from studytrack.services.auth import PasswordHasher, TokenProvider

from conftest import SECRET, FakeClock


@pytest.mark.parametrize("user_id", ["u1", "3f2b6a1e-0000-4000-8000-000000000001", "ünïcode"])
def test_issue_then_verify_returns_subject(tokens, user_id):
    assert tokens.verify(tokens.issue(user_id)) == user_id


def test_token_carries_subject_and_expiry(tokens, clock):
    claims = jwt.get_unverified_claims(tokens.issue("u1"))

    assert claims["sub"] == "u1"
    assert claims["exp"] == int((clock.now + timedelta(hours=1)).timestamp())


def test_token_expires_after_configured_lifetime(tokens, clock):
    token = tokens.issue("u1")
    assert tokens.verify(token) == "u1"

    clock.advance(hours=2)

    with pytest.raises(ExpiredTokenError):
        tokens.verify(token)


def test_token_still_valid_at_exact_expiry(tokens, clock):
    token = tokens.issue("u1")
    clock.advance(hours=1)
    assert tokens.verify(token) == "u1"


def test_foreign_secret_is_rejected(clock):
    foreign = TokenProvider("another-secret", clock=clock)
    ours = TokenProvider(SECRET, clock=clock)

    with pytest.raises(InvalidSignatureError):
        ours.verify(foreign.issue("u1"))


def test_tampered_payload_is_rejected(tokens):
    header, _, signature = tokens.issue("u1").split(".")
    forged_payload = jwt.encode({"sub": "admin", "exp": 9999999999}, "x").split(".")[1]

    with pytest.raises(InvalidSignatureError):
        tokens.verify(f"{header}.{forged_payload}.{signature}")


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c", "Bearer x"])
def test_garbage_is_malformed(tokens, token):
    with pytest.raises(MalformedTokenError):
        tokens.verify(token)


def test_token_without_expiry_is_malformed(tokens):
    token = jwt.encode({"sub": "u1"}, SECRET, algorithm="HS256")
    with pytest.raises(MalformedTokenError):
        tokens.verify(token)


def test_token_without_subject_is_malformed(tokens, clock):
    token = jwt.encode(
        {"exp": clock.now + timedelta(hours=1)}, SECRET, algorithm="HS256"
    )
    with pytest.raises(MalformedTokenError):
        tokens.verify(token)


def test_all_failures_share_a_base_class(tokens, clock):
    token = tokens.issue("u1")
    clock.advance(days=1)
    with pytest.raises(TokenError):
        tokens.verify(token)


def test_empty_secret_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        TokenProvider("")


def test_from_settings_uses_configured_lifetime(settings):
    clock = FakeClock()
    provider = TokenProvider.from_settings(settings, clock=clock)

    assert provider.expires_in == settings.jwt_expire_minutes * 60
    token = provider.issue("u1")
    clock.advance(minutes=settings.jwt_expire_minutes + 1)
    with pytest.raises(ExpiredTokenError):
        provider.verify(token)


def test_password_hasher_round_trip():
    hasher = PasswordHasher(rounds=4)
    password_hash = hasher.hash("Sup3r-secret")

    assert password_hash != "Sup3r-secret"
    assert hasher.verify("Sup3r-secret", password_hash)
    assert not hasher.verify("wrong", password_hash)
    assert not hasher.verify("Sup3r-secret", "")
