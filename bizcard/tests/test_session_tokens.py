from __future__ import annotations

import re
from datetime import timedelta

import pytest
from jose import jwt

from bizcard.application.services.session_tokens import JwtSessionTokenService
from bizcard.domain.users.exceptions import (
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
)
from bizcard.tests.fakes import TEST_SECRET, MutableClock

_URL_SAFE_JWT = re.compile(r"^[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+$")


def _flip_signature_char(token: str) -> str:
    header, payload, signature = token.split(".")
    idx = len(signature) // 2
    replacement = "A" if signature[idx] != "A" else "B"
    return ".".join([header, payload, signature[:idx] + replacement + signature[idx + 1 :]])


def test_issue_then_verify(token_service: JwtSessionTokenService, clock: MutableClock) -> None:
    token = token_service.issue("a@x.com")
    identity = token_service.verify(token)

    assert identity.user_id == "a@x.com"
    assert identity.issued_at == clock.now
    assert identity.expires_at - identity.issued_at == timedelta(hours=1)


def test_token_is_compact_and_url_safe(token_service: JwtSessionTokenService) -> None:
    assert _URL_SAFE_JWT.match(token_service.issue("a@x.com"))


def test_token_valid_until_just_before_expiry(
    token_service: JwtSessionTokenService, clock: MutableClock
) -> None:
    token = token_service.issue("a@x.com")
    clock.advance(timedelta(minutes=59, seconds=59))

    assert token_service.verify(token).user_id == "a@x.com"


@pytest.mark.parametrize("elapsed", [timedelta(hours=1), timedelta(hours=1, seconds=1), timedelta(days=2)])
def test_token_expires_after_one_hour(
    token_service: JwtSessionTokenService, clock: MutableClock, elapsed: timedelta
) -> None:
    token = token_service.issue("a@x.com")
    clock.advance(elapsed)

    with pytest.raises(TokenExpiredError):
        token_service.verify(token)


def test_tampered_signature_is_invalid(token_service: JwtSessionTokenService) -> None:
    token = token_service.issue("a@x.com")

    with pytest.raises(TokenInvalidError):
        token_service.verify(_flip_signature_char(token))


def test_tampered_payload_is_invalid(token_service: JwtSessionTokenService, clock: MutableClock) -> None:
    token = token_service.issue("a@x.com")
    forged = jwt.encode(
        {"sub": "admin@x.com", "iat": int(clock.now.timestamp()), "exp": int(clock.now.timestamp()) + 60},
        "another-secret",
        algorithm="HS256",
    )
    header, _, signature = token.split(".")
    spliced = ".".join([header, forged.split(".")[1], signature])

    with pytest.raises(TokenInvalidError):
        token_service.verify(spliced)


@pytest.mark.parametrize("garbage", ["garbage", "", "a.b.c", "..."])
def test_malformed_token_is_invalid(token_service: JwtSessionTokenService, garbage: str) -> None:
    with pytest.raises(TokenInvalidError):
        token_service.verify(garbage)


def test_token_signed_with_other_secret_is_invalid(clock: MutableClock) -> None:
    other = JwtSessionTokenService("some-other-secret", clock=clock)
    ours = JwtSessionTokenService(TEST_SECRET, clock=clock)

    with pytest.raises(TokenInvalidError):
        ours.verify(other.issue("a@x.com"))


def test_token_with_unexpected_algorithm_is_invalid(clock: MutableClock) -> None:
    hs512 = JwtSessionTokenService(TEST_SECRET, algorithm="HS512", clock=clock)
    hs256 = JwtSessionTokenService(TEST_SECRET, clock=clock)

    with pytest.raises(TokenInvalidError):
        hs256.verify(hs512.issue("a@x.com"))


def test_token_without_subject_is_invalid(
    token_service: JwtSessionTokenService, clock: MutableClock
) -> None:
    now = int(clock.now.timestamp())
    token = jwt.encode({"iat": now, "exp": now + 3600}, TEST_SECRET, algorithm="HS256")

    with pytest.raises(TokenInvalidError):
        token_service.verify(token)


def test_token_without_expiry_is_invalid(
    token_service: JwtSessionTokenService, clock: MutableClock
) -> None:
    token = jwt.encode(
        {"sub": "a@x.com", "iat": int(clock.now.timestamp())}, TEST_SECRET, algorithm="HS256"
    )

    with pytest.raises(TokenInvalidError):
        token_service.verify(token)


def test_expiry_and_invalid_share_one_error_kind() -> None:
    assert issubclass(TokenExpiredError, TokenError)
    assert issubclass(TokenInvalidError, TokenError)
    assert TokenExpiredError().code != TokenInvalidError().code


def test_custom_ttl(clock: MutableClock) -> None:
    service = JwtSessionTokenService(TEST_SECRET, ttl=timedelta(minutes=5), clock=clock)
    token = service.issue("a@x.com")

    clock.advance(timedelta(minutes=5))
    with pytest.raises(TokenExpiredError):
        service.verify(token)


@pytest.mark.parametrize(
    "kwargs",
    [{"secret": ""}, {"secret": "s", "ttl": timedelta(0)}],
)
def test_rejects_bad_construction(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        JwtSessionTokenService(**kwargs)
