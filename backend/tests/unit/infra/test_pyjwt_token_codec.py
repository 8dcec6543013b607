"""Unit tests for :class:`PyJWTTokenCodec`."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from authcore.core.secrets import AuthSettings
from authcore.infra.jwt import PyJWTTokenCodec
from authcore.services._shared.ports import TokenKind, TokenVerificationError
from tests.helpers.utils import ACCESS_SECRET, REFRESH_SECRET

CLAIMS = {"sub": "user-1", "email": "a@example.com", "role": "USER"}


def test_sign_embeds_jti_type_and_window(codec, auth_settings):
    signed = codec.sign(CLAIMS, TokenKind.REFRESH)

    payload = jwt.decode(signed.value, REFRESH_SECRET, algorithms=["HS256"])

    assert payload["jti"] == signed.jti
    assert payload["type"] == "refresh"
    assert payload["iat"] == int(signed.issued_at.timestamp())
    assert signed.expires_at - signed.issued_at == auth_settings.refresh_ttl
    assert signed.issued_at.microsecond == 0


def test_each_token_is_unique(codec):
    first = codec.sign(CLAIMS, TokenKind.ACCESS)
    second = codec.sign(CLAIMS, TokenKind.ACCESS)

    assert first.jti != second.jti
    assert first.value != second.value


def test_kinds_use_their_own_secret(codec):
    access = codec.sign(CLAIMS, TokenKind.ACCESS).value

    jwt.decode(access, ACCESS_SECRET, algorithms=["HS256"])
    with pytest.raises(jwt.InvalidSignatureError):
        jwt.decode(access, REFRESH_SECRET, algorithms=["HS256"])


@pytest.mark.parametrize(
    ("signed_as", "verified_as"),
    [(TokenKind.ACCESS, TokenKind.REFRESH), (TokenKind.REFRESH, TokenKind.ACCESS)],
)
def test_cross_kind_verification_fails(codec, signed_as, verified_as):
    token = codec.sign(CLAIMS, signed_as).value
    with pytest.raises(TokenVerificationError):
        codec.verify(token, verified_as)


def test_same_secret_still_checks_type():
    shared = "shared-signing-key-aaaaaaaaaaaaaaaaaaaaaaaa"
    codec = PyJWTTokenCodec(AuthSettings(access_secret=shared, refresh_secret=shared))

    token = codec.sign(CLAIMS, TokenKind.ACCESS).value

    with pytest.raises(TokenVerificationError, match="Wrong token type"):
        codec.verify(token, TokenKind.REFRESH)


def test_expired_token_is_rejected(auth_settings):
    past = datetime.now(UTC) - auth_settings.access_ttl - timedelta(seconds=5)
    stale = PyJWTTokenCodec(auth_settings, clock=lambda: past)

    token = stale.sign(CLAIMS, TokenKind.ACCESS).value

    with pytest.raises(TokenVerificationError, match="ExpiredSignatureError"):
        stale.verify(token, TokenKind.ACCESS)


def test_missing_required_claim_is_rejected(codec):
    now = int(datetime.now(UTC).timestamp())
    token = jwt.encode(
        {"sub": "user-1", "iat": now, "exp": now + 60, "type": "access"},
        ACCESS_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenVerificationError):
        codec.verify(token, TokenKind.ACCESS)


def test_unsigned_token_is_rejected(codec):
    token = jwt.encode({**CLAIMS, "type": "access"}, None, algorithm="none")
    with pytest.raises(TokenVerificationError):
        codec.verify(token, TokenKind.ACCESS)


def test_verify_returns_claims(codec):
    token = codec.sign(CLAIMS, TokenKind.ACCESS).value
    payload = codec.verify(token, TokenKind.ACCESS)
    assert {k: payload[k] for k in CLAIMS} == CLAIMS
