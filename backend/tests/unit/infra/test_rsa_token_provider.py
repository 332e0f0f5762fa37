"""Tests for the RS256 access token issuer."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from socialapp.core.keys import SigningKeyPair
from socialapp.infra.jwt.rsa_token_provider import RSATokenProvider
from socialapp.services._shared.errors import InvalidAccessTokenError
from socialapp.services.identity.dto import AccountIdentity

IDENTITY = AccountIdentity(account_id=42, name="ada", role="MEMBER", authorities=("ROLE_MEMBER",))


@pytest.fixture()
def provider(key_pair) -> RSATokenProvider:
    return RSATokenProvider(key_pair=key_pair, issuer="self")


def test_issue_produces_expected_claims(provider, key_pair):
    token = provider.issue(IDENTITY)

    claims = jwt.decode(token, key_pair.public_key, algorithms=["RS256"], issuer="self")
    assert claims["sub"] == "42"
    assert claims["iss"] == "self"
    assert claims["name"] == "ada"
    assert claims["scope"] == ["ROLE_MEMBER"]
    assert claims["exp"] - claims["iat"] == 15 * 60


def test_header_is_rs256_with_kid(provider, key_pair):
    header = jwt.get_unverified_header(provider.issue(IDENTITY))
    assert header["alg"] == "RS256"
    assert header["kid"] == key_pair.key_id


def test_ttl_is_configurable(key_pair):
    provider = RSATokenProvider(key_pair=key_pair, access_ttl=timedelta(minutes=1))
    claims = provider.decode(provider.issue(IDENTITY))
    assert claims["exp"] - claims["iat"] == 60


def test_decode_round_trip(provider):
    claims = provider.decode(provider.issue(IDENTITY))
    assert claims["sub"] == "42"


def test_expired_token_is_rejected(key_pair):
    past = datetime.now(UTC) - timedelta(hours=1)
    provider = RSATokenProvider(key_pair=key_pair, clock=lambda: past)
    token = provider.issue(IDENTITY)

    with pytest.raises(InvalidAccessTokenError) as info:
        provider.decode(token)
    assert info.value.reason == "expired"


def test_token_at_exact_expiry_is_rejected(key_pair):
    # exp == now counts as expired
    now = datetime.now(UTC)
    issued_at = now - timedelta(minutes=15)
    provider = RSATokenProvider(
        key_pair=key_pair, access_ttl=timedelta(minutes=15), clock=lambda: issued_at
    )
    with pytest.raises(InvalidAccessTokenError):
        provider.decode(provider.issue(IDENTITY))


def test_foreign_key_is_rejected(provider):
    stranger = RSATokenProvider(key_pair=SigningKeyPair.generate())
    with pytest.raises(InvalidAccessTokenError) as info:
        provider.decode(stranger.issue(IDENTITY))
    assert info.value.reason == "invalid"


def test_foreign_issuer_is_rejected(key_pair, provider):
    other = RSATokenProvider(key_pair=key_pair, issuer="someone-else")
    with pytest.raises(InvalidAccessTokenError):
        provider.decode(other.issue(IDENTITY))


def test_tampered_token_is_rejected(provider):
    header, payload, signature = provider.issue(IDENTITY).split(".")
    forged = ".".join([header, payload, signature[:-4] + "AAAA"])
    with pytest.raises(InvalidAccessTokenError):
        provider.decode(forged)


def test_hs256_downgrade_is_rejected(provider, key_pair):
    forged = jwt.encode(
        {"sub": "42", "iss": "self", "iat": 0, "exp": 4102444800},
        "shared-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidAccessTokenError):
        provider.decode(forged)
