"""Tests for signing key loading and validation."""

from __future__ import annotations

import base64

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from socialapp.core.keys import KeyMaterialError, SigningKeyPair, load_key_pair


@pytest.fixture(scope="module")
def other_pair() -> SigningKeyPair:
    return SigningKeyPair.generate()


class TestSigningKeyPair:
    def test_generate_defaults_to_2048_bits(self, key_pair):
        assert key_pair.key_size == 2048
        assert len(key_pair.key_id) == 16

    def test_round_trips_through_base64_der(self, key_pair):
        private_b64, public_b64 = key_pair.encode_der_b64()
        loaded = SigningKeyPair.from_encoded(private_b64, public_b64)
        assert loaded.key_id == key_pair.key_id

    def test_accepts_pem(self, key_pair):
        loaded = SigningKeyPair.from_encoded(
            key_pair.private_pem.decode(), key_pair.public_pem.decode()
        )
        assert loaded.key_id == key_pair.key_id

    def test_rejects_mismatched_halves(self, key_pair, other_pair):
        with pytest.raises(KeyMaterialError):
            SigningKeyPair(private_key=key_pair.private_key, public_key=other_pair.public_key)

    def test_rejects_weak_keys(self):
        weak = rsa.generate_private_key(public_exponent=65537, key_size=1024)
        with pytest.raises(KeyMaterialError):
            SigningKeyPair(private_key=weak, public_key=weak.public_key())
        with pytest.raises(KeyMaterialError):
            SigningKeyPair.generate(key_size=1024)

    def test_rejects_garbage(self, key_pair):
        _, public_b64 = key_pair.encode_der_b64()
        with pytest.raises(KeyMaterialError):
            SigningKeyPair.from_encoded("not a key", public_b64)
        with pytest.raises(KeyMaterialError):
            SigningKeyPair.from_encoded(base64.b64encode(b"junk").decode(), public_b64)

    def test_repr_hides_key_material(self, key_pair):
        text = repr(key_pair)
        assert key_pair.key_id in text
        assert "PRIVATE" not in text


class TestLoadKeyPair:
    def test_missing_keys_are_fatal(self):
        with pytest.raises(KeyMaterialError):
            load_key_pair({"JWT_PRIVATE_KEY": None, "JWT_PUBLIC_KEY": None})

    def test_half_configured_is_fatal_even_with_ephemeral(self, key_pair):
        private_b64, _ = key_pair.encode_der_b64()
        with pytest.raises(KeyMaterialError):
            load_key_pair({"JWT_PRIVATE_KEY": private_b64, "JWT_EPHEMERAL_KEYS": True})

    def test_ephemeral_generates_when_unset(self):
        pair = load_key_pair({"JWT_EPHEMERAL_KEYS": True})
        assert pair.key_size >= 2048

    def test_loads_configured_pair(self, key_pair):
        private_b64, public_b64 = key_pair.encode_der_b64()
        pair = load_key_pair({"JWT_PRIVATE_KEY": private_b64, "JWT_PUBLIC_KEY": public_b64})
        assert pair.key_id == key_pair.key_id
