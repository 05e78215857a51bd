"""
Unit tests for RS256 signature verification against JWKs.
"""

import hashlib

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from idtoken_shared.errors import DecodeError
from idtoken_shared.test_helpers import b64url_encode
from idtoken_verifier.certs.models import JsonWebKey
from idtoken_verifier.validation.signature import (
    decode_exponent,
    decode_modulus,
    public_key_from_jwk,
    verify_signature,
)


MESSAGE = b"eyJhbGciOiJSUzI1NiJ9.eyJzdWIiOiIxIn0"


class TestVerifySignature:
    """Test cases for verify_signature."""

    @pytest.fixture
    def jwk(self, signing_keys):
        return JsonWebKey(**signing_keys[0].to_jwk())

    @pytest.fixture
    def other_jwk(self, signing_keys):
        return JsonWebKey(**signing_keys[1].to_jwk())

    @pytest.fixture
    def signature(self, signing_keys):
        """PKCS#1 v1.5 signature over MESSAGE with the first key."""
        return signing_keys[0].private_key.sign(MESSAGE, padding.PKCS1v15(), hashes.SHA256())

    @pytest.fixture
    def digest(self):
        return hashlib.sha256(MESSAGE).digest()

    def test_valid_signature(self, jwk, digest, signature):
        assert verify_signature(jwk, digest, signature) is True

    def test_wrong_key(self, other_jwk, digest, signature):
        assert verify_signature(other_jwk, digest, signature) is False

    def test_corrupted_signature(self, jwk, digest, signature):
        """Test a single flipped bit invalidates the signature."""
        corrupted = bytes([signature[0] ^ 0x01]) + signature[1:]

        assert verify_signature(jwk, digest, corrupted) is False

    def test_wrong_digest(self, jwk, signature):
        assert verify_signature(jwk, hashlib.sha256(b"other").digest(), signature) is False

    def test_digest_of_wrong_size(self, jwk, signature):
        """Test a digest that is not SHA-256 sized is rejected."""
        assert verify_signature(jwk, hashlib.sha1(MESSAGE).digest(), signature) is False

    def test_empty_signature(self, jwk, digest):
        assert verify_signature(jwk, digest, b"") is False

    def test_invalid_key_material(self, jwk, digest, signature):
        """Test unusable key numbers fail closed."""
        broken = jwk.model_copy(update={"n": "!!!"})
        even_exponent = jwk.model_copy(update={"e": b64url_encode(b"\x02")})

        assert verify_signature(broken, digest, signature) is False
        assert verify_signature(even_exponent, digest, signature) is False

    def test_exponent_with_leading_zero_bytes(self, jwk, digest, signature):
        """Test a wider encoding of the same exponent still verifies."""
        widened = jwk.model_copy(update={"e": b64url_encode(b"\x00\x01\x00\x01")})

        assert verify_signature(widened, digest, signature) is True


class TestKeyNumbers:
    """Test cases for decoding JWK integers."""

    def test_common_exponent(self):
        assert decode_exponent("AQAB") == 65537

    def test_single_byte_exponent(self):
        assert decode_exponent(b64url_encode(b"\x03")) == 3

    def test_eight_byte_exponent(self):
        assert decode_exponent(b64url_encode(b"\x01" + b"\x00" * 7)) == 1 << 56

    @pytest.mark.parametrize("raw", [b"", b"\x01" * 9])
    def test_unsupported_exponent_size(self, raw):
        with pytest.raises(DecodeError):
            decode_exponent(b64url_encode(raw))

    def test_modulus_matches_key(self, signing_keys):
        """Test the modulus round-trips at full precision."""
        numbers = signing_keys[0].private_key.public_key().public_numbers()
        jwk = JsonWebKey(**signing_keys[0].to_jwk())

        assert decode_modulus(jwk.n) == numbers.n
        assert public_key_from_jwk(jwk).public_numbers() == numbers
