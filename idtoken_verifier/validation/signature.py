"""
RSASSA-PKCS1-v1_5 / SHA-256 signature verification against a JWK.
"""

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from idtoken_shared.errors import DecodeError
from ..certs.models import JsonWebKey
from .codec import b64url_decode


# Exponents are widened to a 64-bit big-endian integer.
EXPONENT_WIDTH = 8


def decode_modulus(value: str) -> int:
    """Unsigned big-endian integer of arbitrary size."""
    return int.from_bytes(b64url_decode(value), "big")


def decode_exponent(value: str) -> int:
    raw = b64url_decode(value)
    if not raw or len(raw) > EXPONENT_WIDTH:
        raise DecodeError("Unsupported public exponent size", details={"bytes": len(raw)})
    return int.from_bytes(raw.rjust(EXPONENT_WIDTH, b"\x00"), "big")


def public_key_from_jwk(key: JsonWebKey) -> rsa.RSAPublicKey:
    """Rebuild an RSA public key from the JWK modulus and exponent."""
    numbers = rsa.RSAPublicNumbers(e=decode_exponent(key.e), n=decode_modulus(key.n))
    return numbers.public_key()


def verify_signature(key: JsonWebKey, digest: bytes, signature: bytes) -> bool:
    """Return True only if ``signature`` is valid for ``digest`` under ``key``."""
    try:
        public_key = public_key_from_jwk(key)
        public_key.verify(
            signature,
            digest,
            padding.PKCS1v15(),
            Prehashed(hashes.SHA256()),
        )
    except (InvalidSignature, DecodeError, ValueError, UnsupportedAlgorithm):
        return False
    return True
