"""
Token validation package.

Turns a raw compact token plus a key set into a trust decision:

- codec: splits and base64url-decodes the token, digests the signed input.
- keys: picks the signing key by kid.
- signature: RSASSA-PKCS1-v1_5 / SHA-256 verification against a JWK.
- claims: the Claims model and audience/issuer/time checks.
- verifier: the orchestrating GoogleTokenVerifier.
"""

from .claims import ACCEPTED_ISSUERS, Claims, validate_claims
from .codec import DecodedToken, TokenHeader, b64url_decode, decode_token, parse_claims, parse_header
from .keys import select_key
from .signature import public_key_from_jwk, verify_signature
from .verifier import GoogleTokenVerifier

__all__ = [
    "ACCEPTED_ISSUERS",
    "Claims",
    "DecodedToken",
    "GoogleTokenVerifier",
    "TokenHeader",
    "b64url_decode",
    "decode_token",
    "parse_claims",
    "parse_header",
    "public_key_from_jwk",
    "select_key",
    "validate_claims",
    "verify_signature",
]
