"""
Compact token codec.

A compact token is ``b64url(header) "." b64url(payload) "." b64url(signature)``.
The signature covers the SHA-256 digest of the encoded header and payload
text exactly as it appears in the token, not of the decoded bytes.
"""

import base64
import binascii
import hashlib
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, ValidationError

from idtoken_shared.errors import DecodeError
from .claims import Claims


@dataclass(frozen=True)
class DecodedToken:
    """Raw parts of a compact token plus the digest that was signed."""

    header: bytes
    payload: bytes
    signature: bytes
    signed_digest: bytes


class TokenHeader(BaseModel):
    """JOSE header fields used to pick the verification key."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    kid: str
    alg: str


def b64url_decode(segment: str) -> bytes:
    """Decode base64url, padding with '=' up to a multiple of four."""
    if "+" in segment or "/" in segment:
        raise DecodeError("Invalid base64url segment", details={"reason": "standard base64 alphabet"})
    remainder = len(segment) % 4
    if remainder:
        segment += "=" * (4 - remainder)
    try:
        return base64.b64decode(segment.encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise DecodeError("Invalid base64url segment", details={"reason": str(e)}) from e


def decode_token(token: str) -> DecodedToken:
    """Split a compact token into its decoded parts."""
    segments = token.split(".")
    if len(segments) != 3:
        raise DecodeError(
            "Token must have exactly three segments",
            details={"segments": len(segments)}
        )

    header_segment, payload_segment, signature_segment = segments
    signing_input = f"{header_segment}.{payload_segment}"
    try:
        signed_digest = hashlib.sha256(signing_input.encode("ascii")).digest()
    except UnicodeEncodeError as e:
        raise DecodeError("Token contains non-ASCII characters") from e

    return DecodedToken(
        header=b64url_decode(header_segment),
        payload=b64url_decode(payload_segment),
        signature=b64url_decode(signature_segment),
        signed_digest=signed_digest,
    )


def parse_header(header: bytes) -> TokenHeader:
    try:
        return TokenHeader.model_validate_json(header)
    except ValidationError as e:
        raise DecodeError("Malformed token header", details={"reason": str(e)}) from e


def parse_claims(payload: bytes) -> Claims:
    try:
        return Claims.model_validate_json(payload)
    except ValidationError as e:
        raise DecodeError("Malformed token payload", details={"reason": str(e)}) from e
