"""
Shared error handling for the ID token verifier.
"""

from typing import Dict, Any, Optional


class TokenVerifierError(Exception):
    """Base exception for the verification pipeline."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_log_fields(self) -> Dict[str, Any]:
        """Flatten the error into structured log fields."""
        fields: Dict[str, Any] = {"code": self.code, "error": self.message}
        fields.update(self.details)
        return fields


class DecodeError(TokenVerifierError):
    """Malformed compact token, bad base64 or bad JSON in header/payload."""

    def __init__(self, message: str = "Token could not be decoded", details: Optional[Dict[str, Any]] = None):
        super().__init__("DECODE_ERROR", message, details)


class KeySetUnavailable(TokenVerifierError):
    """No usable key set could be produced."""

    def __init__(self, message: str = "Signing key set unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("KEY_SET_UNAVAILABLE", message, details)


class ClaimError(TokenVerifierError):
    """Audience, issuer or time-window mismatch."""

    def __init__(self, message: str = "Token claims rejected", details: Optional[Dict[str, Any]] = None):
        super().__init__("CLAIM_ERROR", message, details)


class KeyNotFound(TokenVerifierError):
    """No key in the set matches the token's key id."""

    def __init__(self, message: str = "Signing key not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("KEY_NOT_FOUND", message, details)


class SignatureError(TokenVerifierError):
    """Cryptographic verification failed."""

    def __init__(self, message: str = "Token signature is invalid", details: Optional[Dict[str, Any]] = None):
        super().__init__("SIGNATURE_ERROR", message, details)


class VerificationFailed(TokenVerifierError):
    """Collapsed public outcome: the token is not trusted."""

    def __init__(self, message: str = "Token not verified"):
        super().__init__("VERIFICATION_FAILED", message)
