"""
Google ID token verifier.

Runs the verification pipeline for one token:

1. decode the compact token
2. fetch the current key set from the certs provider
3. parse the payload into claims
4. validate audience, issuer and validity window
5. select the signing key by the header's kid
6. verify the RS256 signature

Any failure collapses to "not verified". Which stage failed, and why, is
reported only through the logger and metrics.
"""

import time
from typing import Callable, Iterable, Optional

from idtoken_shared.errors import SignatureError, TokenVerifierError, VerificationFailed
from idtoken_shared.logging import get_logger
from idtoken_shared.metrics import MetricsCollector
from ..certs.provider import CertsProvider
from .claims import ACCEPTED_ISSUERS, Claims, validate_claims
from .codec import decode_token, parse_claims, parse_header
from .keys import select_key
from .signature import verify_signature


SUPPORTED_ALGORITHM = "RS256"


class GoogleTokenVerifier:
    """Verifies Google ID tokens against a certs provider."""

    def __init__(
        self,
        certs_provider: CertsProvider,
        *,
        issuers: Iterable[str] = ACCEPTED_ISSUERS,
        clock: Callable[[], float] = time.time,
        logger=None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.certs_provider = certs_provider
        self.issuers = tuple(issuers)
        self._clock = clock
        self.logger = logger or get_logger("idtoken.verifier")
        self.metrics = metrics or MetricsCollector()

    def verify(self, token: str, audience: str) -> Optional[Claims]:
        """Return the token's claims if it is trusted, otherwise None."""
        if token.startswith("Bearer "):
            token = token[7:]

        stage = "decode"
        try:
            decoded = decode_token(token)

            stage = "fetch_keys"
            key_set = self.certs_provider.fetch()

            stage = "parse_claims"
            claims = parse_claims(decoded.payload)

            stage = "validate_claims"
            validate_claims(claims, audience, int(self._clock()), self.issuers)

            stage = "select_key"
            header = parse_header(decoded.header)
            key = select_key(key_set, header.kid)

            stage = "verify_signature"
            if header.alg != SUPPORTED_ALGORITHM:
                raise SignatureError(
                    "Unsupported signing algorithm",
                    details={"alg": header.alg}
                )
            if not verify_signature(key, decoded.signed_digest, decoded.signature):
                raise SignatureError(details={"kid": key.kid})

        except TokenVerifierError as e:
            self.metrics.record_validation(e.code.lower())
            self.logger.warning("Token verification failed", stage=stage, **e.to_log_fields())
            return None

        self.metrics.record_validation("success")
        self.logger.info("Token verified successfully", sub=claims.sub, kid=key.kid)
        return claims

    def extract_claims(self, token: str, audience: str) -> Claims:
        """Return the claims of a trusted token or raise VerificationFailed."""
        claims = self.verify(token, audience)
        if claims is None:
            raise VerificationFailed()
        return claims
