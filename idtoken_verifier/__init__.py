"""
Google ID token verifier.

Validates ID tokens issued by Google sign-in: the token must be signed by a
currently published Google key, be within its validity window, and target
the expected audience.

- idtoken_verifier.certs: key set models and providers (static snapshot or
  Google's certs endpoint with expiry-aware caching).
- idtoken_verifier.validation: codec, key selection, signature and claim
  checks, and the GoogleTokenVerifier orchestrator.
- idtoken_verifier.bootstrap: builds a verifier from VerifierConfig.

Importing the package performs no network calls; the cached provider
fetches on construction.
"""

from .bootstrap import create_certs_provider, create_verifier
from .certs import CachedURLCertsProvider, CertsProvider, JsonWebKey, KeySet, StaticCertsProvider
from .validation import Claims, GoogleTokenVerifier

__all__ = [
    "CachedURLCertsProvider",
    "CertsProvider",
    "Claims",
    "GoogleTokenVerifier",
    "JsonWebKey",
    "KeySet",
    "StaticCertsProvider",
    "create_certs_provider",
    "create_verifier",
]
