"""
Signing key set package.

Contains the key set models and the providers that supply the currently
trusted key set to the verifier:

- StaticCertsProvider: a snapshot loaded from a file or bytes.
- CachedURLCertsProvider: Google's certs endpoint, cached until the
  response's Expires header with background refresh ahead of expiry.
"""

from .models import JsonWebKey, KeySet
from .provider import (
    CachedURLCertsProvider,
    CertsProvider,
    StaticCertsProvider,
    parse_expires,
)

__all__ = [
    "CachedURLCertsProvider",
    "CertsProvider",
    "JsonWebKey",
    "KeySet",
    "StaticCertsProvider",
    "parse_expires",
]
