"""
Signing key selection by key id.
"""

from idtoken_shared.errors import KeyNotFound
from ..certs.models import JsonWebKey, KeySet


def select_key(key_set: KeySet, kid: str) -> JsonWebKey:
    """Return the first key whose kid matches, scanning the whole set."""
    for key in key_set.keys:
        if key.kid == kid:
            return key

    raise KeyNotFound(
        "Token is not valid, kid from token and certificate don't match",
        details={"kid": kid, "keys_count": len(key_set.keys)}
    )
