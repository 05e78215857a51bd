"""
Key set models.

A key set document has the JWKS shape served by Google:

    {"keys": [{"kty": "RSA", "alg": "RS256", "use": "sig",
               "kid": "...", "n": "...", "e": "AQAB"}, ...]}
"""

from typing import List, Union

from pydantic import BaseModel, ConfigDict


class JsonWebKey(BaseModel):
    """Public RSA signing key in JWK form."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    kty: str = ""
    alg: str = ""
    use: str = ""
    kid: str
    n: str
    e: str


class KeySet(BaseModel):
    """Ordered collection of signing keys."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    keys: List[JsonWebKey]

    @classmethod
    def from_json(cls, document: Union[str, bytes]) -> "KeySet":
        """Parse a key set document."""
        return cls.model_validate_json(document)

    def to_json(self) -> str:
        """Serialize to a key set document."""
        return self.model_dump_json()
