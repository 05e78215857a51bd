"""
ID token claims and their validation.
"""

from typing import Iterable

from pydantic import BaseModel, ConfigDict

from idtoken_shared.errors import ClaimError


ACCEPTED_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


class Claims(BaseModel):
    """Identity claims carried by a Google ID token.

    Only returned to callers once the token is fully verified.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    sub: str = ""
    email: str = ""
    email_verified: bool = False
    at_hash: str = ""
    aud: str = ""
    iss: str = ""
    azp: str = ""
    name: str = ""
    given_name: str = ""
    family_name: str = ""
    picture: str = ""
    locale: str = ""
    iat: int
    exp: int


def validate_claims(
    claims: Claims,
    audience: str,
    now: int,
    issuers: Iterable[str] = ACCEPTED_ISSUERS,
) -> None:
    """Check audience, issuer and validity window, stopping at the first failure."""
    if claims.aud != audience:
        raise ClaimError(
            "Audience from token and expected audience don't match",
            details={"aud": claims.aud}
        )

    if claims.iss not in tuple(issuers):
        raise ClaimError(
            "Issuer is not accepted",
            details={"iss": claims.iss}
        )

    # Both bounds are inclusive.
    if now < claims.iat or now > claims.exp:
        raise ClaimError(
            "Token is outside its validity window",
            details={"iat": claims.iat, "exp": claims.exp, "now": now}
        )
