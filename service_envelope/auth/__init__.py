"""Consumer token verification."""

from service_envelope.auth.jwt import (
    DEFAULT_TOKEN_STATUS_CODES,
    Claims,
    Consumer,
    TokenClaimsInvalidError,
    TokenError,
    TokenErrorKind,
    TokenExpiredError,
    TokenInvalidError,
    TokenMalformedError,
    verify_token,
)

__all__ = [
    "DEFAULT_TOKEN_STATUS_CODES",
    "Claims",
    "Consumer",
    "TokenClaimsInvalidError",
    "TokenError",
    "TokenErrorKind",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenMalformedError",
    "verify_token",
]
