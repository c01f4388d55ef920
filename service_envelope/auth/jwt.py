"""RS-signed JWT verification for consumer tokens.

``verify_token`` checks the signature with the configured RSA public key and
classifies every failure into one of four kinds. The kind (not the message)
decides the HTTP code of the resulting ``fail`` envelope, through the mapping
table in ``EnvelopeSettings.token_error_status_codes``.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any

from jose import jwt
from jose.constants import ALGORITHMS
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError
from pydantic import BaseModel, ValidationError

from service_envelope.errors import EnvelopeError

logger = logging.getLogger(__name__)

_RSA_ALGORITHMS = frozenset({ALGORITHMS.RS256, ALGORITHMS.RS384, ALGORITHMS.RS512})


class TokenErrorKind(str, Enum):
    """Failure classes of token verification."""

    MALFORMED = "malformed"
    EXPIRED = "expired"
    INVALID = "invalid"
    CLAIMS_INVALID = "claims_invalid"


DEFAULT_TOKEN_STATUS_CODES: dict[TokenErrorKind, int] = {
    TokenErrorKind.MALFORMED: 422,
    TokenErrorKind.EXPIRED: 401,
    TokenErrorKind.INVALID: 401,
    TokenErrorKind.CLAIMS_INVALID: 401,
}


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------


class TokenError(EnvelopeError):
    """Base error for rejected tokens."""

    kind: TokenErrorKind = TokenErrorKind.INVALID
    status_code = 401
    message = "invalid token"


class TokenMalformedError(TokenError):
    kind = TokenErrorKind.MALFORMED
    status_code = DEFAULT_TOKEN_STATUS_CODES[TokenErrorKind.MALFORMED]
    message = "token malformed"


class TokenExpiredError(TokenError):
    kind = TokenErrorKind.EXPIRED
    status_code = DEFAULT_TOKEN_STATUS_CODES[TokenErrorKind.EXPIRED]
    message = "token expired or not yet valid"


class TokenInvalidError(TokenError):
    kind = TokenErrorKind.INVALID
    status_code = DEFAULT_TOKEN_STATUS_CODES[TokenErrorKind.INVALID]
    message = "invalid token"


class TokenClaimsInvalidError(TokenError):
    kind = TokenErrorKind.CLAIMS_INVALID
    status_code = DEFAULT_TOKEN_STATUS_CODES[TokenErrorKind.CLAIMS_INVALID]
    message = "invalid token claims"


# ---------------------------------------------------------------------------
# Claims
# ---------------------------------------------------------------------------


class Consumer(BaseModel):
    """The API consumer a token was issued to."""

    id: int = 0
    first_name: str = ""
    last_name: str = ""
    language: str = ""
    grants: list[str] = []

    def has_any_grant(self, *grants: str) -> bool:
        """True when the consumer holds at least one of ``grants``."""
        held = set(self.grants)
        return any(grant in held for grant in grants)


class Claims(BaseModel):
    """Claims carried by a consumer token."""

    consumer: Consumer
    exp: int | float | None = None
    nbf: int | float | None = None
    iat: int | float | None = None
    iss: str | None = None
    sub: str | None = None
    jti: str | None = None
    aud: str | list[str] | None = None


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


def verify_token(public_key: str | dict[str, Any], raw: str, leeway: int = 0) -> Claims:
    """Verify ``raw`` against ``public_key`` and return its claims.

    Parameters
    ----------
    public_key:
        RSA public key as PEM text or JWK dict.
    raw:
        The encoded token.
    leeway:
        Seconds of clock skew tolerated on ``exp`` and ``nbf``.

    Raises
    ------
    TokenMalformedError
        The token cannot be decoded at all.
    TokenExpiredError
        The token is expired or not valid yet.
    TokenInvalidError
        Wrong signing method or bad signature.
    TokenClaimsInvalidError
        Registered claims are malformed or the consumer claim is missing.
    """
    try:
        header = jwt.get_unverified_header(raw)
    except JWTError as exc:
        raise TokenMalformedError() from exc

    algorithm = header.get("alg", "")
    if not isinstance(algorithm, str) or algorithm not in _RSA_ALGORITHMS:
        raise TokenInvalidError(f"unexpected signing method: {algorithm}")

    try:
        payload = jwt.decode(
            raw,
            public_key,
            algorithms=[algorithm],
            options={"verify_aud": False, "verify_nbf": False, "leeway": leeway},
        )
    except ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except JWTClaimsError as exc:
        raise TokenClaimsInvalidError() from exc
    except JWTError as exc:
        raise TokenInvalidError() from exc

    _check_not_before(payload, leeway)

    try:
        claims = Claims.model_validate(payload)
    except ValidationError as exc:
        raise TokenClaimsInvalidError() from exc

    logger.debug(
        "token verified",
        extra={"event": "token_verified"},
    )
    return claims


def _check_not_before(payload: dict[str, Any], leeway: int) -> None:
    if "nbf" not in payload:
        return
    nbf = payload["nbf"]
    if isinstance(nbf, bool) or not isinstance(nbf, (int, float)):
        raise TokenClaimsInvalidError()
    if nbf > time.time() + leeway:
        raise TokenExpiredError()
