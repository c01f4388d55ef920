"""Pydantic Settings for services emitting standard envelopes.

All environment variables use the ENVELOPE_ prefix.
Example: ENVELOPE_LOG_LEVEL=DEBUG, ENVELOPE_JWT_PUBLIC_KEY="-----BEGIN PUBLIC KEY-----..."
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from service_envelope.auth.jwt import DEFAULT_TOKEN_STATUS_CODES, TokenErrorKind


class EnvelopeSettings(BaseSettings):
    """Envelope configuration validated from environment variables.

    ``log_level`` is applied by the host service at startup, e.g.
    ``configure_logging(EnvelopeSettings().log_level)``.
    """

    log_level: str = "INFO"

    # Token verification
    jwt_public_key: str | None = None  # PEM encoded RSA public key
    jwt_leeway_seconds: int = Field(default=0, ge=0)
    public_paths: list[str] = ["/health", "/readiness", "/metrics"]

    # Token failure kind -> HTTP code of the fail envelope
    token_error_status_codes: dict[TokenErrorKind, int] = Field(
        default_factory=lambda: dict(DEFAULT_TOKEN_STATUS_CODES)
    )

    model_config = {"env_prefix": "ENVELOPE_"}

    @field_validator("token_error_status_codes")
    @classmethod
    def _every_kind_is_a_failure_code(
        cls, value: dict[TokenErrorKind, int]
    ) -> dict[TokenErrorKind, int]:
        missing = [kind.value for kind in TokenErrorKind if kind not in value]
        if missing:
            raise ValueError(f"no status code for token errors: {', '.join(missing)}")
        for kind, code in value.items():
            if not 400 <= code < 600:
                raise ValueError(f"status code for {kind.value} must be 4xx or 5xx, got {code}")
        return value
