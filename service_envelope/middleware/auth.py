"""Bearer token authentication middleware.

Verifies the ``Authorization: Bearer <token>`` header with the configured RSA
public key. Rejected requests are answered with a ``fail`` envelope whose code
comes from the token error mapping in EnvelopeSettings. Public paths
(/health, /readiness, /metrics by default) are excluded from authentication.
"""

from __future__ import annotations

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from service_envelope.auth.jwt import TokenError, TokenInvalidError, verify_token
from service_envelope.config.settings import EnvelopeSettings
from service_envelope.constructors import token_error

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that enforces consumer token authentication.

    Requests to public paths are allowed through without a token. All other
    requests must carry a token signed by the configured key; its claims are
    stored in ``request.state.claims``.
    """

    def __init__(self, app, settings: EnvelopeSettings) -> None:  # noqa: ANN001
        super().__init__(app)
        if not settings.jwt_public_key:
            raise ValueError("jwt_public_key must be configured for bearer authentication")
        self._settings = settings
        self._public_paths = set(settings.public_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self._public_paths:
            return await call_next(request)

        source_ip = request.client.host if request.client else "unknown"

        try:
            raw = self._bearer_token(request)
            claims = verify_token(
                self._settings.jwt_public_key,  # type: ignore[arg-type]
                raw,
                leeway=self._settings.jwt_leeway_seconds,
            )
        except TokenError as exc:
            logger.warning(
                "Rejected bearer token: %s",
                exc.message,
                extra={
                    "event": "auth_failure",
                    "reason": exc.kind.value,
                    "source_ip": source_ip,
                    "path": request.url.path,
                },
            )
            return token_error(exc, self._settings.token_error_status_codes).to_response()

        request.state.claims = claims
        return await call_next(request)

    @staticmethod
    def _bearer_token(request: Request) -> str:
        header = request.headers.get("authorization", "")
        if not header.lower().startswith(_BEARER_PREFIX):
            raise TokenInvalidError("missing bearer token")
        token = header[len(_BEARER_PREFIX):].strip()
        if not token:
            raise TokenInvalidError("missing bearer token")
        return token
