"""FastAPI exception handlers answering with ``fail`` envelopes.

Envelope errors, token errors, Pydantic's RequestValidationError and
unhandled exceptions are all caught here and written as the standard
envelope: { status, code, message }.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette import status as http_status
from starlette.responses import Response as HTTPResponse

from service_envelope.auth.jwt import TokenError, TokenErrorKind
from service_envelope.constructors import json_error, new, token_error, validation_error
from service_envelope.errors import EnvelopeError

logger = logging.getLogger(__name__)


async def _envelope_error_handler(_request: Request, exc: EnvelopeError) -> HTTPResponse:
    """Handle EnvelopeError subclasses."""
    return new(exc.status_code, exc.message).to_response()


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> HTTPResponse:
    """Handle FastAPI / Pydantic RequestValidationError (422)."""
    errors = exc.errors()
    if not errors:
        return validation_error("invalid request", "request").to_response()

    first = errors[0]
    if first.get("type") == "json_invalid":
        ctx = first.get("ctx") or {}
        return json_error(ctx.get("error") or first["msg"]).to_response()

    field = " -> ".join(str(loc) for loc in first["loc"])
    return validation_error(first["msg"], field).to_response()


async def _unhandled_error_handler(_request: Request, exc: Exception) -> HTTPResponse:
    """Catch-all for unhandled exceptions — log traceback, return generic 500."""
    logger.error(
        "Unhandled exception: %s\n%s",
        exc,
        traceback.format_exc(),
    )
    return new(
        http_status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error"
    ).to_response()


def register_error_handlers(
    app: FastAPI,
    token_status_codes: Mapping[TokenErrorKind, int] | None = None,
) -> None:
    """Wire up all exception handlers on the FastAPI application.

    ``token_status_codes`` maps token failure kinds to HTTP codes; the
    defaults from ``service_envelope.auth.jwt`` apply when omitted.
    """

    async def _token_error_handler(_request: Request, exc: TokenError) -> HTTPResponse:
        return token_error(exc, token_status_codes).to_response()

    app.add_exception_handler(TokenError, _token_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(EnvelopeError, _envelope_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
