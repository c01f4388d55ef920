"""Envelope factories.

``new`` is the one way handlers build an envelope: it derives ``status`` from
the HTTP code so the two can never disagree. The remaining helpers are canned
(code, message) pairs for the common failure classes.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping

from starlette import status as http_status

from service_envelope.auth.jwt import DEFAULT_TOKEN_STATUS_CODES, TokenError, TokenErrorKind
from service_envelope.models.data import Data
from service_envelope.models.pagination import Paginator
from service_envelope.models.responses import PaginatedResponse, Response, status_for

# starlette renamed its 422 constant between releases
HTTP_422_UNPROCESSABLE = 422


def new(code: int, message: str = "", data: Data | None = None) -> Response:
    """Return a new envelope for a service endpoint.

    This ensures every endpoint returns data in the standard format::

        {
            "status": "ok or fail",
            "code": any HTTP response code,
            "message": "any relevant message (optional)",
            "data": {"<collection>": ...}
        }
    """
    return Response(
        status=status_for(code).value,
        code=code,
        message=message,
        data=data,
    )


def new_paginated(
    paginator: Paginator,
    code: int,
    message: str = "",
    data: Data | None = None,
) -> PaginatedResponse:
    """Return a new paginated envelope; the summary comes from ``paginator``."""
    return PaginatedResponse(
        status=status_for(code).value,
        code=code,
        message=message,
        data=data,
        pagination=paginator.prepare_response(),
    )


def db_error(err: BaseException | str) -> Response:
    """500 Internal Server Error for a failed database call."""
    return db_errorf("", err)


def db_errorf(fmt: str, err: BaseException | str) -> Response:
    """500 Internal Server Error with a caller-supplied ``str.format`` template."""
    if not fmt:
        msg = f"db error: {err}"
    else:
        msg = fmt.format(err)
    return new(http_status.HTTP_500_INTERNAL_SERVER_ERROR, msg)


def sql_error(err: BaseException | str) -> Response:
    """Deprecated: use :func:`db_error`."""
    warnings.warn("sql_error is deprecated, use db_error", DeprecationWarning, stacklevel=2)
    return db_error(err)


def sql_errorf(fmt: str, err: BaseException | str) -> Response:
    """Deprecated: use :func:`db_errorf`."""
    warnings.warn("sql_errorf is deprecated, use db_errorf", DeprecationWarning, stacklevel=2)
    return db_errorf(fmt, err)


def json_error(err: BaseException | str) -> Response:
    """422 for a body with JSON syntax errors or values of the wrong type."""
    return new(HTTP_422_UNPROCESSABLE, f"json error: {err}")


def param_error(name: str) -> Response:
    """422 naming the failing parameter."""
    return new(
        HTTP_422_UNPROCESSABLE,
        f"invalid or missing parameter: {name}",
    )


def validation_error(err: BaseException | str, name: str) -> Response:
    """422 naming the failing validation."""
    return new(
        HTTP_422_UNPROCESSABLE,
        f"validation error on {name}: {err}",
    )


def not_found_err(msg: str) -> Response:
    return new(http_status.HTTP_404_NOT_FOUND, msg)


def conflict_err(msg: str) -> Response:
    return new(http_status.HTTP_409_CONFLICT, msg)


def internal_error(err: BaseException | str) -> Response:
    return new(
        http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        f"internal server error: {err}",
    )


def token_error(
    err: TokenError,
    status_codes: Mapping[TokenErrorKind, int] | None = None,
) -> Response:
    """``fail`` envelope for a rejected token, coded through the mapping table."""
    codes = DEFAULT_TOKEN_STATUS_CODES if status_codes is None else status_codes
    code = codes.get(err.kind, err.status_code)
    return new(code, err.message)
