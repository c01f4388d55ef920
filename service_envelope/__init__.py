"""Standard response envelope shared by every service endpoint."""

from service_envelope.constructors import (
    conflict_err,
    db_error,
    db_errorf,
    internal_error,
    json_error,
    new,
    new_paginated,
    not_found_err,
    param_error,
    sql_error,
    sql_errorf,
    token_error,
    validation_error,
)
from service_envelope.errors import EncodingError, EnvelopeError, ExtractionError, WriteError
from service_envelope.models import (
    Data,
    PaginatedResponse,
    PaginationSummary,
    Paginator,
    Responder,
    Response,
    Status,
)

__all__ = [
    "Data",
    "EncodingError",
    "EnvelopeError",
    "ExtractionError",
    "PaginatedResponse",
    "PaginationSummary",
    "Paginator",
    "Responder",
    "Response",
    "Status",
    "WriteError",
    "conflict_err",
    "db_error",
    "db_errorf",
    "internal_error",
    "json_error",
    "new",
    "new_paginated",
    "not_found_err",
    "param_error",
    "sql_error",
    "sql_errorf",
    "token_error",
    "validation_error",
]
