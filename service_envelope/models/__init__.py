"""Envelope models: payload, envelopes and pagination summary."""

from service_envelope.models.data import Data
from service_envelope.models.pagination import PaginationSummary, Paginator
from service_envelope.models.responses import (
    JSON_MEDIA_TYPE,
    PaginatedResponse,
    Responder,
    Response,
    Status,
    status_for,
)

__all__ = [
    "JSON_MEDIA_TYPE",
    "Data",
    "PaginatedResponse",
    "PaginationSummary",
    "Paginator",
    "Responder",
    "Response",
    "Status",
    "status_for",
]
