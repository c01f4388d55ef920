"""Error hierarchy for envelope encoding, extraction and writing.

Every envelope-specific error extends EnvelopeError. Each class carries the
HTTP code used when the error is turned into a ``fail`` envelope by the
FastAPI exception handlers (see ``service_envelope.middleware.error_handler``).
"""

from __future__ import annotations


class EnvelopeError(Exception):
    """Base error for all envelope-specific errors."""

    status_code: int = 500
    message: str = "Envelope error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class EncodingError(EnvelopeError):
    """Content was provided without a collection name to file it under."""

    status_code = 500
    message = "data provided, type cannot be empty"


class ExtractionError(EnvelopeError):
    """The payload is missing or unclassified, or its value does not fit the target type."""

    status_code = 422
    message = "invalid data provided"


class WriteError(EnvelopeError):
    """The envelope could not be serialized or written to the transport."""

    status_code = 500
    message = "cannot write response"
