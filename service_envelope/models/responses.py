"""Standard response envelope emitted by every service endpoint.

All responses are wrapped in this envelope for consistency::

    {
        "status": "ok" | "fail",
        "code": <any HTTP response code>,
        "message": "<any relevant message, may be empty>",
        "data": {"<collection>": <content>},   # omitted when absent
        "pagination": {...}                     # PaginatedResponse only
    }

``status`` is derived from ``code`` when an envelope is built with
``service_envelope.constructors.new``; a decoded envelope keeps the wire value
as-is.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Protocol, Self

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationInfo, field_validator
from starlette import status as http_status
from starlette.responses import Response as HTTPResponse
from starlette.types import Receive, Scope, Send

from service_envelope.errors import ExtractionError, WriteError
from service_envelope.models.data import Data
from service_envelope.models.pagination import PaginationSummary

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


class Status(str, Enum):
    """Standard response statuses."""

    OK = "ok"
    FAIL = "fail"


def status_for(code: int) -> Status:
    """``ok`` for 2xx and 3xx codes, ``fail`` for everything else."""
    if http_status.HTTP_200_OK <= code < http_status.HTTP_400_BAD_REQUEST:
        return Status.OK
    return Status.FAIL


class Responder(Protocol):
    """Behaviour shared by every envelope kind."""

    def extract_data(self, key: str, into: Any = Any, default: Any = None) -> Any: ...

    def get_code(self) -> int: ...

    def to_response(self) -> HTTPResponse: ...


class Response(BaseModel):
    """A standardised response envelope for a service endpoint."""

    model_config = ConfigDict(frozen=True)

    status: str = ""
    code: int = 0
    message: str = ""
    data: Data | None = None

    @field_validator("status", "code", "message", mode="before")
    @classmethod
    def _null_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("data", mode="before")
    @classmethod
    def _classify_data(cls, value: Any) -> Any:
        if value is None or isinstance(value, Data):
            return value
        return Data.from_value(value)

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    @classmethod
    def decode(cls, raw: bytes | str) -> Self:
        """Decode wire bytes, inferring the payload collection when needed."""
        return cls.model_validate_json(raw)

    def _extras(self) -> dict[str, Any]:
        return {}

    def as_dict(self) -> dict[str, Any]:
        """Wire mapping of the envelope, keys in wire order."""
        body: dict[str, Any] = {
            "status": self.status,
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            data = self.data.encode()
            if data is not None:
                body["data"] = data
        body.update(self._extras())
        return body

    def encode(self) -> bytes:
        """Serialize the envelope to compact JSON.

        Raises
        ------
        EncodingError
            If the payload carries content without a collection name.
        WriteError
            If the content is not JSON serializable.
        """
        body = self.as_dict()
        try:
            return json.dumps(
                body, separators=(",", ":"), ensure_ascii=False, allow_nan=False
            ).encode()
        except (TypeError, ValueError) as exc:
            raise WriteError(f"cannot encode response: {exc}", code=self.code) from exc

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    def extract_data(self, key: str, into: Any = Any, default: Any = None) -> Any:
        """Return the payload entry named ``key`` validated as ``into``.

        A payload that does not contain ``key`` yields ``default``.

        Raises
        ------
        ExtractionError
            If the payload is missing or unclassified, or its value cannot be
            validated as ``into``.
        """
        if self.data is None or not self.data.valid():
            raise ExtractionError(f"invalid data provided: {self.data!r}")

        for name, value in self.data.as_map().items():
            if name != key:
                continue
            try:
                raw = json.dumps(value, allow_nan=False)
                return TypeAdapter(into).validate_json(raw)
            except (TypeError, ValueError) as exc:
                raise ExtractionError(
                    f"cannot extract {key}: {exc}", collection=key
                ) from exc

        return default

    def get_code(self) -> int:
        return self.code

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def to_response(self) -> HTTPResponse:
        """Build the HTTP response for this envelope.

        A 204 never carries a body, whatever the payload.
        """
        if self.code == http_status.HTTP_204_NO_CONTENT:
            return HTTPResponse(status_code=self.code, media_type=JSON_MEDIA_TYPE)
        return HTTPResponse(
            content=self.encode(),
            status_code=self.code,
            media_type=JSON_MEDIA_TYPE,
        )

    async def write_to(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Write the envelope to an ASGI connection."""
        response = self.to_response()
        try:
            await response(scope, receive, send)
        except Exception as exc:
            logger.warning(
                "cannot write response: %s",
                exc,
                extra={"event": "write_failure", "code": self.code},
            )
            raise WriteError(f"cannot write response: {exc}", code=self.code) from exc


class PaginatedResponse(Response):
    """A response envelope that also carries a pagination summary."""

    pagination: PaginationSummary | None = None

    def _extras(self) -> dict[str, Any]:
        pagination = None
        if self.pagination is not None:
            pagination = self.pagination.model_dump(mode="json")
        return {"pagination": pagination}
