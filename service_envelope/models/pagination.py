"""Pagination summary attached to paginated envelopes.

Page math lives with the pagination collaborator; this package only carries
the summary it prepares.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class PaginationSummary(BaseModel):
    """Prepared pagination response, serialized as-is under ``pagination``."""

    model_config = ConfigDict(extra="allow")

    per_page: int = 0
    page: int = 0
    offset: int = 0
    total: int = 0
    last_page: int = 0


@runtime_checkable
class Paginator(Protocol):
    """Anything able to prepare a pagination summary for a response."""

    def prepare_response(self) -> PaginationSummary: ...
