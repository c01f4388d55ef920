"""Self-describing payload carried in the ``data`` field of an envelope.

A payload is a named collection: on the wire it is always the single-key
object ``{"<collection>": <content>}``. When decoding JSON produced by
services that do not use this package, the collection name is inferred:

* a non-object value (list, scalar, null) is left unclassified;
* an object whose top-level values contain exactly one object or array is
  classified under that key, and its sibling scalar keys are dropped;
* an object with zero, or more than one, nested object/array is ambiguous
  and left unclassified.

Unclassified payloads keep the raw decoded value as their content and an
empty ``type``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from service_envelope.errors import EncodingError

logger = logging.getLogger(__name__)


def _is_collection(value: Any) -> bool:
    return isinstance(value, (dict, list))


class Data(BaseModel):
    """Collection data returned to the consumer.

    ``type`` ends up being the name of the key holding ``content``.
    """

    model_config = ConfigDict(frozen=True)

    type: str = ""
    content: Any = None

    def valid(self) -> bool:
        """A payload can be encoded or extracted only once it has a collection name."""
        return self.type != ""

    def is_empty(self) -> bool:
        content = self.content
        if content is None:
            return True
        return isinstance(content, (str, list, dict)) and not content

    def normalized_type(self) -> str:
        """Collection name as it appears on the wire: lower-case, spaces as hyphens."""
        return self.type.lower().replace(" ", "-")

    def as_map(self) -> dict[str, Any] | None:
        if not self.valid():
            return None
        return {self.normalized_type(): self.content}

    def encode(self) -> dict[str, Any] | None:
        """Return the JSON-ready value of the ``data`` field.

        ``None`` means the field should be omitted from the envelope.

        Raises
        ------
        EncodingError
            If content is present but the collection name is empty.
        """
        if not self.valid():
            if not self.is_empty():
                raise EncodingError(collection=self.type)
            return None
        return self.as_map()

    @classmethod
    def decode(cls, raw: bytes | str) -> Data:
        """Decode the raw JSON of a ``data`` field, inferring the collection name.

        Malformed JSON is logged and yields a payload with no content.
        """
        try:
            value = json.loads(raw)
        except ValueError as exc:
            logger.warning(
                "cannot unmarshal data: %s",
                exc,
                extra={"event": "decode_warning", "reason": str(exc)},
            )
            return cls(content=None)
        return cls.from_value(value)

    @classmethod
    def from_value(cls, value: Any) -> Data:
        """Classify an already-parsed ``data`` value."""
        if not isinstance(value, dict):
            return cls(content=value)

        nested = [key for key, item in value.items() if _is_collection(item)]
        if len(nested) != 1:
            # Either a flat key/value bag or several candidate collections.
            return cls(content=value)

        key = nested[0]
        logger.debug(
            "inferred collection name",
            extra={"event": "collection_inferred", "collection": key},
        )
        return cls(type=key, content=value[key])
