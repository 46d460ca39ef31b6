"""Record encoders.

The writer asks an encoder to turn one record value into a JSON document. The
default `JsonRecordEncoder` behaves like a JSON converter with schemas
disabled: the schema is accepted but not embedded in the output.
"""

from __future__ import annotations

import json
from typing import Protocol

from .models import JsonValue, RawValue, RecordValue, ValueSchema


class RecordEncodingError(ValueError):
    """Raised when a record value cannot be encoded into a document."""

    def __init__(self, *, topic: str, reason: str):
        self.topic = topic
        self.reason = reason
        super().__init__(f"Failed to encode record from topic {topic!r}: {reason}")


class RecordEncoder(Protocol):
    def encode(self, topic: str, schema: ValueSchema | None, value: RecordValue) -> bytes:
        """Return the UTF-8 encoded document for a record value."""


class JsonRecordEncoder:
    """Encode values as compact JSON (schemas disabled)."""

    def encode(self, topic: str, schema: ValueSchema | None, value: RecordValue) -> bytes:
        if isinstance(value, RawValue):
            data: object = value.text
        elif isinstance(value, JsonValue):
            data = value.data
        else:
            raise RecordEncodingError(topic=topic, reason=f"unsupported value {type(value).__name__}")

        try:
            # allow_nan=False: NaN/Infinity are not valid JSON for the intake.
            text = json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise RecordEncodingError(topic=topic, reason=str(exc)) from exc
        return text.encode("utf-8")
