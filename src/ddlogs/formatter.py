"""Payload formatters.

A formatter renders the current batch into the request body. Two layouts are
supported and chosen once, when the writer is built:

- `StructuredPayloadFormatter` (default): a JSON object whose `message` array
  holds one encoded document per record, plus the delivery metadata
  (`ddsource`, `ddtags`, `hostname`, `service`).
- `RawPayloadFormatter`: the records' raw values joined with `,`; no brackets
  and no metadata.

Both skip `None` records and records without a value, and return `None` when
nothing is left to send.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from typing import Protocol

from .encoder import JsonRecordEncoder, RecordEncoder
from .models import DeliveryMetadata, SinkRecord


class PayloadFormatter(Protocol):
    def format(self, records: Iterable[SinkRecord | None]) -> str | None:
        """Render records into a request body, or `None` if there is nothing to send."""


def _deliverable(records: Iterable[SinkRecord | None]) -> Iterator[SinkRecord]:
    """Yield records that carry a value, preserving order."""
    for record in records:
        if record is None or record.value is None:
            continue
        yield record


class StructuredPayloadFormatter:
    """JSON envelope: `{"message": [...], "ddsource": ..., ...}`."""

    def __init__(self, metadata: DeliveryMetadata, *, encoder: RecordEncoder | None = None) -> None:
        self._metadata = metadata
        self._encoder = encoder or JsonRecordEncoder()

    def format(self, records: Iterable[SinkRecord | None]) -> str | None:
        documents = [
            self._encoder.encode(record.topic, record.value_schema, record.value).decode("utf-8")
            for record in _deliverable(records)
        ]
        if not documents:
            return None

        # Encoded documents are embedded verbatim; malformed encoder output is not
        # detected here.
        # TODO: reject documents that are not well-formed JSON instead of shipping them.
        parts = ['"message":[' + ",".join(documents) + "]"]
        for key, value in self._metadata.envelope_fields().items():
            parts.append(f"{json.dumps(key)}:{json.dumps(value, ensure_ascii=False)}")
        return "{" + ",".join(parts) + "}"


class RawPayloadFormatter:
    """Comma-joined raw values without any envelope."""

    def format(self, records: Iterable[SinkRecord | None]) -> str | None:
        rendered = [record.value.render() for record in _deliverable(records)]
        if not rendered:
            return None
        return ",".join(rendered)


def build_formatter(
    mode: str,
    metadata: DeliveryMetadata,
    *,
    encoder: RecordEncoder | None = None,
) -> PayloadFormatter:
    """Return the formatter for a transport mode (`"structured"` or `"raw"`)."""
    if mode == "structured":
        return StructuredPayloadFormatter(metadata, encoder=encoder)
    if mode == "raw":
        return RawPayloadFormatter()
    raise ValueError(f"Unknown transport mode {mode!r}; expected 'structured' or 'raw'.")
