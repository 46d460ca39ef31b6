"""Batching writer that ships records to the Datadog logs intake.

The writer is driven by its caller (typically a sink task's `put` loop):

- `accept(record)` buffers one record, flushing first when the batch is full.
- `write(records)` accepts every record in order, then always flushes.
- `flush()` formats, compresses and sends the buffered records.

The batch is cleared after every send attempt, successful or not; failed
records are dropped rather than requeued. Retrying is the caller's job.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .batch import RecordBatch
from .client import (
    DatadogLogsClient,
    DatadogLogsHttpError,
    DeliveryFailure,
    DeliverySuccess,
)
from .encoder import RecordEncoder
from .formatter import PayloadFormatter, build_formatter
from .models import SinkRecord

if TYPE_CHECKING:
    from config import DatadogLogsConfig

logger = logging.getLogger(__name__)


class DatadogLogsWriter:
    """Accumulates records and delivers them in bounded batches.

    Not thread-safe: one caller at a time per instance.
    """

    def __init__(
        self,
        config: DatadogLogsConfig,
        *,
        batch: RecordBatch | None = None,
        formatter: PayloadFormatter | None = None,
        client: DatadogLogsClient | None = None,
        encoder: RecordEncoder | None = None,
    ) -> None:
        """Create a writer from configuration.

        Args:
            config: Intake location, credentials, metadata and batch bound.
            batch: Buffer to accumulate into; defaults to a new one bounded by
                `config.max_batch_length`.
            formatter: Payload layout; defaults to the one named by
                `config.transport_mode`.
            client: HTTP transport; defaults to a client for `config`.
            encoder: Record encoder for structured payloads (ignored when
                `formatter` is given).
        """
        self.config = config
        self.batch = batch if batch is not None else RecordBatch(config.max_batch_length)
        self.formatter = formatter or build_formatter(config.transport_mode, config.metadata, encoder=encoder)
        self.client = client or DatadogLogsClient(config.metadata, timeout=config.timeout_seconds)

        self._batches_sent = 0
        self._records_sent = 0
        self._records_dropped = 0

    def accept(self, record: SinkRecord | None) -> None:
        """Buffer a record, flushing the current batch first if it is full."""
        if self.batch.is_full():
            self.flush()
        self.batch.append(record)

    def write(self, records: Iterable[SinkRecord | None]) -> None:
        """Accept `records` in order, then flush whatever remains.

        Raises:
        - `DeliveryError` subclasses when a batch cannot be delivered
        - `RecordEncodingError` when a structured payload cannot be built
        """
        for record in records:
            self.accept(record)

        # Flush remaining records
        self.flush()

    def flush(self) -> DeliverySuccess | None:
        """Send the buffered records, returning `None` when nothing was sent.

        The batch is empty when this returns or raises.
        """
        pending = self.batch.snapshot()
        try:
            payload = self.formatter.format(pending)
            if payload is None:
                logger.debug("Nothing to send; Skipping the HTTP request.")
                return None

            result = self.client.send(payload)
        except Exception:
            self._records_dropped += _count_deliverable(pending)
            raise
        finally:
            self.batch.clear()

        delivered = _count_deliverable(pending)
        if isinstance(result, DeliveryFailure):
            self._records_dropped += delivered
            logger.warning(
                "Dropped batch of %d records: HTTP %d %s",
                delivered,
                result.status_code,
                result.reason,
            )
            raise DatadogLogsHttpError.from_failure(result)

        self._batches_sent += 1
        self._records_sent += delivered
        logger.info("Delivered batch of %d records (HTTP %d)", delivered, result.status_code)
        return result

    def stats(self) -> dict[str, Any]:
        """Return delivery counters since this writer was created."""
        return {
            "batches_sent": self._batches_sent,
            "records_sent": self._records_sent,
            "records_dropped": self._records_dropped,
            "pending": len(self.batch),
        }


def _count_deliverable(records: Iterable[SinkRecord | None]) -> int:
    return sum(1 for r in records if r is not None and r.value is not None)
