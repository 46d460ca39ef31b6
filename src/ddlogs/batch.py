"""In-memory batch buffer owned by a single writer."""

from __future__ import annotations

from collections.abc import Iterator

from .models import SinkRecord


class RecordBatch:
    """Ordered, bounded sequence of records awaiting the next flush.

    The buffer does not flush itself; the owner checks `is_full()` before
    appending. `None` entries are kept so filtering stays a formatting concern.
    Not thread-safe.
    """

    def __init__(self, max_length: int) -> None:
        if max_length <= 0:
            raise ValueError(f"max_length must be > 0. Got: {max_length}")
        self.max_length = max_length
        self._records: list[SinkRecord | None] = []

    def append(self, record: SinkRecord | None) -> None:
        self._records.append(record)

    def is_full(self) -> bool:
        return len(self._records) >= self.max_length

    def clear(self) -> None:
        self._records.clear()

    def snapshot(self) -> list[SinkRecord | None]:
        """Return a point-in-time copy of the buffered records."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SinkRecord | None]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"RecordBatch(size={len(self._records)}, max_length={self.max_length})"
