"""Demo entrypoint shipping log lines to Datadog.

This module is a small manual integration harness that:

- Loads configuration from environment.
- Reads log lines from a file (or stdin), one record per line.
- Hands them to a `DatadogLogsWriter`, which batches and ships them.

Lines that parse as JSON are shipped as structured values; anything else is
shipped as a raw string. It is **not** a production consumer: there is no
polling loop, offset tracking or retry.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Iterable, Iterator
from typing import TextIO

from config import load_config
from ddlogs import DatadogLogsWriter, DeliveryError, RecordEncodingError, SinkRecord

logger = logging.getLogger("ddlogs.demo")


def _reject_constant(token: str) -> float:
    """Refuse NaN/Infinity so such lines are shipped as raw text."""
    raise ValueError(f"non-finite JSON constant {token!r}")


def _line_to_record(line: str, *, topic: str, offset: int) -> SinkRecord:
    """Build a record from one input line; blank lines yield a value-less record."""
    text = line.rstrip("\r\n")
    if not text.strip():
        return SinkRecord(topic=topic, value=None, offset=offset)
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        value = text
    # A JSON string literal is still a plain log line and becomes a raw value.
    return SinkRecord(topic=topic, value=value, offset=offset)


def read_records(stream: TextIO, *, topic: str) -> Iterator[SinkRecord | None]:
    """Yield one record per line of `stream`."""
    for offset, line in enumerate(stream):
        yield _line_to_record(line, topic=topic, offset=offset)


def ship(writer: DatadogLogsWriter, records: Iterable[SinkRecord | None]) -> None:
    """Write all records through `writer` and log the delivery counters."""
    try:
        writer.write(records)
    finally:
        logger.info("Writer stats: %s", writer.stats())


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint: `python src/main.py [path]` (reads stdin when no path is given)."""
    args = sys.argv[1:] if argv is None else argv
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config()
    writer = DatadogLogsWriter(cfg.datadog)
    topic = os.getenv("DEMO_TOPIC", "demo-logs")

    try:
        if args:
            with open(args[0], encoding="utf-8") as fh:
                ship(writer, read_records(fh, topic=topic))
        else:
            ship(writer, read_records(sys.stdin, topic=topic))
    except (DeliveryError, RecordEncodingError) as exc:
        logger.error("Delivery failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
