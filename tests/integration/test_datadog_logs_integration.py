from __future__ import annotations

import time as _time

import pytest

from config import load_config
from ddlogs import DatadogLogsWriter, DeliverySuccess, SinkRecord


def _has_real_datadog_creds() -> bool:
    # `load_config()` loads `.env` via dotenv.load_dotenv(); call it before
    # deciding to skip so a local `.env` is honored.
    try:
        cfg = load_config().datadog
    except Exception:
        return False

    return bool(cfg.api_key)


@pytest.mark.integration
def test_integration_flush_hits_network() -> None:
    """Ships one small batch to the real Datadog logs intake.

    To run:
    - set DATADOG_API_KEY (and optionally DATADOG_URL / DATADOG_PORT)
    - run: pytest -m integration
    """
    if not _has_real_datadog_creds():
        pytest.skip("Missing real DATADOG_API_KEY; skipping network integration test.")

    cfg = load_config().datadog
    writer = DatadogLogsWriter(cfg)
    stamp = int(_time.time() * 1000)

    writer.accept(SinkRecord(topic="ddlogs-integration", value={"message": f"integration test {stamp}"}))
    writer.accept(SinkRecord(topic="ddlogs-integration", value=None))
    result = writer.flush()

    assert isinstance(result, DeliverySuccess)
    assert 200 <= result.status_code < 300
    assert writer.stats()["records_sent"] == 1
