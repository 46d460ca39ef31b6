from __future__ import annotations

import gzip

import pytest
import requests

from ddlogs.client import (
    DatadogLogsClient,
    DatadogLogsHttpError,
    DatadogLogsTransportError,
    DeliveryFailure,
    DeliverySuccess,
    mask_api_key,
)
from ddlogs.models import DeliveryMetadata

from fakes import FakeIntake, FakeResponse


def _make_client(**kwargs) -> DatadogLogsClient:  # noqa: ANN003
    metadata = DeliveryMetadata(host="intake.example.com", port=443, api_key="test_key", source="kafka-connect")
    return DatadogLogsClient(metadata, **kwargs)


def test_send_posts_gzip_body_to_intake_url(intake: FakeIntake) -> None:
    client = _make_client()

    result = client.send('{"message":["x"]}')

    assert isinstance(result, DeliverySuccess)
    assert result.ok is True
    assert result.status_code == 200
    call = intake.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://intake.example.com:443/v1/input/test_key"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["headers"]["Content-Encoding"] == "gzip"
    assert gzip.decompress(call["data"]) == b'{"message":["x"]}'
    assert call["timeout"] is None
    assert intake.served[0].closed is True


def test_send_uses_explicit_url_timeout_and_user_agent(intake: FakeIntake) -> None:
    client = _make_client(timeout=3.0, user_agent="ddlogs/0.1")

    client.send("x", url="https://other.example.com:8443/v1/input/other")

    call = intake.calls[0]
    assert call["url"] == "https://other.example.com:8443/v1/input/other"
    assert call["timeout"] == 3.0
    assert call["headers"]["User-Agent"] == "ddlogs/0.1"


def test_send_reads_success_body(intake: FakeIntake) -> None:
    intake.queue(FakeResponse(202, reason="Accepted", content=b'{"status":"ok"}'))

    result = _make_client().send("x")

    assert result == DeliverySuccess(status_code=202, reason="Accepted", body='{"status":"ok"}')


def test_non_2xx_is_classified_as_failure(intake: FakeIntake) -> None:
    intake.queue(FakeResponse(429, reason="Too Many Requests", content=b"slow down"))

    result = _make_client().send('{"message":["x"]}')

    assert isinstance(result, DeliveryFailure)
    assert result.ok is False
    assert result.status_code == 429
    assert result.reason == "Too Many Requests"
    assert result.body == "slow down"
    assert result.payload == '{"message":["x"]}'
    assert intake.served[0].closed is True


@pytest.mark.parametrize("status", [301, 400, 403, 500, 503])
def test_every_non_success_family_fails(intake: FakeIntake, status: int) -> None:
    intake.queue(FakeResponse(status, reason="nope", content=b""))

    assert isinstance(_make_client().send("x"), DeliveryFailure)


def test_transport_error_is_wrapped_with_masked_url(intake: FakeIntake) -> None:
    intake.queue(requests.ConnectionError("connection refused"))

    with pytest.raises(DatadogLogsTransportError) as excinfo:
        _make_client().send("x")

    err = excinfo.value
    assert err.url == "https://intake.example.com:443/v1/input/***"
    assert "test_key" not in str(err)
    assert "connection refused" in str(err)
    assert isinstance(err.__cause__, requests.ConnectionError)


def test_http_error_message_carries_diagnostics() -> None:
    failure = DeliveryFailure(status_code=400, reason="Bad Request", body="invalid", payload='{"message":[]}')

    err = DatadogLogsHttpError.from_failure(failure)

    assert err.status_code == 400
    assert err.payload == '{"message":[]}'
    assert str(err) == 'HTTP Response code: 400, Bad Request, invalid, Submitted payload: {"message":[]}'


def test_mask_api_key() -> None:
    assert mask_api_key("https://h:443/v1/input/abc123") == "https://h:443/v1/input/***"
    assert mask_api_key("https://h:443/other") == "https://h:443/other"
