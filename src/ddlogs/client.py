"""HTTP transport for the Datadog logs intake.

`DatadogLogsClient.send` POSTs one gzip-compressed payload and classifies the
response into a `DeliveryResult`:

- `DeliverySuccess` for 2xx responses
- `DeliveryFailure` for any other status (carries the submitted payload)

Transport errors (connection refused, TLS failures, broken streams) are raised
as `DatadogLogsTransportError`. No retry is attempted; the caller decides.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Union

import requests  # type: ignore

from .compression import compress
from .models import DeliveryMetadata

logger = logging.getLogger(__name__)

_API_KEY_SEGMENT = re.compile(r"(/v1/input/)[^/?#]+")

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Content-Encoding": "gzip",
}


def mask_api_key(url: str) -> str:
    """Hide the API key path segment so URLs are safe to log or raise."""
    return _API_KEY_SEGMENT.sub(r"\1***", url)


@dataclass(frozen=True)
class DeliverySuccess:
    status_code: int
    reason: str
    body: str = ""

    ok = True


@dataclass(frozen=True)
class DeliveryFailure:
    status_code: int
    reason: str
    body: str
    payload: str = field(repr=False)

    ok = False


DeliveryResult = Union[DeliverySuccess, DeliveryFailure]


class DeliveryError(RuntimeError):
    """Base class for errors that abort delivery of a batch."""


class DatadogLogsHttpError(DeliveryError):
    """Non-2xx response returned by the logs intake."""

    def __init__(self, *, status_code: int, reason: str, body: str, payload: str):
        """Create an error capturing the response and the payload that was submitted."""
        self.status_code = status_code
        self.reason = reason
        self.body = body
        self.payload = payload
        super().__init__(
            f"HTTP Response code: {status_code}, {reason}, {body}, Submitted payload: {payload}"
        )

    @classmethod
    def from_failure(cls, failure: DeliveryFailure) -> DatadogLogsHttpError:
        return cls(
            status_code=failure.status_code,
            reason=failure.reason,
            body=failure.body,
            payload=failure.payload,
        )


class DatadogLogsTransportError(DeliveryError):
    """The request could not be completed (network or I/O failure)."""

    def __init__(self, *, url: str, cause: BaseException):
        self.url = mask_api_key(url)
        super().__init__(f"Failed to deliver logs to {self.url}: {cause}")


class DatadogLogsClient:
    """Synchronous client for the Datadog logs intake.

    Members:
    - Metadata: `metadata` (host, port and API key used to build the URL)
    - Default URL: `url`
    - Timeout: `timeout` (seconds; `None` waits indefinitely)
    """

    def __init__(
        self,
        metadata: DeliveryMetadata,
        *,
        timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.metadata = metadata
        self.url: str = metadata.intake_url
        self.timeout = timeout

        self._headers = dict(DEFAULT_HEADERS)
        if user_agent:
            self._headers["User-Agent"] = user_agent

    def send(self, payload: str, url: str | None = None) -> DeliveryResult:
        """Compress and POST `payload`, returning the classified response.

        Raises:
        - `DatadogLogsTransportError` for transport errors
        """
        target = url or self.url
        body = compress(payload)

        try:
            # The context manager releases the connection even if reading fails.
            with requests.request(
                "POST",
                target,
                headers=self._headers,
                data=body,
                timeout=self.timeout,
                stream=True,
            ) as resp:
                content = _read_body(resp)
                status_code = resp.status_code
                reason = resp.reason or ""
        except requests.RequestException as exc:
            raise DatadogLogsTransportError(url=target, cause=exc) from exc

        logger.debug("Submitted payload: %s", payload)

        if not 200 <= status_code < 300:
            return DeliveryFailure(status_code=status_code, reason=reason, body=content, payload=payload)

        logger.debug("Response code: %d, %s", status_code, reason)
        logger.debug("Response content: %s", content)
        return DeliverySuccess(status_code=status_code, reason=reason, body=content)


def _read_body(resp: requests.Response) -> str:
    """Read the full response body as text."""
    raw = resp.content or b""
    return raw.decode("utf-8", errors="replace")
