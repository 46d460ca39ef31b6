"""Datadog logs intake settings.

`load_config()` reads the `DATADOG_*` variables (after merging a local `.env`
that never overrides the real environment) into a `DatadogLogsConfig`:

- `DATADOG_API_KEY` is required and becomes part of the intake URL path.
- `DATADOG_URL` / `DATADOG_PORT` pick the intake host, defaulting to the US1
  endpoint on 443.
- `DATADOG_MAX_BATCH_LENGTH` bounds the records per request.
- `DATADOG_TRANSPORT_MODE` selects the payload layout: `structured` (the
  default, a JSON envelope with metadata) or `raw` (values joined by commas).
- `DATADOG_SOURCE`, `DATADOG_TAGS`, `DATADOG_HOSTNAME` and `DATADOG_SERVICE`
  fill the envelope metadata; `DATADOG_TIMEOUT_SECONDS` bounds each request.
"""

import os
from typing import Literal, TypeVar

import dotenv
from pydantic import BaseModel, Field, field_validator

from ddlogs.models import DeliveryMetadata

_T = TypeVar("_T", int, float)

TransportMode = Literal["structured", "raw"]


def _get_required_env(name: str) -> str:
    """Read a required env var or raise a helpful error."""
    value = os.getenv(name, "").strip()
    if not value:
        raise ValueError(f"{name} is required. Please set it in your .env file.")
    if value.startswith("your_") and value.endswith("_here"):
        raise ValueError(f"{name} is required. Please replace the placeholder value in your .env file.")
    return value


def _get_optional_env(name: str) -> str | None:
    """Read an optional string env var; blank values count as unset."""
    value = os.getenv(name, "").strip()
    return value or None


def _get_env_number(name: str, default: _T, cast: type[_T]) -> _T:
    """Read an int/float env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a {cast.__name__}. Got: {raw!r}") from exc


class DatadogLogsConfig(BaseModel):
    """Configuration for shipping log batches to the Datadog logs intake."""

    api_key: str = Field(..., repr=False, description="Datadog API key")
    url: str = Field(default="http-intake.logs.datadoghq.com", description="Intake host name")
    port: int = Field(default=443, ge=1, le=65535, description="Intake port")

    max_batch_length: int = Field(default=50, gt=0, description="Max records per request")
    transport_mode: TransportMode = Field(default="structured", description="Payload layout")
    timeout_seconds: float | None = Field(default=None, gt=0, description="HTTP timeout; None waits forever")

    # Metadata merged into every structured payload.
    source: str | None = Field(default="kafka-connect", description="ddsource attribute")
    tags: str | None = Field(default=None, description="Comma separated ddtags")
    hostname: str | None = Field(default=None, description="hostname attribute")
    service: str | None = Field(default=None, description="service attribute")

    @property
    def intake_url(self) -> str:
        """Get the full intake URL, including the API key path segment."""
        return self.metadata.intake_url

    @property
    def metadata(self) -> DeliveryMetadata:
        """Delivery metadata derived from this configuration."""
        return DeliveryMetadata(
            host=self.url,
            port=self.port,
            api_key=self.api_key,
            source=self.source,
            tags=self.tags,
            hostname=self.hostname,
            service=self.service,
        )

    @field_validator("api_key")
    def validate_api_key(cls, v: str) -> str:
        """Validate api key is set (not empty/placeholder)."""
        if not v or not v.strip() or v == "your_datadog_api_key_here":
            raise ValueError("DATADOG_API_KEY is required. Please set it in your .env file.")
        return v.strip()

    @field_validator("url")
    def validate_url(cls, v: str) -> str:
        """Accept a bare host name; a scheme or path would corrupt the intake URL."""
        host = v.strip()
        if not host:
            raise ValueError("DATADOG_URL must not be empty.")
        if "://" in host or "/" in host:
            raise ValueError(
                f"DATADOG_URL must be a host name such as 'http-intake.logs.datadoghq.com'. Got: {v!r}"
            )
        return host


class Config(BaseModel):
    """Top-level application configuration."""

    datadog: DatadogLogsConfig = Field(..., description="Datadog logs configuration")


def load_config() -> Config:
    """Build the intake settings from `DATADOG_*` variables.

    Unset optional variables fall back to the model defaults; the transport
    mode is case-insensitive. Raises `ValueError` naming the offending variable
    when the API key is missing or a number does not parse.
    """
    # Real environment wins over `.env`.
    dotenv.load_dotenv()

    timeout_raw = _get_optional_env("DATADOG_TIMEOUT_SECONDS")
    datadog = DatadogLogsConfig(
        api_key=_get_required_env("DATADOG_API_KEY"),
        url=os.getenv("DATADOG_URL", "").strip() or "http-intake.logs.datadoghq.com",
        port=_get_env_number("DATADOG_PORT", 443, int),
        max_batch_length=_get_env_number("DATADOG_MAX_BATCH_LENGTH", 50, int),
        transport_mode=(os.getenv("DATADOG_TRANSPORT_MODE", "").strip().lower() or "structured"),
        timeout_seconds=_get_env_number("DATADOG_TIMEOUT_SECONDS", 0.0, float) if timeout_raw else None,
        source=_get_optional_env("DATADOG_SOURCE") or "kafka-connect",
        tags=_get_optional_env("DATADOG_TAGS"),
        hostname=_get_optional_env("DATADOG_HOSTNAME"),
        service=_get_optional_env("DATADOG_SERVICE"),
    )
    return Config(datadog=datadog)
