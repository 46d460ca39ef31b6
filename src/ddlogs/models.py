"""Record and metadata models for the logs shipper.

Records arrive from an upstream consumer (e.g. a Kafka sink task) and are held
by the writer only until the next flush. Values are a tagged union so the
payload formatters can dispatch on the variant instead of inspecting types.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class JsonValue(_Model):
    """A structured value that the record encoder turns into a JSON document."""

    kind: Literal["json"] = "json"
    data: Any = None

    def render(self) -> str:
        """Compact JSON text, used when the value is shipped without an envelope."""
        return json.dumps(self.data, separators=(",", ":"), ensure_ascii=False, default=str)


class RawValue(_Model):
    """A value that is already a log line and is shipped as-is."""

    kind: Literal["raw"] = "raw"
    text: str

    def render(self) -> str:
        return self.text


RecordValue = Annotated[Union[JsonValue, RawValue], Field(discriminator="kind")]


class ValueSchema(_Model):
    """Opaque description of a record value, handed through to the encoder."""

    type: str = "struct"
    name: str | None = None
    optional: bool = True


class SinkRecord(_Model):
    """A single record handed to the writer by the upstream consumer.

    Only `value` is ever transmitted. `key`, `partition` and `offset` are the
    upstream coordinates and exist for the caller's bookkeeping.
    """

    topic: str
    value: RecordValue | None = None
    value_schema: ValueSchema | None = None

    key: str | None = None
    partition: int | None = None
    offset: int | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _wrap_plain_value(cls, value: Any) -> Any:
        """Coerce plain Python values into a `RecordValue` variant.

        Strings become `RawValue`; anything else (dicts, lists, numbers) becomes
        `JsonValue` unchanged, whatever keys a mapping happens to carry. Only
        actual `JsonValue` / `RawValue` instances count as already tagged.
        """
        if value is None or isinstance(value, (JsonValue, RawValue)):
            return value
        if isinstance(value, str):
            return RawValue(text=value)
        return JsonValue(data=value)


class DeliveryMetadata(_Model):
    """Configuration-scoped fields attached to every request."""

    host: str
    port: int
    api_key: str = Field(repr=False)

    source: str | None = None
    tags: str | None = None
    hostname: str | None = None
    service: str | None = None

    @property
    def intake_url(self) -> str:
        return f"https://{self.host}:{self.port}/v1/input/{self.api_key}"

    def envelope_fields(self) -> dict[str, str]:
        """Metadata attributes for a structured payload, absent ones omitted.

        Key order is fixed: ddsource, ddtags, hostname, service.
        """
        fields = {
            "ddsource": self.source,
            "ddtags": self.tags,
            "hostname": self.hostname,
            "service": self.service,
        }
        return {k: v for k, v in fields.items() if v is not None}
