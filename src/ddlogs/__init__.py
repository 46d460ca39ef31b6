"""Batching and delivery of log records to the Datadog logs intake.

Records are buffered by a `DatadogLogsWriter`, rendered by a payload formatter,
gzip-compressed and POSTed to `https://<host>:<port>/v1/input/<api-key>`.
"""

from .batch import RecordBatch
from .client import (
    DatadogLogsClient,
    DatadogLogsHttpError,
    DatadogLogsTransportError,
    DeliveryError,
    DeliveryFailure,
    DeliveryResult,
    DeliverySuccess,
)
from .compression import compress, decompress
from .encoder import JsonRecordEncoder, RecordEncoder, RecordEncodingError
from .formatter import PayloadFormatter, RawPayloadFormatter, StructuredPayloadFormatter, build_formatter
from .models import DeliveryMetadata, JsonValue, RawValue, SinkRecord, ValueSchema
from .writer import DatadogLogsWriter

__all__ = [
    "DatadogLogsClient",
    "DatadogLogsHttpError",
    "DatadogLogsTransportError",
    "DatadogLogsWriter",
    "DeliveryError",
    "DeliveryFailure",
    "DeliveryMetadata",
    "DeliveryResult",
    "DeliverySuccess",
    "JsonRecordEncoder",
    "JsonValue",
    "PayloadFormatter",
    "RawPayloadFormatter",
    "RawValue",
    "RecordBatch",
    "RecordEncoder",
    "RecordEncodingError",
    "SinkRecord",
    "StructuredPayloadFormatter",
    "ValueSchema",
    "build_formatter",
    "compress",
    "decompress",
]
