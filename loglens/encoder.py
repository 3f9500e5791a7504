"""Serialize log records to the compact JSON payload the collector parses."""

import json

from loglens.errors import EncodingError
from loglens.models import LogRecord

# Source fields dropped from the payload when empty
OPTIONAL_SOURCE_FIELDS = ("tag", "type", "username")


def record_to_dict(record: LogRecord) -> dict:
    """Map a record onto the collector's field names, in wire order."""
    src = record.source
    source: dict = {"message": src.message}
    for name in OPTIONAL_SOURCE_FIELDS:
        value = getattr(src, name)
        if value:
            source[name] = value
    source["hostname"] = src.hostname
    source["@timestamp"] = src.timestamp

    return {
        "index": record.index,
        "source": source,
        "type": record.severity,
        "id": record.id,
    }


def encode_record(record: LogRecord) -> str:
    """Serialize a record to compact JSON.

    Raises:
        EncodingError: If a field is not JSON-serializable or the result is
            not valid UTF-8 (e.g. lone surrogates in a message).
    """
    data = record_to_dict(record)
    for key in ("index", "type", "id"):
        if not isinstance(data[key], str):
            raise EncodingError(f"Field {key!r} must be a string, got {type(data[key]).__name__}")
    for key, value in data["source"].items():
        if not isinstance(value, str):
            raise EncodingError(f"Field 'source.{key}' must be a string, got {type(value).__name__}")

    try:
        payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        payload.encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Cannot encode log record: {e}") from e
    return payload
