"""Populate the generated fields of a log record at send time."""

import logging
import os
import socket
import uuid
from datetime import datetime, timezone

from loglens.errors import RandomnessUnavailableError, ValidationError
from loglens.models import LogRecord

logger = logging.getLogger(__name__)


def stamp(now: datetime | None = None) -> str:
    """Format *now* (default: current time) as the collector's timestamp.

    RFC 3339 in UTC at second precision, with the trailing ``Z`` replaced
    by ``.000``: ``2024-01-01T00:00:00.000``. Naive datetimes are taken
    as UTC.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S") + ".000"


def generate_id() -> str:
    """Return 128 random bits as a hyphenated 8-4-4-4-12 hex string."""
    try:
        return str(uuid.UUID(bytes=os.urandom(16)))
    except (NotImplementedError, OSError) as e:
        raise RandomnessUnavailableError(f"Cannot generate record id: {e}") from e


def resolve_hostname() -> str:
    """Look up this machine's hostname, or return '' if the lookup fails."""
    try:
        return socket.gethostname()
    except OSError as e:
        logger.debug("Hostname lookup failed, sending without one: %s", e)
        return ""


def validate_record(record: LogRecord):
    """Raise ValidationError unless index and source.message are non-empty."""
    if not record.index:
        raise ValidationError("Log record index is required")
    if record.source is None:
        raise ValidationError("Log record source is required")
    if not record.source.message:
        raise ValidationError("Log record message is required")


def build_record(record: LogRecord) -> LogRecord:
    """Validate *record* and fill in timestamp, hostname and id in place."""
    validate_record(record)
    record.source.timestamp = stamp()
    record.source.hostname = resolve_hostname()
    record.id = generate_id()
    return record
