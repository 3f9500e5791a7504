"""Loglens client: build, encode and ship log records to a Scribe collector.

Example::

    client = new_client()

    # Explicit record
    source = LogSource(message="Here is a loglens message", username="peacock", tag="python")
    client.log(LogRecord(index="peacock", source=source, severity="INFO"))

    # Severity helpers overwrite the record's severity
    client.error(LogRecord(index="peacock", source=LogSource(message="disk full")))

    # One-liner
    client.simple_log("WARN", "cache miss", "peacock")
"""

import logging
from typing import Callable

from loglens.builder import build_record
from loglens.config import ClientConfig
from loglens.encoder import encode_record
from loglens.errors import EncodingError
from loglens.models import ERROR, INFO, WARN, LogRecord, create_record
from loglens.transport import ResultCode, ScribeTransport

logger = logging.getLogger(__name__)


def print_echo(line: str):
    print(line, flush=True)


class LoglensClient:
    """Sends log records under one category over one owned transport.

    *transport* is any object with ``send(category, payload)`` and
    ``close()``; it is never reopened. *echo* receives a short
    ``[timestamp severity] message`` line for every send (None disables it).
    """

    def __init__(self, category: str, transport,
                 echo: Callable[[str], None] | None = print_echo):
        self._category = category
        self._transport = transport
        self._echo = echo

    @property
    def category(self) -> str:
        return self._category

    @property
    def transport(self):
        return self._transport

    def log(self, record: LogRecord) -> ResultCode:
        """Stamp, enrich, encode and send *record*; return the collector's result code."""
        build_record(record)
        if self._echo is not None:
            self._echo(f"[{record.source.timestamp} {record.severity}] {record.source.message}")
        payload = encode_record(record)
        return self.raw_log(payload)

    def raw_log(self, payload: str) -> ResultCode:
        """Send an already-encoded payload under this client's category.

        Raises:
            EncodingError: If *payload* is not a str or not valid UTF-8.
        """
        if not isinstance(payload, str):
            raise EncodingError(f"Payload must be a string, got {type(payload).__name__}")
        try:
            payload.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingError(f"Payload is not valid UTF-8: {e}") from e
        return self._transport.send(self._category, payload)

    def info(self, record: LogRecord) -> ResultCode:
        record.severity = INFO
        return self.log(record)

    def warn(self, record: LogRecord) -> ResultCode:
        record.severity = WARN
        return self.log(record)

    def error(self, record: LogRecord) -> ResultCode:
        record.severity = ERROR
        return self.log(record)

    def simple_log(self, severity: str, message: str, index: str) -> ResultCode:
        return self.log(create_record(message, index, severity))

    def close(self):
        self._transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def new_client(config: ClientConfig | None = None) -> LoglensClient:
    """Connect to the configured collector and return a ready client.

    Defaults to category ``loglens`` on ``localhost:1463``.

    Raises:
        LoglensConnectionError: If the collector cannot be reached.
    """
    if config is None:
        config = ClientConfig()
    transport = ScribeTransport.open(config.host, config.port, timeout=config.timeout)
    logger.info("Loglens client ready: category=%s, server=%s:%s",
                config.category, config.host, config.port)
    return LoglensClient(config.category, transport, echo=print_echo if config.echo else None)
