"""Scribe RPC transport: a framed binary Thrift client with one lock per connection."""

import logging
import os
import threading
from enum import IntEnum

import thriftpy2
from thriftpy2.protocol import TBinaryProtocolFactory
from thriftpy2.rpc import make_client
from thriftpy2.thrift import TException
from thriftpy2.transport import TFramedTransportFactory, TTransportException

from loglens.errors import LoglensConnectionError, TransportError

logger = logging.getLogger(__name__)

SCRIBE_IDL = os.path.join(os.path.dirname(os.path.abspath(__file__)), "scribe.thrift")
scribe_thrift = thriftpy2.load(SCRIBE_IDL, module_name="scribe_thrift")


class ResultCode(IntEnum):
    OK = 0
    TRY_LATER = 1   # collector queue is full


class ScribeTransport:
    """Sends category-tagged payloads over one open Scribe connection.

    The transport never retries or reconnects: a failed call raises and the
    owner decides what to do. Calls are serialized so that frames from
    concurrent senders never interleave on the socket.
    """

    def __init__(self, client, host: str = "", port: int = 0):
        self._client = client
        self._host = host
        self._port = port
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def open(cls, host: str, port: int, timeout: float = 5.0) -> "ScribeTransport":
        """Connect to a Scribe collector at host:port.

        Args:
            timeout: Connect and socket timeout in seconds.

        Raises:
            LoglensConnectionError: If the connection cannot be established.
        """
        try:
            client = make_client(
                scribe_thrift.scribe,
                host=host,
                port=int(port),
                proto_factory=TBinaryProtocolFactory(),
                trans_factory=TFramedTransportFactory(),
                timeout=int(timeout * 1000),
            )
        except (TTransportException, OSError) as e:
            logger.warning("Failed to connect to %s:%s: %s", host, port, e)
            raise LoglensConnectionError(f"Could not connect to {host}:{port}: {e}") from e
        logger.info("Connected to scribe at %s:%s", host, port)
        return cls(client, host, int(port))

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, category: str, payload: str) -> ResultCode | int:
        """Deliver one payload under *category* and return the collector's result code.

        Codes outside ResultCode are returned as the raw int: the entry was
        already delivered, so they are not treated as failures.
        """
        entry = scribe_thrift.LogEntry(category=category, message=payload)
        with self._lock:
            if self._closed:
                raise LoglensConnectionError("Transport is closed")
            try:
                result = self._client.Log([entry])
            except (TTransportException, OSError) as e:
                logger.warning("Send to %s:%s failed: %s", self._host, self._port, e)
                raise LoglensConnectionError(f"Send failed: {e}") from e
            except TException as e:
                logger.warning("Scribe rejected log call: %s", e)
                raise TransportError(f"Scribe call failed: {e}") from e
        logger.debug("Sent %d bytes to category %s, result=%s", len(payload), category, result)
        try:
            return ResultCode(result)
        except ValueError:
            logger.warning("Unknown scribe result code %r for category %s", result, category)
            return result

    def close(self):
        """Close the connection. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._client.close()
        logger.info("Closed scribe connection to %s:%s", self._host, self._port)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
