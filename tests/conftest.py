import socket
import threading
import time

import pytest
from thriftpy2.protocol import TBinaryProtocolFactory
from thriftpy2.rpc import make_server
from thriftpy2.transport import TFramedTransportFactory

from loglens.client import LoglensClient
from loglens.transport import ResultCode, scribe_thrift


class FakeTransport:
    """Records every send instead of talking to a collector."""

    def __init__(self, result=ResultCode.OK, error=None):
        self.sent: list[tuple[str, str]] = []
        self.result = result
        self.error = error
        self.closed = False

    def send(self, category, payload):
        if self.error is not None:
            raise self.error
        self.sent.append((category, payload))
        return self.result

    def close(self):
        self.closed = True


class ScribeHandler:
    """In-process scribe collector that keeps every received entry."""

    def __init__(self):
        self.entries = []
        self.result = scribe_thrift.ResultCode.OK
        self._lock = threading.Lock()

    def Log(self, messages):
        with self._lock:
            self.entries.extend(messages)
        return self.result


def free_port() -> int:
    """Return a local port with nothing listening on it."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


def _wait_for_port(host, port, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            with socket.create_connection((host, port), timeout=0.5):
                return
        except OSError:
            time.sleep(0.05)
    raise RuntimeError(f"Scribe test server did not start on {host}:{port}")


@pytest.fixture
def scribe_server():
    """Start a scribe server on a background thread. Yields (host, port, handler)."""
    host, port = "127.0.0.1", free_port()
    handler = ScribeHandler()
    server = make_server(
        scribe_thrift.scribe,
        handler,
        host=host,
        port=port,
        proto_factory=TBinaryProtocolFactory(),
        trans_factory=TFramedTransportFactory(),
    )
    thread = threading.Thread(target=server.serve, daemon=True)
    thread.start()
    _wait_for_port(host, port)
    yield host, port, handler
    server.close()


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def echoed():
    return []


@pytest.fixture
def client(fake_transport, echoed):
    return LoglensClient("loglens", fake_transport, echo=echoed.append)
