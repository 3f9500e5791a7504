"""End-to-end: client -> scribe server over a real framed Thrift connection."""

import json
import socket
import threading

from loglens.client import new_client
from loglens.config import ClientConfig
from loglens.models import LogRecord, LogSource
from loglens.transport import ResultCode


def test_records_reach_collector(scribe_server):
    host, port, handler = scribe_server
    config = ClientConfig(host=host, port=port, echo=False)

    with new_client(config) as client:
        source = LogSource(message="Here is a loglens message", username="peacock", tag="python")
        assert client.log(LogRecord(index="peacock", source=source, severity="INFO")) == ResultCode.OK
        assert client.error(LogRecord(index="peacock", source=LogSource(message="disk full"))) == ResultCode.OK
        assert client.simple_log("WARN", "cache miss", "peacock") == ResultCode.OK

    assert [e.category for e in handler.entries] == ["loglens"] * 3
    payloads = [json.loads(e.message) for e in handler.entries]

    assert [p["type"] for p in payloads] == ["INFO", "ERROR", "WARN"]
    assert payloads[0]["source"]["tag"] == "python"
    assert payloads[0]["source"]["username"] == "peacock"
    assert "tag" not in payloads[2]["source"]
    assert all(p["source"]["hostname"] == socket.gethostname() for p in payloads)
    assert len({p["id"] for p in payloads}) == 3
    stamps = [p["source"]["@timestamp"] for p in payloads]
    assert stamps == sorted(stamps)


def test_shared_client_across_threads(scribe_server):
    host, port, handler = scribe_server
    config = ClientConfig(host=host, port=port, echo=False)

    with new_client(config) as client:
        def worker(n):
            for i in range(10):
                client.simple_log("INFO", f"thread {n} msg {i}", "peacock")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

    messages = {json.loads(e.message)["source"]["message"] for e in handler.entries}
    assert len(handler.entries) == 50
    assert messages == {f"thread {n} msg {i}" for n in range(5) for i in range(10)}
