"""Log record models sent to the loglens collector."""

from dataclasses import dataclass, field

INFO = "INFO"
WARN = "WARN"
ERROR = "ERROR"


@dataclass
class LogSource:
    message: str                # required
    tag: str = ""
    type: str = ""              # secondary classification, not the severity
    username: str = ""
    # Filled in by the record builder at send time
    hostname: str = field(default="", init=False)
    timestamp: str = field(default="", init=False)


@dataclass
class LogRecord:
    index: str                  # destination routing key
    source: LogSource
    severity: str = ""
    # Generated fresh for every send
    id: str = field(default="", init=False)


def create_record(message: str, index: str, severity: str = "", **source_fields) -> LogRecord:
    """Build a record from plain values; extra kwargs go to the LogSource."""
    return LogRecord(
        index=index,
        source=LogSource(message=message, **source_fields),
        severity=severity,
    )
