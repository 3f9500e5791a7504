"""Exception hierarchy raised by the send path."""


class LoglensError(Exception):
    """Base class for every error the client raises."""


class ValidationError(LoglensError, ValueError):
    """A required record field is missing or empty."""


class EncodingError(LoglensError, ValueError):
    """The record could not be serialized to a JSON payload."""


class RandomnessUnavailableError(LoglensError, RuntimeError):
    """The OS randomness source could not produce a record id."""


class TransportError(LoglensError):
    """The RPC layer rejected or failed a call."""


class LoglensConnectionError(TransportError, ConnectionError):
    """The collector connection could not be opened, was lost, or is closed."""
