"""Exception hierarchy for redisdump.

Per-key failures (DumpError and subclasses) are reported and skipped.
Keyspace and setup failures abort the whole dump.
"""


class RedisDumpError(Exception):
    """Base exception for all redisdump errors."""
    pass


class DumpError(RedisDumpError):
    """Raised when a single key could not be dumped."""

    def __init__(self, key: str, reason):
        self.key = key
        self.reason = reason
        super().__init__(f"Key {key}: {reason}")


class TransportError(DumpError):
    """Raised when a Redis query for a key fails."""
    pass


class UnrecognizedTypeError(DumpError):
    """Raised when a key reports a type redisdump cannot dump."""

    def __init__(self, key: str, key_type: str):
        self.key_type = key_type
        super().__init__(key, f"unrecognized type {key_type}")


class KeyspaceError(RedisDumpError, ValueError):
    """Raised when the INFO keyspace report cannot be used."""
    pass


class KeyspaceParseError(KeyspaceError):
    """Raised when a database index in the keyspace report is not a number."""
    pass


class KeyspaceRangeError(KeyspaceError):
    """Raised when a database index is beyond the supported database count."""
    pass


class SetupError(RedisDumpError):
    """Raised when connecting, selecting or listing keys fails."""
    pass


class SinkError(RedisDumpError):
    """Raised when the dump output cannot be written."""
    pass
