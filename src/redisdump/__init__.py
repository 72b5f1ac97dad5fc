"""redisdump - dump a Redis server as replayable commands."""

from .commands.serializers import CommandSerializer, RESPSerializer, Serializer, get_serializer
from .config import DumpConfig
from .dump import dump_db, dump_server, parse_keyspace_info, run_dump
from .dump_queue.key_types import KeyType
from .dump_queue.models import Batch, Command, ProgressNotification
from .errors import (
    DumpError,
    KeyspaceError,
    KeyspaceParseError,
    KeyspaceRangeError,
    RedisDumpError,
    SetupError,
    SinkError,
    TransportError,
    UnrecognizedTypeError,
)
from .sinks import Sink, output_sink

__all__ = [
    "CommandSerializer",
    "RESPSerializer",
    "Serializer",
    "get_serializer",
    "DumpConfig",
    "dump_db",
    "dump_server",
    "parse_keyspace_info",
    "run_dump",
    "KeyType",
    "Batch",
    "Command",
    "ProgressNotification",
    "DumpError",
    "KeyspaceError",
    "KeyspaceParseError",
    "KeyspaceRangeError",
    "RedisDumpError",
    "SetupError",
    "SinkError",
    "TransportError",
    "UnrecognizedTypeError",
    "Sink",
    "output_sink",
]
