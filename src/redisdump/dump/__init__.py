from .connection import connect
from .dispatcher import dispatch_batches, dump_db
from .keyspace import get_db_indexes, parse_keyspace_info
from .server import dump_server, run_dump

__all__ = [
    "connect",
    "dispatch_batches",
    "dump_db",
    "get_db_indexes",
    "parse_keyspace_info",
    "dump_server",
    "run_dump",
]
