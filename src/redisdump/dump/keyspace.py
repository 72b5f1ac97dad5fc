import logging
import re
from typing import List, Optional

from redis.exceptions import RedisError

from ..config import MAX_DATABASES
from ..errors import KeyspaceParseError, KeyspaceRangeError, SetupError
from . import connection

logger = logging.getLogger(__name__)

_INDEX = re.compile(r"[0-9]+")


def parse_keyspace_info(keyspace_info: str, max_databases: int = MAX_DATABASES) -> List[int]:
    """
    Extract the non-empty database indexes from an INFO keyspace report.

    Only lines looking like "db<N>:keys=...,expires=..." are considered.

    Args:
        keyspace_info (str): Raw INFO keyspace reply.
        max_databases (int): Databases the server supports; valid indexes
            are 0 to max_databases - 1. With the default of 16, db16 is
            rejected on purpose even though earlier redis-dump tools let it through.

    Returns:
        List[int]: Indexes in report order, without duplicates.

    Raises:
        KeyspaceParseError: If an index is not an unsigned integer.
        KeyspaceRangeError: If an index is not below max_databases.
    """
    dbs: List[int] = []

    for line in keyspace_info.splitlines():
        line = line.strip()
        if not line.startswith("db"):
            continue

        colon = line.find(":")
        token = line[2:colon] if colon != -1 else line[2:]
        if colon == -1 or not _INDEX.fullmatch(token):
            raise KeyspaceParseError(f"Error parsing INFO keyspace: bad database index in {line!r}")

        db = int(token)
        if db >= max_databases:
            raise KeyspaceRangeError(
                f"Error parsing INFO keyspace: database {db} is beyond the "
                f"{max_databases} supported databases"
            )

        if db not in dbs:
            dbs.append(db)

    return dbs


def get_db_indexes(
    redis_url: str,
    max_databases: int = MAX_DATABASES,
    client_factory: Optional[connection.ClientFactory] = None,
) -> List[int]:
    """
    Ask the server which databases hold keys.

    Raises:
        SetupError: If the server cannot be queried.
        KeyspaceError: If the report cannot be parsed.
    """
    factory = client_factory or connection.connect
    client = factory(redis_url, 0, 1)
    try:
        # Keep INFO as raw text rather than redis-py's parsed dict
        client.set_response_callback("INFO", lambda response, **options: response)
        keyspace_info = client.execute_command("INFO", "keyspace")
    except RedisError as e:
        raise SetupError(f"Could not read INFO keyspace: {e}") from e
    finally:
        client.close()

    dbs = parse_keyspace_info(keyspace_info, max_databases)
    logger.info(f"Found {len(dbs)} non-empty database(s): {dbs}")
    return dbs
