import logging
from typing import Optional

from ..commands.serializers import Serializer, get_serializer
from ..config import BATCH_SIZE, MAX_DATABASES, DumpConfig
from ..sinks import Sink
from . import connection
from .dispatcher import ProgressCallback, dump_db
from .keyspace import get_db_indexes

logger = logging.getLogger(__name__)


def dump_server(
    redis_url: str,
    n_workers: int,
    sink: Sink,
    serializer: Serializer,
    progress: Optional[ProgressCallback] = None,
    *,
    max_databases: int = MAX_DATABASES,
    batch_size: int = BATCH_SIZE,
    key_pattern: str = "*",
    with_ttl: bool = True,
    client_factory: Optional[connection.ClientFactory] = None,
) -> None:
    """
    Dump every non-empty database of a server, one database after the other.

    The first database-level error aborts the whole dump.

    Raises:
        SetupError: If the server cannot be queried or a database cannot be dumped.
        KeyspaceError: If INFO keyspace cannot be parsed.
    """
    dbs = get_db_indexes(redis_url, max_databases, client_factory)

    for db in dbs:
        dump_db(
            redis_url,
            db,
            n_workers,
            sink,
            serializer,
            progress,
            batch_size=batch_size,
            key_pattern=key_pattern,
            with_ttl=with_ttl,
            client_factory=client_factory,
        )


def run_dump(
    config: DumpConfig,
    sink: Sink,
    progress: Optional[ProgressCallback] = None,
    client_factory: Optional[connection.ClientFactory] = None,
) -> None:
    """
    Run the dump described by `config`: one database if config.db is set,
    the whole server otherwise.
    """
    config.validate()
    serializer = get_serializer(config.output)

    options = dict(
        batch_size=config.batch_size,
        key_pattern=config.key_pattern,
        with_ttl=config.with_ttl,
        client_factory=client_factory,
    )

    if config.db is not None:
        dump_db(config.redis_url, config.db, config.workers, sink, serializer, progress, **options)
    else:
        dump_server(
            config.redis_url,
            config.workers,
            sink,
            serializer,
            progress,
            max_databases=config.max_databases,
            **options,
        )
