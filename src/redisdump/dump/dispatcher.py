import logging
from typing import Callable, List, Optional, Sequence

from redis.exceptions import RedisError

from ..commands.builders import select_command
from ..commands.serializers import Serializer
from ..config import BATCH_SIZE
from ..dump_queue.models import Batch, ProgressNotification, split_batches
from ..dump_queue.queue import HandoffQueue
from ..errors import SetupError
from ..sinks import Sink
from ..worker.collector import ErrorCollector
from ..worker.fetcher import KeyFetcher
from ..worker.worker import DumpWorker
from . import connection

logger = logging.getLogger(__name__)

# Called synchronously after every batch handoff
ProgressCallback = Callable[[ProgressNotification], None]


def dispatch_batches(
    keys: Sequence[str],
    batches: HandoffQueue[Batch],
    collector: ErrorCollector,
    progress: Optional[ProgressCallback] = None,
    batch_size: int = BATCH_SIZE,
) -> int:
    """
    Hand the keys to the worker pool one batch at a time.

    Submission stops as soon as the collector has seen an error. Batches
    already handed off are left to finish.

    Returns:
        int: Number of keys handed to the workers.
    """
    total = len(keys)
    submitted = 0

    for batch in split_batches(keys, batch_size):
        if collector.count:
            logger.warning(
                f"Stopping after {submitted}/{total} keys: {collector.count} error(s) reported"
            )
            break

        batches.put(batch)
        submitted = batch.end

        if progress is not None:
            progress(ProgressNotification(done=batch.end, total=total))

    return submitted


def dump_db(
    redis_url: str,
    db: int,
    n_workers: int,
    sink: Sink,
    serializer: Serializer,
    progress: Optional[ProgressCallback] = None,
    *,
    batch_size: int = BATCH_SIZE,
    key_pattern: str = "*",
    with_ttl: bool = True,
    client_factory: Optional[connection.ClientFactory] = None,
) -> None:
    """
    Dump every key of a single database.

    Per-key errors are logged and stop further batches, but do not raise.

    Args:
        redis_url (str): Server to dump, e.g. redis://127.0.0.1:6379.
        db (int): Database index.
        n_workers (int): Concurrent workers, and size of the connection pool.
        sink (Sink): Receives every serialized command.
        serializer (Serializer): Output format.
        progress (Optional[ProgressCallback]): Only pass a callback that returns
            promptly; the dispatcher waits for it after every batch.
        batch_size (int): Keys per batch.
        key_pattern (str): KEYS pattern selecting what to dump.
        with_ttl (bool): Emit EXPIREAT for keys with a TTL.
        client_factory (Optional[ClientFactory]): Builds the pooled client.

    Raises:
        SetupError: If the pool cannot select the database or list its keys.
        SinkError: If the output cannot be written.
        ValueError: If n_workers or batch_size is lower than 1.
    """
    if n_workers < 1:
        raise ValueError(f"n_workers must be at least 1, got {n_workers}")
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    collector = ErrorCollector()
    collector.start()

    try:
        factory = client_factory or connection.connect
        client = factory(redis_url, db, n_workers)
        try:
            keys = _prepare(client, db, sink, serializer, key_pattern)
            logger.info(f"Dumping {len(keys)} key(s) from db {db} with {n_workers} worker(s)")

            batches: HandoffQueue[Batch] = HandoffQueue(name=f"db{db}-batches")
            fetcher = KeyFetcher(client, sink, serializer, with_ttl=with_ttl)
            workers = [
                DumpWorker(i, batches, fetcher, collector) for i in range(n_workers)
            ]
            for worker in workers:
                worker.start()

            try:
                dispatch_batches(keys, batches, collector, progress, batch_size)
            finally:
                batches.close()
                for worker in workers:
                    worker.join()
        finally:
            client.close()
    finally:
        collector.close()

    if collector.fatal is not None:
        raise collector.fatal

    if collector.count:
        logger.warning(f"db {db}: dump finished with {collector.count} error(s)")
    else:
        logger.info(f"db {db}: dump finished")


def _prepare(client, db: int, sink: Sink, serializer: Serializer, key_pattern: str) -> List[str]:
    """Select the database, emit SELECT, and list the keys to dump."""
    try:
        client.execute_command("SELECT", db)
    except RedisError as e:
        raise SetupError(f"Could not select db {db}: {e}") from e

    sink(serializer.serialize(select_command(db)))

    try:
        return client.keys(key_pattern)
    except RedisError as e:
        raise SetupError(f"Could not list keys of db {db}: {e}") from e
