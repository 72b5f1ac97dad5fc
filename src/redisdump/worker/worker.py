import logging
import threading

from ..dump_queue.models import Batch
from ..dump_queue.queue import HandoffQueue
from ..errors import DumpError, SinkError
from .collector import ErrorCollector
from .fetcher import KeyFetcher

logger = logging.getLogger(__name__)


class DumpWorker:
    """
    One member of the dump worker pool.

    Responsibilities:
    - Take batches from the shared work queue until it is closed and drained
    - Dump every key of a batch through the KeyFetcher
    - Report failures to the ErrorCollector and carry on with the next key
    - Stop dumping once the output sink has failed
    """

    def __init__(
        self,
        worker_id: int,
        batches: HandoffQueue[Batch],
        fetcher: KeyFetcher,
        collector: ErrorCollector,
    ):
        """
        Args:
            worker_id (int): Index in the pool, used for thread and log names.
            batches (HandoffQueue): Work queue shared by the pool.
            fetcher (KeyFetcher): Dumps a single key.
            collector (ErrorCollector): Receives per-key errors.
        """
        self.worker_id = worker_id
        self.batches = batches
        self.fetcher = fetcher
        self.collector = collector
        self._thread = threading.Thread(
            target=self.run, daemon=True, name=f"DumpWorker-{worker_id}"
        )

    def start(self) -> None:
        self._thread.start()

    def join(self) -> None:
        """Wait until the worker has drained the queue and stopped."""
        self._thread.join()

    def run(self) -> None:
        """
        Worker loop. Returns once the work queue is closed and empty.
        """
        logger.debug(f"Worker {self.worker_id} started")

        for batch in self.batches:
            self._process_batch(batch)

        logger.debug(f"Worker {self.worker_id} stopped")

    def _process_batch(self, batch: Batch) -> None:
        logger.debug(
            f"Worker {self.worker_id}: keys {batch.start}-{batch.end} ({len(batch)} keys)"
        )

        for key in batch:
            # Output is broken; drain the queue without dumping anything
            if self.collector.fatal is not None:
                return

            try:
                self.fetcher.dump_key(key)
            except DumpError as e:
                self.collector.report(e)
            except SinkError as e:
                self.collector.fail(e)
            except Exception as e:
                # Unexpected failure; still only this key is lost
                logger.error(
                    f"Worker {self.worker_id}: unexpected error on {key}: {e}",
                    exc_info=True,
                )
                self.collector.report(DumpError(key, e))
