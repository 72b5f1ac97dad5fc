import logging
import threading
from typing import Optional

from ..dump_queue.queue import HandoffQueue
from ..errors import DumpError, RedisDumpError

logger = logging.getLogger(__name__)


class ErrorCollector:
    """
    Collects per-key errors from every worker on one thread.

    Each error is logged as "Error: ..." and counted. The dispatcher
    reads `count` to stop handing out batches after the first error.
    A fatal error (the output cannot be written) is kept in `fatal` so
    the dump can be aborted once the workers have stopped.
    """

    def __init__(self):
        self._errors: HandoffQueue[DumpError] = HandoffQueue(name="errors")
        self._count = 0
        self._fatal: Optional[RedisDumpError] = None
        self._lock = threading.Lock()
        self._thread = threading.Thread(
            target=self._collect, daemon=True, name="ErrorCollector"
        )

    def start(self) -> None:
        self._thread.start()

    def report(self, error: DumpError) -> None:
        """
        Hand an error to the collector, blocking until it is accepted.

        The error is counted before report() returns.
        """
        with self._lock:
            self._count += 1
        self._errors.put(error)

    def fail(self, error: RedisDumpError) -> None:
        """Record an error that must abort the dump. Only the first one is kept."""
        with self._lock:
            self._count += 1
            if self._fatal is not None:
                return
            self._fatal = error

        logger.error(f"Fatal: {error}")

    def close(self) -> None:
        """Stop collecting once every reported error has been logged."""
        self._errors.close()
        if self._thread.is_alive():
            self._thread.join()

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    @property
    def fatal(self) -> Optional[RedisDumpError]:
        with self._lock:
            return self._fatal

    def _collect(self) -> None:
        for error in self._errors:
            logger.error(f"Error: {error}")
