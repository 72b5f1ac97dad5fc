import logging
import threading
from typing import Generic, Iterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueueClosed(Exception):
    """Raised when putting into, or getting from, a closed and drained queue."""
    pass


class HandoffQueue(Generic[T]):
    """
    Unbuffered in-memory queue between one producer and many consumers.

    Design rules:
    - put() blocks until a consumer has taken the item (backpressure)
    - close() wakes everybody; consumers drain what was handed off, then stop
    - items are delivered exactly once
    """

    def __init__(self, name: str = "queue"):
        self.name = name
        self._cond = threading.Condition()
        self._item = None
        self._has_item = False
        self._closed = False
        self._put_seq = 0
        self._get_seq = 0

    # ------------------------------------------------------------------
    # PRODUCER
    # ------------------------------------------------------------------

    def put(self, item: T) -> None:
        """
        Hand an item to a consumer, blocking until one takes it.

        Raises:
            QueueClosed: If the queue was closed before the item was accepted.
        """
        with self._cond:
            while self._has_item and not self._closed:
                self._cond.wait()

            if self._closed:
                raise QueueClosed(f"{self.name} is closed")

            self._item = item
            self._has_item = True
            self._put_seq += 1
            ticket = self._put_seq
            self._cond.notify_all()

            while self._get_seq < ticket:
                self._cond.wait()

    def close(self) -> None:
        """Stop accepting items. Consumers exit once the queue is drained."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

        logger.debug(f"{self.name}: closed")

    # ------------------------------------------------------------------
    # CONSUMER
    # ------------------------------------------------------------------

    def get(self) -> T:
        """
        Take the next item, blocking until one is handed off.

        Raises:
            QueueClosed: If the queue is closed and has nothing left.
        """
        with self._cond:
            while not self._has_item and not self._closed:
                self._cond.wait()

            if not self._has_item:
                raise QueueClosed(f"{self.name} is closed")

            item = self._item
            self._item = None
            self._has_item = False
            self._get_seq += 1
            self._cond.notify_all()
            return item

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except QueueClosed:
                return

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed
