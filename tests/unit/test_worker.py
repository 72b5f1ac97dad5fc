"""Unit tests for DumpWorker and ErrorCollector."""

import logging
import threading

from redisdump.dump_queue.models import Batch
from redisdump.dump_queue.queue import HandoffQueue
from redisdump.errors import DumpError, SinkError, TransportError
from redisdump.worker.collector import ErrorCollector
from redisdump.worker.worker import DumpWorker


class StubFetcher:
    """Records dumped keys; fails on the configured ones."""

    def __init__(self, failures=None):
        self.failures = failures or {}
        self.dumped = []
        self._lock = threading.Lock()

    def dump_key(self, key):
        if key in self.failures:
            raise self.failures[key]
        with self._lock:
            self.dumped.append(key)


def run_worker(batches, fetcher, collector):
    queue = HandoffQueue()
    worker = DumpWorker(0, queue, fetcher, collector)
    worker.start()
    for batch in batches:
        queue.put(batch)
    queue.close()
    worker.join()


def test_collector_counts_and_logs(caplog):
    collector = ErrorCollector()
    collector.start()

    with caplog.at_level(logging.ERROR, logger="redisdump.worker.collector"):
        collector.report(TransportError("a", "boom"))
        collector.report(TransportError("b", "boom"))
        collector.close()

    assert collector.count == 2
    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["Error: Key a: boom", "Error: Key b: boom"]


def test_collector_close_without_errors():
    collector = ErrorCollector()
    collector.start()
    collector.close()
    assert collector.count == 0


def test_worker_dumps_every_key_in_order():
    fetcher = StubFetcher()
    collector = ErrorCollector()
    collector.start()

    run_worker(
        [Batch(("a", "b"), 0, 2), Batch(("c",), 2, 3)], fetcher, collector
    )
    collector.close()

    assert fetcher.dumped == ["a", "b", "c"]
    assert collector.count == 0


def test_worker_continues_after_key_error():
    fetcher = StubFetcher(failures={"b": TransportError("b", "timeout")})
    collector = ErrorCollector()
    collector.start()

    run_worker([Batch(("a", "b", "c"), 0, 3)], fetcher, collector)
    collector.close()

    assert fetcher.dumped == ["a", "c"]
    assert collector.count == 1


def test_worker_reports_unexpected_errors(caplog):
    fetcher = StubFetcher(failures={"a": RuntimeError("bug")})
    collector = ErrorCollector()
    collector.start()

    with caplog.at_level(logging.ERROR):
        run_worker([Batch(("a", "b"), 0, 2)], fetcher, collector)
        collector.close()

    assert fetcher.dumped == ["b"]
    assert collector.count == 1
    assert any("Error: Key a: bug" in r.getMessage() for r in caplog.records)


def test_worker_stops_when_queue_closed():
    collector = ErrorCollector()
    collector.start()
    queue = HandoffQueue()
    worker = DumpWorker(3, queue, StubFetcher(), collector)
    worker.start()

    queue.close()
    worker.join()
    collector.close()

    assert not worker._thread.is_alive()
    assert worker._thread.name == "DumpWorker-3"


def test_dump_error_message():
    err = DumpError("k", "reason")
    assert str(err) == "Key k: reason"


def test_sink_failure_is_fatal_and_stops_dumping(caplog):
    """Once the output is broken, no further key is dumped and the error is kept."""
    failure = SinkError("Could not write dump output: disk full")
    fetcher = StubFetcher(failures={"a": failure})
    collector = ErrorCollector()
    collector.start()

    with caplog.at_level(logging.ERROR, logger="redisdump.worker.collector"):
        run_worker(
            [Batch(("a", "b", "c"), 0, 3), Batch(("d",), 3, 4)], fetcher, collector
        )
        collector.close()

    assert fetcher.dumped == []
    assert collector.fatal is failure
    assert collector.count == 1
    assert any(r.getMessage().startswith("Fatal: ") for r in caplog.records)


def test_collector_keeps_first_fatal_error():
    collector = ErrorCollector()
    first, second = SinkError("first"), SinkError("second")

    collector.fail(first)
    collector.fail(second)

    assert collector.fatal is first
    assert collector.count == 2
