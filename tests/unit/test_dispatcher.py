"""Unit tests for batch dispatch, progress and stop-on-error."""

import threading

import pytest

from redisdump.dump.dispatcher import dispatch_batches
from redisdump.dump_queue.queue import HandoffQueue


class FakeCollector:
    """Collector whose error count the test controls."""

    def __init__(self):
        self.count = 0


def consume(queue, received):
    thread = threading.Thread(target=lambda: received.extend(queue))
    thread.start()
    return thread


def test_dispatch_hands_over_all_batches_in_order():
    keys = [f"k{i}" for i in range(250)]
    queue = HandoffQueue()
    received = []
    consumer = consume(queue, received)

    submitted = dispatch_batches(keys, queue, FakeCollector(), batch_size=100)
    queue.close()
    consumer.join(timeout=5.0)

    assert submitted == 250
    assert [len(b) for b in received] == [100, 100, 50]
    assert [k for b in received for k in b] == keys


def test_progress_is_monotonic_and_ends_at_total():
    keys = [f"k{i}" for i in range(250)]
    queue = HandoffQueue()
    consumer = consume(queue, [])
    notifications = []

    dispatch_batches(keys, queue, FakeCollector(), notifications.append, batch_size=100)
    queue.close()
    consumer.join(timeout=5.0)

    done = [n.done for n in notifications]
    assert done == sorted(done)
    assert done == [100, 200, 250]
    assert {n.total for n in notifications} == {250}


def test_no_keys_no_progress():
    queue = HandoffQueue()
    notifications = []

    assert dispatch_batches([], queue, FakeCollector(), notifications.append) == 0
    assert notifications == []


def test_stops_submitting_after_first_error():
    """Batches handed off before the error are kept; nothing is handed off after it."""
    keys = [f"k{i}" for i in range(500)]
    queue = HandoffQueue()
    collector = FakeCollector()
    received = []

    def consume_and_fail():
        for batch in queue:
            received.append(batch)
            if len(received) == 2:
                collector.count = 1

    consumer = threading.Thread(target=consume_and_fail)
    consumer.start()

    submitted = dispatch_batches(keys, queue, collector, batch_size=100)
    queue.close()
    consumer.join(timeout=5.0)

    assert 2 <= len(received) < 5
    assert submitted == received[-1].end


def test_progress_callback_errors_propagate():
    queue = HandoffQueue()
    consumer = consume(queue, [])

    def broken(notification):
        raise RuntimeError("progress bar crashed")

    with pytest.raises(RuntimeError):
        dispatch_batches(["a"], queue, FakeCollector(), broken)
    queue.close()
    consumer.join(timeout=5.0)
