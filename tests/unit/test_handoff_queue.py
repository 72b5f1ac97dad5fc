"""Unit tests for the unbuffered HandoffQueue."""

import threading
import time

import pytest

from redisdump.dump_queue.queue import HandoffQueue, QueueClosed


def test_put_blocks_until_taken():
    """The producer only returns once a consumer has accepted the item."""
    q = HandoffQueue()
    returned = threading.Event()

    def produce():
        q.put("batch")
        returned.set()

    producer = threading.Thread(target=produce)
    producer.start()

    # Nobody is consuming yet
    assert not returned.wait(0.2)

    assert q.get() == "batch"
    assert returned.wait(2.0)
    producer.join()


def test_items_delivered_once_in_order_to_single_consumer():
    q = HandoffQueue()
    received = []

    consumer = threading.Thread(target=lambda: received.extend(q))
    consumer.start()

    for i in range(20):
        q.put(i)
    q.close()
    consumer.join(timeout=5.0)

    assert received == list(range(20))


def test_many_consumers_drain_everything():
    q = HandoffQueue()
    received = []
    lock = threading.Lock()

    def consume():
        for item in q:
            with lock:
                received.append(item)
            time.sleep(0.001)

    consumers = [threading.Thread(target=consume) for _ in range(4)]
    for c in consumers:
        c.start()

    for i in range(100):
        q.put(i)
    q.close()
    for c in consumers:
        c.join(timeout=5.0)
        assert not c.is_alive()

    assert sorted(received) == list(range(100))


def test_close_stops_idle_consumers():
    q = HandoffQueue()
    consumer = threading.Thread(target=lambda: list(q))
    consumer.start()

    q.close()
    consumer.join(timeout=2.0)

    assert not consumer.is_alive()
    assert q.closed


def test_put_after_close_raises():
    q = HandoffQueue()
    q.close()
    with pytest.raises(QueueClosed):
        q.put("late")


def test_get_after_close_raises():
    q = HandoffQueue()
    q.close()
    with pytest.raises(QueueClosed):
        q.get()
