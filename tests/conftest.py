"""Shared fixtures: an in-memory Redis server and a list-backed sink."""

import threading

import fakeredis
import pytest


class ListSink:
    """Thread-safe sink collecting every serialized command."""

    def __init__(self):
        self.lines = []
        self._lock = threading.Lock()

    def __call__(self, line: str) -> None:
        with self._lock:
            self.lines.append(line)


@pytest.fixture
def server():
    """A fresh fakeredis server shared by every client of a test."""
    return fakeredis.FakeServer()


@pytest.fixture
def client_factory(server):
    """Client factory handing out fakeredis clients bound to the requested db."""

    def factory(redis_url, db, max_connections):
        return fakeredis.FakeRedis(server=server, db=db, decode_responses=True)

    return factory


@pytest.fixture
def redis_db0(server):
    """A client on db 0 used to seed test data."""
    return fakeredis.FakeRedis(server=server, db=0, decode_responses=True)


@pytest.fixture
def sink():
    return ListSink()
