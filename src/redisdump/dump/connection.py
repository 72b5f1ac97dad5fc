from typing import Callable

from redis import Redis

from ..commands.serializers import ENCODING, ENCODING_ERRORS

# (redis_url, db, max_connections) → client bound to db
ClientFactory = Callable[[str, int, int], Redis]

# RESP2 replies: ZRANGEBYSCORE ... WITHSCORES stays a flat list of strings
PROTOCOL = 2


def connect(redis_url: str, db: int, max_connections: int) -> Redis:
    """
    Create a client whose pool holds up to `max_connections` connections,
    each selecting `db` when it connects.

    Nothing is sent to the server until the first command.
    """
    return Redis.from_url(
        redis_url,
        db=db,
        max_connections=max_connections,
        decode_responses=True,
        encoding=ENCODING,
        encoding_errors=ENCODING_ERRORS,
        protocol=PROTOCOL,
    )
