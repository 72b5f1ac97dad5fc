"""Command builders.

Pure functions turning a decoded Redis value into the command that
recreates it. No I/O happens here.
"""

from typing import Dict, Iterable, Sequence

from ..dump_queue.models import Command


def select_command(db: int) -> Command:
    return ("SELECT", str(db))


def string_command(key: str, value: str) -> Command:
    return ("SET", key, value)


def list_command(key: str, values: Sequence[str]) -> Command:
    return ("RPUSH", key, *values)


def set_command(key: str, members: Iterable[str]) -> Command:
    return ("SADD", key, *members)


def hash_command(key: str, fields: Dict[str, str]) -> Command:
    """Build HSET, each field immediately followed by its own value."""
    cmd = ["HSET", key]
    for field, value in fields.items():
        cmd.extend((field, value))
    return tuple(cmd)


def zset_command(key: str, members_with_scores: Sequence[str]) -> Command:
    """
    Build ZADD from a flat ZRANGEBYSCORE ... WITHSCORES reply.

    The reply alternates member, score. Even positions are members, the
    following odd position is that member's score. ZADD wants score first,
    so each pair is re-emitted as score, member. Order is preserved.
    """
    cmd = ["ZADD", key]
    pairs = zip(members_with_scores[0::2], members_with_scores[1::2])
    for member, score in pairs:
        cmd.extend((score, member))
    return tuple(cmd)


def expireat_command(key: str, timestamp: int) -> Command:
    return ("EXPIREAT", key, str(timestamp))


def ttl_command(key: str, ttl: int, now: float) -> Command:
    """Turn a relative TTL read at time `now` into an absolute EXPIREAT."""
    return expireat_command(key, int(now) + ttl)
