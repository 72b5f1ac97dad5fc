from enum import Enum


class KeyType(str, Enum):
    """
    Key types as reported by the Redis TYPE command.

    Anything outside this set (stream, ReJSON-RL, ...) is not dumpable
    and is rejected by KeyType.parse.
    """

    STRING = "string"  # GET      → SET
    LIST = "list"  # LRANGE       → RPUSH
    SET = "set"  # SMEMBERS       → SADD
    HASH = "hash"  # HGETALL      → HSET
    SORTED_SET = "zset"  # ZRANGEBYSCORE → ZADD
    NONE = "none"  # key vanished, nothing to dump

    @classmethod
    def parse(cls, raw: str) -> "KeyType":
        """
        Map a raw TYPE reply to a KeyType.

        Raises:
            ValueError: If the type is not one of the known tags.
        """
        return cls(raw)
