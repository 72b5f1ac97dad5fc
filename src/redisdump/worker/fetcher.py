import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from redis import Redis
from redis.exceptions import RedisError

from ..commands import builders
from ..commands.serializers import Serializer
from ..dump_queue.key_types import KeyType
from ..dump_queue.models import Command
from ..errors import TransportError, UnrecognizedTypeError
from ..sinks import Sink

logger = logging.getLogger(__name__)


def format_score(score: Any) -> str:
    """Render a score the way Redis prints it: 2 not 2.0, inf and -inf as is."""
    if isinstance(score, str):
        return score
    score = float(score)
    if score.is_integer():
        return str(int(score))
    return repr(score)


def flatten_score_pairs(reply: List[Any]) -> List[str]:
    """
    Normalize a ZRANGEBYSCORE ... WITHSCORES reply to member, score, member, score.

    RESP2 already answers flat with string scores; RESP3 answers with
    [member, score] pairs and float scores.
    """
    flat: List[str] = []
    for item in reply:
        if isinstance(item, (list, tuple)):
            member, score = item
            flat.extend((member, format_score(score)))
        else:
            flat.append(item)
    return flat


# KeyType → (read operation, command builder)
READERS: Dict[KeyType, Tuple[Callable[[Redis, str], Any], Callable[[str, Any], Command]]] = {
    KeyType.STRING: (lambda r, key: r.get(key), builders.string_command),
    KeyType.LIST: (lambda r, key: r.lrange(key, 0, -1), builders.list_command),
    KeyType.SET: (lambda r, key: r.smembers(key), builders.set_command),
    KeyType.HASH: (lambda r, key: r.hgetall(key), builders.hash_command),
    KeyType.SORTED_SET: (
        lambda r, key: flatten_score_pairs(
            r.execute_command("ZRANGEBYSCORE", key, "-inf", "+inf", "WITHSCORES")
        ),
        builders.zset_command,
    ),
}


class KeyFetcher:
    """
    Reads one key and writes the commands recreating it to the sink.

    Responsibilities:
    - Query the key type, read the value with the matching command
    - Capture the remaining TTL as an absolute EXPIREAT
    - Turn every Redis failure into a TransportError for that key
    """

    def __init__(
        self,
        client: Redis,
        sink: Sink,
        serializer: Serializer,
        with_ttl: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            client (Redis): Client already bound to the database being dumped.
            sink (Sink): Receives one serialized command per call.
            serializer (Serializer): Output format.
            with_ttl (bool): Emit EXPIREAT for keys with a TTL.
            clock (Callable): Wall clock used to make TTLs absolute.
        """
        self.client = client
        self.sink = sink
        self.serializer = serializer
        self.with_ttl = with_ttl
        self.clock = clock

    def dump_key(self, key: str) -> None:
        """
        Dump a single key.

        Raises:
            TransportError: If any Redis query fails.
            UnrecognizedTypeError: If the key type cannot be dumped.
        """
        raw_type = self._query(key, lambda: self.client.type(key))
        try:
            key_type = KeyType.parse(raw_type)
        except ValueError:
            raise UnrecognizedTypeError(key, raw_type) from None

        command = self.read(key, key_type)
        if command is not None:
            self._emit(command)

        if self.with_ttl:
            ttl = self._query(key, lambda: self.client.ttl(key))
            if ttl is not None and ttl > 0:
                self._emit(builders.ttl_command(key, ttl, self.clock()))

    def read(self, key: str, key_type: KeyType) -> Optional[Command]:
        """
        Read the value of a key of a known type and build its command.

        Returns None when there is nothing to recreate: the key is of type
        none, or it disappeared between TYPE and the read.
        """
        if key_type is KeyType.NONE:
            logger.debug(f"KeyFetcher: {key} vanished before it was read")
            return None

        read, build = READERS[key_type]
        value = self._query(key, lambda: read(self.client, key))
        # An empty string is a value; an empty collection means the key is gone
        if value is None or (key_type is not KeyType.STRING and not value):
            logger.debug(f"KeyFetcher: {key} ({key_type.value}) is empty, skipping")
            return None

        return build(key, value)

    # ------------------------------------------------------------------
    # HELPERS
    # ------------------------------------------------------------------

    def _emit(self, command: Command) -> None:
        self.sink(self.serializer.serialize(command))

    @staticmethod
    def _query(key: str, call: Callable[[], Any]) -> Any:
        try:
            return call()
        except RedisError as e:
            raise TransportError(key, e) from e
