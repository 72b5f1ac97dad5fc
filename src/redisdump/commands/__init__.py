from .builders import (
    expireat_command,
    hash_command,
    list_command,
    select_command,
    set_command,
    string_command,
    ttl_command,
    zset_command,
)
from .serializers import (
    SERIALIZERS,
    CommandSerializer,
    RESPSerializer,
    Serializer,
    get_serializer,
)

__all__ = [
    "expireat_command",
    "hash_command",
    "list_command",
    "select_command",
    "set_command",
    "string_command",
    "ttl_command",
    "zset_command",
    "SERIALIZERS",
    "CommandSerializer",
    "RESPSerializer",
    "Serializer",
    "get_serializer",
]
