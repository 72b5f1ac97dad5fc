from abc import ABC, abstractmethod
from typing import Dict

from ..dump_queue.models import Command

ENCODING = "utf-8"
# Values are decoded with surrogateescape so undecodable bytes survive.
ENCODING_ERRORS = "surrogateescape"


class Serializer(ABC):
    """
    Abstract base class for command serializers.

    Attributes:
        name (str): Name used to pick the serializer (e.g. on the CLI).
        terminator (str): What the sink must append after each serialized command.
    """

    name: str = ""
    terminator: str = ""

    @abstractmethod
    def serialize(self, command: Command) -> str:
        """
        Serialize a command.

        Args:
           command (Command): Operation name followed by its arguments.

        Returns:
            str: The serialized command.
        """
        pass

    def __call__(self, command: Command) -> str:
        return self.serialize(command)


class RESPSerializer(Serializer):
    """
    Serializes commands as RESP arrays of bulk strings, the format
    `redis-cli --pipe` replays.
    """

    name = "resp"
    terminator = ""

    def serialize(self, command: Command) -> str:
        parts = [f"*{len(command)}\r\n"]
        for arg in command:
            size = len(arg.encode(ENCODING, ENCODING_ERRORS))
            parts.append(f"${size}\r\n{arg}\r\n")
        return "".join(parts)


class CommandSerializer(Serializer):
    """
    Serializes commands as plain text, arguments separated by a space.
    """

    name = "commands"
    terminator = "\n"

    def serialize(self, command: Command) -> str:
        return " ".join(command)


SERIALIZERS: Dict[str, Serializer] = {
    "resp": RESPSerializer(),
    "commands": CommandSerializer(),
}


def get_serializer(name: str) -> Serializer:
    """
    Look up a serializer by name.

    Raises:
        ValueError: If no serializer has that name.
    """
    serializer = SERIALIZERS.get(name)
    if not serializer:
        raise ValueError(
            f"Unknown output format '{name}', expected one of: {', '.join(SERIALIZERS)}"
        )
    return serializer
