import logging
import sys
from typing import Callable, TextIO

from .errors import SinkError

# Receives one serialized command per call. Must be safe to call from
# several worker threads at once.
Sink = Callable[[str], None]

OUTPUT_LOGGER = "redisdump.output"


class SinkHandler(logging.StreamHandler):
    """
    StreamHandler that fails loudly.

    logging's default handleError prints the traceback and carries on,
    which would leave a truncated dump looking complete.
    """

    def handleError(self, record: logging.LogRecord) -> None:
        error = sys.exc_info()[1]
        raise SinkError(f"Could not write dump output: {error}") from error


def output_sink(stream: TextIO, terminator: str = "\n") -> Sink:
    """
    Build a sink writing each serialized command to `stream`.

    Writes go through a logging handler owned by this sink alone; its lock
    keeps concurrent workers from interleaving partial commands.

    Args:
        stream (TextIO): Destination of the dump (stdout, an open file).
        terminator (str): Appended after every command ("" for RESP,
            which carries its own CRLF).

    Raises (when called):
        SinkError: If the stream cannot be written or flushed.
    """
    # Not registered with logging.getLogger, so sinks never share state
    output = logging.Logger(OUTPUT_LOGGER, logging.INFO)
    output.propagate = False

    handler = SinkHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.terminator = terminator
    output.addHandler(handler)

    return output.info
