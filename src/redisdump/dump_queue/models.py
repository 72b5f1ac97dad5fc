from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

# An ordered, non-empty sequence of strings: operation name then arguments.
Command = Tuple[str, ...]


@dataclass(frozen=True)
class Batch:
    """
    A contiguous slice of the keys of one database.

    IMPORTANT:
    - keys keep the order returned by KEYS
    - end is the number of keys covered once this batch is done
    """

    keys: Tuple[str, ...]
    start: int
    end: int

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys)


@dataclass(frozen=True)
class ProgressNotification:
    """Progress of one database dump: done keys out of total keys."""

    done: int
    total: int


def split_batches(keys: Sequence[str], batch_size: int) -> Iterator[Batch]:
    """
    Split keys into contiguous batches of at most batch_size keys.

    Raises:
        ValueError: If batch_size is lower than 1.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    for start in range(0, len(keys), batch_size):
        end = min(start + batch_size, len(keys))
        yield Batch(keys=tuple(keys[start:end]), start=start, end=end)
