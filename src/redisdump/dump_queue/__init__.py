from .key_types import KeyType
from .models import Batch, Command, ProgressNotification, split_batches
from .queue import HandoffQueue, QueueClosed

__all__ = [
    "KeyType",
    "Batch",
    "Command",
    "ProgressNotification",
    "split_batches",
    "HandoffQueue",
    "QueueClosed",
]
