from .collector import ErrorCollector
from .fetcher import KeyFetcher
from .worker import DumpWorker

__all__ = ["ErrorCollector", "KeyFetcher", "DumpWorker"]
