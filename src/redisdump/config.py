"""Configuration for a dump run.

Collects everything the CLI (or any other caller) needs to pick between
a single-database and a whole-server dump.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

BATCH_SIZE = 100
MAX_DATABASES = 16


@dataclass
class DumpConfig:
    """Parameters of a dump run.

    Attributes:
        host: Redis host
        port: Redis port
        username: ACL user name, if any
        password: Password, if any
        tls: Connect with rediss://
        db: Dump only this database; None dumps every non-empty database
        workers: Number of concurrent workers (and pool connections)
        batch_size: Keys handed to a worker at a time
        key_pattern: KEYS pattern selecting the keys to dump
        with_ttl: Emit EXPIREAT for keys with a TTL
        max_databases: Number of databases the server supports
        output: Serializer name ("resp" or "commands")
    """

    host: str = "127.0.0.1"
    port: int = 6379
    username: Optional[str] = None
    password: Optional[str] = None
    tls: bool = False
    db: Optional[int] = None
    workers: int = 10
    batch_size: int = BATCH_SIZE
    key_pattern: str = "*"
    with_ttl: bool = True
    max_databases: int = MAX_DATABASES
    output: str = "resp"

    @property
    def redis_url(self) -> str:
        scheme = "rediss" if self.tls else "redis"
        auth = ""
        if self.password is not None:
            auth = f"{quote(self.username or '', safe='')}:{quote(self.password, safe='')}@"
        elif self.username:
            auth = f"{quote(self.username, safe='')}@"
        return f"{scheme}://{auth}{self.host}:{self.port}"

    def validate(self) -> None:
        """
        Raises:
            ValueError: If a numeric setting is out of range.
        """
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.max_databases < 1:
            raise ValueError(f"max_databases must be at least 1, got {self.max_databases}")
        if self.db is not None and not 0 <= self.db < self.max_databases:
            raise ValueError(
                f"db must be between 0 and {self.max_databases - 1}, got {self.db}"
            )
