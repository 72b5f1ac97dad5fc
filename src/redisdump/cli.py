#!/usr/bin/env python3
# cli.py
# redisdump CLI
#
# Typer for options, Rich for everything printed on stderr.
# stdout (or --file) only ever receives the dump itself.

import io
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)

from .commands.serializers import ENCODING, ENCODING_ERRORS, SERIALIZERS, get_serializer
from .config import BATCH_SIZE, MAX_DATABASES, DumpConfig
from .dump.server import run_dump
from .dump_queue.models import ProgressNotification
from .errors import RedisDumpError
from .sinks import output_sink

app = typer.Typer(
    help="Dump a Redis server as RESP or plain Redis commands.",
    add_completion=False,
)

console = Console(stderr=True)


# -----------------------------
# UI helpers
# -----------------------------

def step(title: str):
    console.print(f"[bold cyan]➤ {title}[/bold cyan]")


def success(msg: str):
    console.print(f"[green]✔ {msg}[/green]")


def error(msg: str):
    console.print(f"[bold red]✖ {msg}[/bold red]")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# -----------------------------
# Main command
# -----------------------------

@app.command()
def dump(
    host: str = typer.Option(
        "127.0.0.1", "--host", "-H", envvar="REDISDUMP_HOST", help="Server host"
    ),
    port: int = typer.Option(
        6379, "--port", "-p", envvar="REDISDUMP_PORT", help="Server port"
    ),
    username: Optional[str] = typer.Option(
        None, "--username", envvar="REDISDUMP_USERNAME", help="ACL user name"
    ),
    password: Optional[str] = typer.Option(
        None, "--password", "-a", envvar="REDISDUMP_PASSWORD", help="Password"
    ),
    tls: bool = typer.Option(False, "--tls", envvar="REDISDUMP_TLS", help="Connect over TLS"),
    db: Optional[int] = typer.Option(
        None, "--db", "-d", envvar="REDISDUMP_DB", help="Only dump this database"
    ),
    workers: int = typer.Option(
        10, "--workers", "-n", envvar="REDISDUMP_WORKERS", help="Concurrent workers"
    ),
    output: str = typer.Option(
        "resp",
        "--output",
        "-o",
        envvar="REDISDUMP_OUTPUT",
        help=f"Output format ({' | '.join(SERIALIZERS)})",
    ),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Write the dump here instead of stdout"
    ),
    batch_size: int = typer.Option(
        BATCH_SIZE, "--batch-size", envvar="REDISDUMP_BATCH_SIZE", help="Keys per batch"
    ),
    key_pattern: str = typer.Option(
        "*", "--filter", envvar="REDISDUMP_FILTER", help="Only dump keys matching this pattern"
    ),
    no_ttl: bool = typer.Option(False, "--no-ttl", help="Do not emit EXPIREAT commands"),
    max_databases: int = typer.Option(
        MAX_DATABASES,
        "--max-databases",
        envvar="REDISDUMP_MAX_DATABASES",
        help="Databases supported by the server",
    ),
    silent: bool = typer.Option(False, "--silent", "-s", help="No progress output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Dump all keys of a Redis server (or of one database) as replayable commands.
    """
    setup_logging(verbose)

    config = DumpConfig(
        host=host,
        port=port,
        username=username,
        password=password,
        tls=tls,
        db=db,
        workers=workers,
        batch_size=batch_size,
        key_pattern=key_pattern,
        with_ttl=not no_ttl,
        max_databases=max_databases,
        output=output,
    )

    try:
        config.validate()
        serializer = get_serializer(config.output)
    except ValueError as e:
        error(str(e))
        raise typer.Exit(code=2)

    if file:
        stream = file.open("w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="")
    else:
        if isinstance(sys.stdout, io.TextIOWrapper):
            sys.stdout.reconfigure(errors=ENCODING_ERRORS, newline="")
        stream = sys.stdout

    sink = output_sink(stream, terminator=serializer.terminator)
    target = f"db {db}" if db is not None else "all databases"

    try:
        if silent:
            run_dump(config, sink)
        else:
            step(f"Dumping {target} from {host}:{port}")
            with Progress(
                TextColumn("[cyan]keys"),
                BarColumn(),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                console=console,
            ) as bar:
                task = bar.add_task("keys", total=None)

                def on_progress(notification: ProgressNotification) -> None:
                    bar.update(task, completed=notification.done, total=notification.total)

                run_dump(config, sink, on_progress)
            success(f"Dumped {target}")
    except RedisDumpError as e:
        error(str(e))
        if verbose:
            raise
        raise typer.Exit(code=1)
    finally:
        try:
            stream.flush()
            if file:
                stream.close()
        except OSError as e:
            error(f"Could not write dump output: {e}")
            raise typer.Exit(code=1)


def main():
    app()


if __name__ == "__main__":
    main()
