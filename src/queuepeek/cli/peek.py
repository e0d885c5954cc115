"""Peek command."""

import typer
from pydantic import TypeAdapter

from queuepeek.cli._common import build_service, resolve_entity, run_command
from queuepeek.cli._console import console, error, setup_logging
from queuepeek.cli._display import print_records
from queuepeek.domain import MessageRecord

_records_adapter = TypeAdapter(list[MessageRecord])


def peek(
    entity: str = typer.Argument(..., help="Queue name, topic name, or topic/subscriptions/name"),
    subscription: str | None = typer.Option(
        None, "--subscription", "-s", help="Subscription name when ENTITY is a topic"
    ),
    count: int = typer.Option(50, "--count", "-n", min=1, help="Messages to peek"),
    dead_letter: bool = typer.Option(
        False, "--dead-letter", "-d", help="Peek the dead-letter sub-queue"
    ),
    both: bool = typer.Option(
        False, "--all", "-a", help="Peek active and dead-letter sub-queues"
    ),
    decompress: bool = typer.Option(
        False, "--decompress", "-z", help="Gzip-decompress message bodies"
    ),
    full: bool = typer.Option(False, "--full", help="Print full (formatted) bodies"),
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Redis URL (overrides QUEUEPEEK_REDIS_URL)",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Peek the first messages of an entity without consuming them.

    Examples:
        queuepeek peek orders
        queuepeek peek orders --dead-letter -n 10
        queuepeek peek events/subscriptions/audit --all --decompress
    """
    setup_logging(verbose=verbose)
    if dead_letter and both:
        error("--dead-letter and --all are mutually exclusive")
        raise typer.Exit(1)

    ref = resolve_entity(entity, subscription)
    service = build_service(redis_url)

    if both:
        coro = service.peek_all(ref, count, decompress=decompress)
        title = f"{ref} · active + dead letter"
    elif dead_letter:
        coro = service.peek_dead_letter(ref, count, decompress=decompress)
        title = f"{ref} · dead letter"
    else:
        coro = service.peek(ref, count, decompress=decompress)
        title = f"{ref} · active"

    records = run_command(coro, verbose=verbose)
    if records is None:
        return

    if json_output:
        console.print_json(_records_adapter.dump_json(records).decode())
    else:
        print_records(records, title=title, full=full)
