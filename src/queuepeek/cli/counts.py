"""Counts command."""

import typer

from queuepeek.cli._common import build_service, resolve_entity, run_command
from queuepeek.cli._console import console, setup_logging
from queuepeek.cli._display import print_counts
from queuepeek.contracts import MessageCountsResponse


def counts(
    entity: str = typer.Argument(..., help="Queue name, topic name, or topic/subscriptions/name"),
    subscription: str | None = typer.Option(
        None, "--subscription", "-s", help="Subscription name when ENTITY is a topic"
    ),
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Redis URL (overrides QUEUEPEEK_REDIS_URL)",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Show active and dead-letter message counts.

    Examples:
        queuepeek counts orders
        queuepeek counts events -s audit
    """
    setup_logging(verbose=verbose)
    ref = resolve_entity(entity, subscription)

    service = build_service(redis_url)
    result = run_command(service.get_message_counts(ref), verbose=verbose)
    if result is None:
        return

    response = MessageCountsResponse.from_counts(str(ref), result)
    if json_output:
        console.print_json(response.model_dump_json())
    else:
        print_counts(response)
