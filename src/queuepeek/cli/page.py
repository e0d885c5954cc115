"""Page command."""

import typer

from queuepeek.cli._common import build_service, resolve_entity, run_command
from queuepeek.cli._console import console, setup_logging
from queuepeek.cli._display import print_page
from queuepeek.config import get_settings
from queuepeek.domain import MessageFilter


def page(
    entity: str = typer.Argument(..., help="Queue name, topic name, or topic/subscriptions/name"),
    subscription: str | None = typer.Option(
        None, "--subscription", "-s", help="Subscription name when ENTITY is a topic"
    ),
    page_number: int = typer.Option(1, "--page", "-p", help="Page number (1-based)"),
    page_size: int | None = typer.Option(
        None, "--size", help="Messages per page (default from QUEUEPEEK_DEFAULT_PAGE_SIZE)"
    ),
    message_filter: MessageFilter = typer.Option(
        MessageFilter.ALL, "--filter", "-f", help="Which sub-queue(s) to browse"
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
    Browse one page of messages.

    With --filter all, active messages are listed first, then dead-lettered ones.

    Examples:
        queuepeek page orders
        queuepeek page orders -p 3 --size 100
        queuepeek page orders --filter dead-letter
    """
    setup_logging(verbose=verbose)
    ref = resolve_entity(entity, subscription)
    size = page_size if page_size is not None else get_settings().default_page_size

    service = build_service(redis_url)
    result = run_command(
        service.get_paged_messages(
            ref,
            page_number,
            size,
            message_filter=message_filter,
            decompress=decompress,
        ),
        verbose=verbose,
    )
    if result is None:
        return

    if json_output:
        console.print_json(result.model_dump_json())
    else:
        print_page(result, title=f"{ref} · {message_filter.value}", full=full)
