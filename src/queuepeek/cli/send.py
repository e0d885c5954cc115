"""Send command for resubmitting a message body."""

import typer

from queuepeek.cli._common import build_service, resolve_entity, run_command
from queuepeek.cli._console import error_panel, setup_logging, success


def parse_properties(values: list[str] | None) -> dict[str, str]:
    """Parse repeated KEY=VALUE options into application properties."""
    properties: dict[str, str] = {}
    for value in values or []:
        key, sep, prop_value = value.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid property '{value}', expected KEY=VALUE")
        properties[key] = prop_value
    return properties


def send(
    entity: str = typer.Argument(..., help="Queue or topic name"),
    body: str = typer.Argument(..., help="Message body"),
    content_type: str | None = typer.Option(None, "--content-type", help="Content type"),
    label: str | None = typer.Option(None, "--label", help="Message label/subject"),
    prop: list[str] | None = typer.Option(
        None, "--property", "-P", help="Application property as KEY=VALUE (repeatable)"
    ),
    compress: bool = typer.Option(False, "--compress", "-z", help="Gzip-compress the body"),
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Redis URL (overrides QUEUEPEEK_REDIS_URL)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Send a message to a queue or topic.

    Examples:
        queuepeek send orders '{"order_id": 1}' --content-type application/json
        queuepeek send events 'hello' --compress -P source=replay
    """
    setup_logging(verbose=verbose)
    ref = resolve_entity(entity, None)
    try:
        properties = parse_properties(prop)
    except ValueError as e:
        error_panel(str(e), title="Invalid property")
        raise typer.Exit(1)

    service = build_service(redis_url)
    sequence_numbers = run_command(
        service.resubmit_message(
            ref,
            body,
            content_type=content_type,
            label=label,
            properties=properties or None,
            compress=compress,
        ),
        verbose=verbose,
    )
    if sequence_numbers is None:
        return

    targets = len(sequence_numbers)
    success(f"Sent to {ref} ({targets} stream{'s' if targets != 1 else ''})")
