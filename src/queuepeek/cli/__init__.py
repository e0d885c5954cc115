"""QueuePeek CLI."""

import typer

from queuepeek.cli._console import console
from queuepeek.cli.counts import counts
from queuepeek.cli.page import page
from queuepeek.cli.peek import peek
from queuepeek.cli.send import send

app = typer.Typer(
    name="queuepeek",
    help="Browse queues and dead-letter queues without consuming messages.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        from queuepeek import __version__

        console.print(f"[bold]queuepeek[/bold] [dim]{__version__}[/dim]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version",
    ),
) -> None:
    """Non-destructive queue browsing."""


# Register commands
app.command()(counts)
app.command()(peek)
app.command()(page)
app.command()(send)
