"""Console output helpers for the CLI."""

import logging

from rich.box import ROUNDED
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from queuepeek.config import get_settings
from queuepeek.logging import configure_logging

console = Console(highlight=False)
# Logs go to stderr so --json output on stdout stays parseable.
log_console = Console(stderr=True, highlight=False)


def success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def error(text: str) -> None:
    console.print(f"[red]✗[/red] {text}")


def dim(text: str) -> None:
    console.print(text, style="dim")


def nl() -> None:
    console.print()


def error_panel(message: str, *, title: str = "Error") -> None:
    panel = Panel(
        Text(message, style="red"),
        title=f"[bold red]{title}[/bold red]",
        title_align="left",
        border_style="red dim",
        box=ROUNDED,
        padding=(0, 1),
        expand=False,
    )
    console.print(panel)


def setup_logging(*, verbose: bool = False) -> None:
    """Configure logging for CLI commands; quiet third-party loggers."""
    settings = get_settings()
    debug = verbose or settings.debug

    handler = RichHandler(
        console=log_console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
        keywords=[],
    )
    configure_logging(log_format=settings.log_format, debug=debug, text_handler=handler)

    logging.getLogger("queuepeek").setLevel(logging.DEBUG if debug else logging.INFO)
    logging.getLogger("redis").setLevel(logging.WARNING)
