"""Rich rendering for browsed messages."""

import json

from rich.box import ROUNDED
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from queuepeek.cli._console import console, dim
from queuepeek.contracts import MessageCountsResponse, MessagePage
from queuepeek.domain import MessageRecord

BODY_PREVIEW_CHARS = 80


def body_preview(body: str, *, limit: int = BODY_PREVIEW_CHARS) -> str:
    """Collapse whitespace so a body fits on one table row."""
    text = " ".join(body.split())
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def format_body(body: str) -> str:
    """Pretty-print JSON bodies; anything else is returned unchanged."""
    try:
        return json.dumps(json.loads(body), indent=2, ensure_ascii=False)
    except (json.JSONDecodeError, TypeError):
        return body


def messages_table(records: list[MessageRecord], *, title: str) -> Table:
    table = Table(title=title, title_justify="left", box=ROUNDED, border_style="dim")
    table.add_column("Message ID", style="cyan", no_wrap=True)
    table.add_column("Label")
    table.add_column("Content type", style="dim")
    table.add_column("Enqueued", style="dim", no_wrap=True)
    table.add_column("DLQ", justify="center")
    table.add_column("Body")

    for record in records:
        table.add_row(
            record.message_id,
            record.label,
            record.content_type,
            record.enqueued_at.isoformat(timespec="seconds"),
            Text("✓", style="red") if record.is_dead_letter else Text(""),
            body_preview(record.body),
        )
    return table


def print_records(records: list[MessageRecord], *, title: str, full: bool = False) -> None:
    if not records:
        dim("No messages")
        return

    console.print(messages_table(records, title=title))
    if full:
        for record in records:
            console.print(
                Panel(
                    format_body(record.body),
                    title=f"[bold]{record.message_id}[/bold]",
                    title_align="left",
                    border_style="dim",
                    box=ROUNDED,
                    padding=(0, 1),
                )
            )


def page_info(page: MessagePage) -> str:
    if page.total_count <= 0:
        return "No messages"
    approx = "≈" if page.counts_approximate else ""
    if page.start_index == 0:
        return (
            f"Page {page.page_number} is past the end"
            f" · {approx}{page.total_count:,} messages in {page.total_pages} pages"
        )
    return (
        f"{page.start_index:,}-{page.end_index:,} of {approx}{page.total_count:,}"
        f" · page {page.page_number} of {page.total_pages}"
    )


def print_page(page: MessagePage, *, title: str, full: bool = False) -> None:
    print_records(list(page.items), title=title, full=full)
    nav: list[str] = []
    if page.has_previous_page:
        nav.append("← prev")
    if page.has_next_page:
        nav.append("next →")
    dim(" · ".join([page_info(page), *nav]))


def print_counts(counts: MessageCountsResponse) -> None:
    approx = "≈" if counts.approximate else ""

    content = Text()
    content.append("active      ", style="bold")
    content.append(f"{approx}{counts.active:,}\n")
    content.append("dead letter ", style="bold")
    content.append(f"{approx}{counts.dead_letter:,}\n")
    content.append("total       ", style="bold")
    content.append(f"{approx}{counts.total:,}")
    if counts.ceiling_hit:
        content.append("\n")
        content.append("count stopped at the configured ceiling", style="yellow")

    console.print(
        Panel(
            content,
            title=f"[bold]{counts.entity}[/bold]",
            title_align="left",
            border_style="dim",
            box=ROUNDED,
            padding=(0, 1),
            expand=False,
        )
    )
