"""Cursor-advancing reads over a peek source.

A peek source only offers "next N after sequence S". These helpers turn that
into windowed reads by walking forward from the start of a sub-queue, one
bounded batch per round-trip.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field

from queuepeek.domain import EntityRef, PeekedMessage, SubQueue
from queuepeek.source.base import BasePeekSource


@dataclass
class ReadWindow:
    """Messages accumulated by one read session and the cursor it ended on."""

    messages: list[PeekedMessage] = field(default_factory=list)
    last_cursor: str | None = None


def effective_batch_cap(source: BasePeekSource, batch_cap: int | None) -> int:
    """Resolve the per-call batch size, never above the source's limit."""
    if batch_cap is None:
        return source.max_batch_size
    return max(1, min(batch_cap, source.max_batch_size))


async def iter_peek_batches(
    source: BasePeekSource,
    entity: EntityRef,
    sub_queue: SubQueue,
    *,
    batch_size: int,
    start_cursor: str | None = None,
    limit: int | None = None,
) -> AsyncGenerator[list[PeekedMessage], None]:
    """
    Yield successive peek batches until the sub-queue is exhausted.

    Args:
        batch_size: Messages requested per peek call
        start_cursor: Resume after this sequence number (None = start)
        limit: Stop once this many messages have been yielded in total
    """
    cursor = start_cursor
    remaining = limit
    while remaining is None or remaining > 0:
        request = batch_size if remaining is None else min(batch_size, remaining)
        batch = await source.peek(
            entity, sub_queue, request, from_sequence_after=cursor
        )
        if not batch:
            break

        yield batch

        cursor = batch[-1].sequence_number
        if remaining is not None:
            remaining -= len(batch)


async def read_window(
    source: BasePeekSource,
    entity: EntityRef,
    sub_queue: SubQueue,
    *,
    messages_needed: int,
    batch_cap: int | None = None,
    start_cursor: str | None = None,
) -> ReadWindow:
    """
    Read up to `messages_needed` messages starting after `start_cursor`.

    Returns fewer messages (possibly none) when the sub-queue runs out first.
    Errors from the source propagate unchanged.
    """
    window = ReadWindow(last_cursor=start_cursor)
    if messages_needed <= 0:
        return window

    async for batch in iter_peek_batches(
        source,
        entity,
        sub_queue,
        batch_size=effective_batch_cap(source, batch_cap),
        start_cursor=start_cursor,
        limit=messages_needed,
    ):
        window.messages.extend(batch)
        window.last_cursor = batch[-1].sequence_number

    # A source may return more than asked; the window never does.
    if len(window.messages) > messages_needed:
        del window.messages[messages_needed:]
        window.last_cursor = window.messages[-1].sequence_number
    return window


async def read_slice(
    source: BasePeekSource,
    entity: EntityRef,
    sub_queue: SubQueue,
    *,
    offset: int,
    limit: int,
    batch_cap: int | None = None,
) -> list[PeekedMessage]:
    """Read messages `[offset, offset + limit)` of a sub-queue from its start."""
    if limit <= 0:
        return []
    window = await read_window(
        source,
        entity,
        sub_queue,
        messages_needed=offset + limit,
        batch_cap=batch_cap,
    )
    return window.messages[offset : offset + limit]
