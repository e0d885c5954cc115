"""Combined active + dead-letter paging.

The two sub-queues are presented as one virtual sequence: active messages
occupy positions [0, active) and dead-lettered messages follow at
[active, active + dead_letter). Counts are resolved once per page and that
snapshot drives all boundary arithmetic for the page.
"""

import logging

from queuepeek.contracts import MessagePage
from queuepeek.domain import EntityRef, MessageRecord, SubQueue
from queuepeek.engine.counts import CountResolver
from queuepeek.engine.paging import to_records, validate_page_request
from queuepeek.engine.reader import read_slice
from queuepeek.logging import log_context
from queuepeek.source.base import BasePeekSource

logger = logging.getLogger(__name__)


class UnifiedPageCompositor:
    """Page through an entity's active then dead-letter messages."""

    def __init__(
        self,
        source: BasePeekSource,
        counts: CountResolver,
        *,
        batch_cap: int | None = None,
    ) -> None:
        self._source = source
        self._counts = counts
        self._batch_cap = batch_cap

    async def _read(
        self,
        entity: EntityRef,
        sub_queue: SubQueue,
        *,
        offset: int,
        limit: int,
        decompress: bool,
    ) -> list[MessageRecord]:
        messages = await read_slice(
            self._source,
            entity,
            sub_queue,
            offset=offset,
            limit=limit,
            batch_cap=self._batch_cap,
        )
        return to_records(messages, sub_queue, decompress=decompress)

    async def get_unified_page(
        self,
        entity: EntityRef,
        page_number: int,
        page_size: int,
        *,
        decompress: bool = False,
    ) -> MessagePage:
        validate_page_request(page_number, page_size)

        counts = await self._counts.resolve(entity)
        active_count, dead_letter_count = counts
        skip = (page_number - 1) * page_size

        items: list[MessageRecord] = []
        if page_number == 1:
            # Fill from whatever the active sub-queue actually holds right now.
            items.extend(
                await self._read(
                    entity,
                    SubQueue.ACTIVE,
                    offset=0,
                    limit=page_size,
                    decompress=decompress,
                )
            )
            dead_letter_offset = 0
        elif skip < active_count:
            items.extend(
                await self._read(
                    entity,
                    SubQueue.ACTIVE,
                    offset=skip,
                    limit=min(page_size, active_count - skip),
                    decompress=decompress,
                )
            )
            dead_letter_offset = 0
        else:
            dead_letter_offset = skip - active_count

        remaining = page_size - len(items)
        if remaining > 0 and dead_letter_count > dead_letter_offset:
            items.extend(
                await self._read(
                    entity,
                    SubQueue.DEAD_LETTER,
                    offset=dead_letter_offset,
                    limit=remaining,
                    decompress=decompress,
                )
            )

        logger.debug(
            f"Unified page {page_number} of {entity}: {len(items)} items "
            f"(active={active_count:,}, dlq={dead_letter_count:,})",
            extra=log_context(entity),
        )
        return MessagePage(
            items=items,
            total_count=active_count + dead_letter_count,
            page_number=page_number,
            page_size=page_size,
            counts_approximate=counts.approximate,
        )
