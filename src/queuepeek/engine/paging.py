"""Paged views over a single sub-queue."""

import logging

from queuepeek.contracts import MessagePage
from queuepeek.domain import EntityRef, MessageRecord, PeekedMessage, SubQueue
from queuepeek.engine.codec import decode_body
from queuepeek.engine.counts import CountResolver
from queuepeek.engine.reader import read_window
from queuepeek.errors import InvalidPageRequestError
from queuepeek.logging import log_context
from queuepeek.source.base import BasePeekSource

logger = logging.getLogger(__name__)


def validate_page_request(page_number: int, page_size: int) -> None:
    """Reject non-positive page numbers and sizes before any I/O."""
    if page_number < 1:
        raise InvalidPageRequestError("page_number", page_number)
    if page_size < 1:
        raise InvalidPageRequestError("page_size", page_size)


def to_records(
    messages: list[PeekedMessage],
    sub_queue: SubQueue,
    *,
    decompress: bool,
) -> list[MessageRecord]:
    is_dead_letter = sub_queue == SubQueue.DEAD_LETTER
    return [
        MessageRecord.from_peeked(
            m,
            body=decode_body(m.body, decompress),
            is_dead_letter=is_dead_letter,
        )
        for m in messages
    ]


class PagedViewBuilder:
    """Build page `N` of one sub-queue by walking it from the start."""

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

    async def get_page(
        self,
        entity: EntityRef,
        sub_queue: SubQueue,
        page_number: int,
        page_size: int,
        *,
        decompress: bool = False,
    ) -> MessagePage:
        validate_page_request(page_number, page_size)
        logger.debug(
            f"Paging {entity} ({sub_queue}) - page: {page_number}, size: {page_size}",
            extra=log_context(entity, sub_queue),
        )

        counts = await self._counts.resolve(entity)
        total_count = counts.for_sub_queue(sub_queue)

        skip = (page_number - 1) * page_size
        window = await read_window(
            self._source,
            entity,
            sub_queue,
            messages_needed=skip + page_size,
            batch_cap=self._batch_cap,
        )

        observed = len(window.messages)
        if observed > total_count:
            # The count lagged behind what the walk already saw; ask once more.
            logger.debug(
                f"{sub_queue} count for {entity} ({total_count:,}) is behind the "
                f"{observed:,} messages read, re-resolving",
                extra=log_context(entity, sub_queue),
            )
            counts = await self._counts.resolve(entity)
            total_count = max(counts.for_sub_queue(sub_queue), observed)

        return MessagePage(
            items=to_records(
                window.messages[skip : skip + page_size],
                sub_queue,
                decompress=decompress,
            ),
            total_count=total_count,
            page_number=page_number,
            page_size=page_size,
            counts_approximate=counts.approximate,
        )
