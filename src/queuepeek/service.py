"""Message browsing facade.

Hides source construction from callers. Every operation opens a fresh peek
source, drives it to completion and closes it; nothing is cached between
calls, so each page re-reads from the start of its sub-queue(s).
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from queuepeek.config import get_settings
from queuepeek.contracts import MessagePage
from queuepeek.domain import (
    EntityRef,
    MessageCounts,
    MessageFilter,
    MessageRecord,
    SubQueue,
)
from queuepeek.engine.codec import encode_body
from queuepeek.engine.counts import CountResolver
from queuepeek.engine.paging import PagedViewBuilder, to_records, validate_page_request
from queuepeek.engine.reader import read_window
from queuepeek.engine.unified import UnifiedPageCompositor
from queuepeek.logging import log_context
from queuepeek.source.base import BasePeekSource
from queuepeek.source.redis import RedisPeekSource

logger = logging.getLogger(__name__)

SourceFactory = Callable[[], BasePeekSource]


def default_source_factory(redis_url: str | None = None) -> SourceFactory:
    """Build a factory for Redis-backed sources from settings."""

    def factory() -> BasePeekSource:
        return RedisPeekSource(redis_url)

    return factory


class MessageService:
    """
    Browse an entity's messages without consuming them.

    Example:
        service = MessageService()
        page = await service.get_paged_messages(
            EntityRef("orders"), page_number=2, page_size=50
        )
    """

    def __init__(
        self,
        source_factory: SourceFactory | None = None,
        *,
        batch_cap: int | None = None,
        count_ceiling: int | None = None,
        max_page_size: int | None = None,
    ) -> None:
        settings = get_settings()

        self._source_factory = source_factory or default_source_factory()
        self._batch_cap = batch_cap
        self._count_ceiling = count_ceiling
        self._max_page_size = (
            settings.max_page_size if max_page_size is None else int(max_page_size)
        )

    def _count_resolver(self, source: BasePeekSource) -> CountResolver:
        return CountResolver(
            source,
            count_ceiling=self._count_ceiling,
            batch_cap=self._batch_cap,
        )

    async def _peek_sub_queue(
        self,
        entity: EntityRef,
        sub_queue: SubQueue,
        max_messages: int,
        decompress: bool,
    ) -> list[MessageRecord]:
        async with self._source_factory() as source:
            window = await read_window(
                source,
                entity,
                sub_queue,
                messages_needed=max_messages,
                batch_cap=self._batch_cap,
            )
        return to_records(window.messages, sub_queue, decompress=decompress)

    # =========================================================================
    # PEEK
    # =========================================================================

    async def peek(
        self,
        entity: EntityRef,
        max_messages: int = 50,
        *,
        decompress: bool = False,
    ) -> list[MessageRecord]:
        """Peek the first `max_messages` active messages."""
        return await self._peek_sub_queue(
            entity, SubQueue.ACTIVE, max_messages, decompress
        )

    async def peek_dead_letter(
        self,
        entity: EntityRef,
        max_messages: int = 50,
        *,
        decompress: bool = False,
    ) -> list[MessageRecord]:
        """Peek the first `max_messages` dead-lettered messages."""
        return await self._peek_sub_queue(
            entity, SubQueue.DEAD_LETTER, max_messages, decompress
        )

    async def peek_all(
        self,
        entity: EntityRef,
        max_messages: int = 50,
        *,
        decompress: bool = False,
    ) -> list[MessageRecord]:
        """Peek both sub-queues concurrently; active messages come first."""
        active, dead_letter = await asyncio.gather(
            self.peek(entity, max_messages, decompress=decompress),
            self.peek_dead_letter(entity, max_messages, decompress=decompress),
        )
        return [*active, *dead_letter]

    # =========================================================================
    # PAGES
    # =========================================================================

    async def get_paged_messages(
        self,
        entity: EntityRef,
        page_number: int,
        page_size: int = 50,
        *,
        message_filter: MessageFilter = MessageFilter.ALL,
        decompress: bool = False,
    ) -> MessagePage:
        """Get one page of messages for the given filter."""
        validate_page_request(page_number, page_size)
        if self._max_page_size > 0 and page_size > self._max_page_size:
            logger.debug(
                f"Capping page size {page_size} to {self._max_page_size}",
                extra=log_context(entity),
            )
            page_size = self._max_page_size

        async with self._source_factory() as source:
            counts = self._count_resolver(source)

            if message_filter == MessageFilter.ALL:
                compositor = UnifiedPageCompositor(
                    source, counts, batch_cap=self._batch_cap
                )
                return await compositor.get_unified_page(
                    entity, page_number, page_size, decompress=decompress
                )

            sub_queue = (
                SubQueue.DEAD_LETTER
                if message_filter == MessageFilter.DEAD_LETTER
                else SubQueue.ACTIVE
            )
            builder = PagedViewBuilder(source, counts, batch_cap=self._batch_cap)
            return await builder.get_page(
                entity, sub_queue, page_number, page_size, decompress=decompress
            )

    # =========================================================================
    # COUNTS
    # =========================================================================

    async def get_message_counts(self, entity: EntityRef) -> MessageCounts:
        """Get active and dead-letter counts for an entity."""
        async with self._source_factory() as source:
            return await self._count_resolver(source).resolve(entity)

    # =========================================================================
    # RESUBMIT
    # =========================================================================

    async def resubmit_message(
        self,
        entity: EntityRef,
        body: str,
        *,
        content_type: str | None = None,
        label: str | None = None,
        properties: dict[str, Any] | None = None,
        compress: bool = False,
    ) -> list[str]:
        """
        Send a message body to a queue or topic.

        Returns:
            Sequence numbers of the written message(s)

        Raises:
            SendNotSupportedError: If the entity is a subscription
        """
        async with self._source_factory() as source:
            return await source.send_message(
                entity,
                encode_body(body, compress),
                content_type=content_type,
                label=label,
                properties=properties,
            )
