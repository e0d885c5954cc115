"""Message count resolution.

Counts come from the entity's metadata endpoint when it answers. When it
does not (unsupported entity, missing permissions, transport error), each
sub-queue is walked with peek calls and counted, up to a ceiling.
"""

import logging

from queuepeek.config import get_settings
from queuepeek.domain import (
    MAX_REPORTED_COUNT,
    ApproximateCounts,
    AuthoritativeCounts,
    EntityRef,
    MessageCounts,
    SubQueue,
)
from queuepeek.engine.reader import effective_batch_cap, iter_peek_batches
from queuepeek.logging import log_context
from queuepeek.source.base import BasePeekSource

logger = logging.getLogger(__name__)


def clamp_count(value: int) -> int:
    return max(0, min(int(value), MAX_REPORTED_COUNT))


class CountResolver:
    """Resolve (active, dead-letter) counts for an entity."""

    def __init__(
        self,
        source: BasePeekSource,
        *,
        count_ceiling: int | None = None,
        batch_cap: int | None = None,
        progress_interval: int | None = None,
    ) -> None:
        settings = get_settings()

        self._source = source
        self._count_ceiling = max(
            0,
            (
                settings.resolved_count_ceiling()
                if count_ceiling is None
                else int(count_ceiling)
            ),
        )
        self._batch_cap = effective_batch_cap(source, batch_cap)
        self._progress_interval = max(
            0,
            (
                settings.count_progress_interval
                if progress_interval is None
                else int(progress_interval)
            ),
        )

    async def resolve(self, entity: EntityRef) -> MessageCounts:
        """Get counts, preferring the metadata endpoint over a full walk."""
        try:
            return await self._resolve_authoritative(entity)
        except Exception as e:
            logger.warning(
                f"Runtime properties failed for {entity}, falling back to counting by peek: {e}",
                extra=log_context(entity),
            )
        return await self._resolve_by_walk(entity)

    async def _resolve_authoritative(self, entity: EntityRef) -> AuthoritativeCounts:
        props = await self._source.get_runtime_properties(entity)

        active = clamp_count(props.active)
        dead_letter = clamp_count(props.dead_letter)
        if active != props.active or dead_letter != props.dead_letter:
            logger.warning(
                f"Message counts for {entity} exceed {MAX_REPORTED_COUNT:,}, "
                f"truncating (active={props.active:,}, dlq={props.dead_letter:,})",
                extra=log_context(entity),
            )
        return AuthoritativeCounts(active=active, dead_letter=dead_letter)

    async def _resolve_by_walk(self, entity: EntityRef) -> ApproximateCounts:
        active, active_capped = await self.count_sub_queue(entity, SubQueue.ACTIVE)
        dead_letter, dead_letter_capped = await self.count_sub_queue(
            entity, SubQueue.DEAD_LETTER
        )
        logger.info(
            f"Final message counts for {entity} - active: {active:,}, dead letter: {dead_letter:,}",
            extra=log_context(entity),
        )
        return ApproximateCounts(
            active=active,
            dead_letter=dead_letter,
            ceiling_hit=active_capped or dead_letter_capped,
        )

    async def count_sub_queue(
        self, entity: EntityRef, sub_queue: SubQueue
    ) -> tuple[int, bool]:
        """
        Count one sub-queue by peeking through it.

        Returns:
            (count, ceiling_hit). When the ceiling is hit the ceiling itself
            is reported as the count.
        """
        ceiling = self._count_ceiling
        count = 0
        next_progress = self._progress_interval

        async for batch in iter_peek_batches(
            self._source,
            entity,
            sub_queue,
            batch_size=self._batch_cap,
            limit=ceiling or None,
        ):
            count += len(batch)

            if next_progress and count >= next_progress:
                logger.info(
                    f"Counted {count:,} {sub_queue} messages of {entity} so far...",
                    extra=log_context(entity, sub_queue),
                )
                next_progress = (count // self._progress_interval + 1) * self._progress_interval

        if ceiling and count >= ceiling:
            logger.warning(
                f"{sub_queue} count for {entity} reached limit of {ceiling:,}, stopping count",
                extra=log_context(entity, sub_queue),
            )
            return ceiling, True
        return clamp_count(count), False
