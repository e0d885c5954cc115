"""Base peek source abstraction for QueuePeek."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any, Self

from queuepeek.domain import EntityRef, PeekedMessage, RuntimeProperties, SubQueue
from queuepeek.errors import QueuePeekError

# Upper bound the broker places on a single peek call.
DEFAULT_MAX_BATCH_SIZE = 250


class BasePeekSource(ABC):
    """
    Abstract base class for peek sources.

    A source wraps one transport and exposes the non-destructive primitives
    the browsing engine is built on. Sources are opened per request and are
    not safe for overlapping peek calls on the same sub-queue.

    Lifecycle:
        async with RedisPeekSource(...) as source:
            rows = await source.peek(entity, SubQueue.ACTIVE, 100)
    """

    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE

    # =========================================================================
    # LIFECYCLE - Override if the source holds connections
    # =========================================================================

    async def start(self) -> None:
        """Open connections. Called on context entry."""
        pass

    async def close(self) -> None:
        """Release connections. Called on context exit."""
        pass

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # =========================================================================
    # CORE - Must implement these
    # =========================================================================

    @abstractmethod
    async def peek(
        self,
        entity: EntityRef,
        sub_queue: SubQueue,
        max_count: int,
        *,
        from_sequence_after: str | None = None,
    ) -> list[PeekedMessage]:
        """
        Peek up to `max_count` messages without locking or removing them.

        Args:
            entity: Queue or subscription to read
            sub_queue: Active or dead-letter sub-queue
            max_count: Maximum messages to return (<= max_batch_size)
            from_sequence_after: Only return messages after this sequence
                number. None starts at the beginning of the sub-queue.

        Returns:
            Messages in sequence order. Fewer than `max_count` (including
            none) only when the sub-queue is exhausted.
        """
        ...

    @abstractmethod
    async def get_runtime_properties(self, entity: EntityRef) -> RuntimeProperties:
        """
        Read exact message counts from the entity's metadata endpoint.

        Raises:
            RuntimePropertiesUnavailableError: If the endpoint is unsupported
                or not permitted for this entity.
        """
        ...

    # =========================================================================
    # OPTIONAL
    # =========================================================================

    async def send_message(
        self,
        entity: EntityRef,
        body: bytes,
        *,
        content_type: str | None = None,
        label: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> list[str]:
        """
        Send a message to a queue or topic.

        Returns:
            Sequence numbers assigned to the written message(s).

        Default: raises SendNotSupportedError.
        """
        _ = (body, content_type, label, properties)
        raise SendNotSupportedError(f"Source does not support sending to '{entity}'")


# =============================================================================
# Errors
# =============================================================================


class RuntimePropertiesUnavailableError(QueuePeekError):
    """Raised when the metadata endpoint cannot serve counts for an entity."""

    def __init__(self, entity: EntityRef, reason: str = "unsupported") -> None:
        self.entity = entity
        self.reason = reason
        super().__init__(f"Runtime properties unavailable for '{entity}': {reason}")


class SendNotSupportedError(QueuePeekError):
    """Raised when a message cannot be sent to the given entity."""

    pass
