"""Redis Streams peek source for QueuePeek.

Each entity keeps its active and dead-letter sub-queues as two streams:
- XADD appends a message; the entry id is its sequence number
- XRANGE with an exclusive lower bound is the non-destructive peek
- XLEN/ZCARD serve the runtime-properties counts

Key structure:
    queuepeek:queue:{queue}:stream               - Active messages of a queue
    queuepeek:queue:{queue}:dlq                  - Dead-lettered messages of a queue
    queuepeek:queue:{queue}:scheduled            - ZSET of scheduled messages
    queuepeek:topic:{topic}:sub:{sub}:stream     - Active messages of a subscription
    queuepeek:topic:{topic}:sub:{sub}:dlq        - Dead-lettered messages of a subscription
"""

import json
import logging
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import redis.asyncio as redis

from queuepeek.config import get_settings
from queuepeek.domain import EntityRef, PeekedMessage, RuntimeProperties, SubQueue
from queuepeek.logging import log_context
from queuepeek.source.base import (
    BasePeekSource,
    RuntimePropertiesUnavailableError,
    SendNotSupportedError,
)
from queuepeek.source.redis.keys import (
    scheduled_key,
    sub_queue_stream_key,
    topic_subscription_stream_pattern,
)

logger = logging.getLogger(__name__)


def _decode_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode()
    return str(value)


def _field(data: Mapping[Any, Any], name: str) -> Any:
    value = data.get(name.encode())
    if value is None:
        value = data.get(name)
    return value


def stream_id_timestamp(entry_id: str) -> datetime:
    """Extract the millisecond timestamp Redis encodes in a stream entry id."""
    ms_part = entry_id.split("-", 1)[0]
    return datetime.fromtimestamp(int(ms_part) / 1000, UTC)


class RedisPeekSource(BasePeekSource):
    """
    Redis Streams-based peek source.

    Peeking never acknowledges, claims, or trims entries, so browsing leaves
    every stream exactly as it was found.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        key_prefix: str | None = None,
        *,
        client: Any | None = None,
        max_batch_size: int | None = None,
        runtime_properties_enabled: bool | None = None,
    ) -> None:
        settings = get_settings()

        self._redis_url = redis_url or settings.redis_url
        self._key_prefix = key_prefix or settings.key_prefix
        self.max_batch_size = max(
            1,
            settings.peek_batch_size if max_batch_size is None else int(max_batch_size),
        )
        self._runtime_properties_enabled = (
            settings.runtime_properties_enabled
            if runtime_properties_enabled is None
            else runtime_properties_enabled
        )

        # Injected clients are owned by the caller.
        self._client: Any = client
        self._owns_client = client is None

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def start(self) -> None:
        await self._ensure_connected()

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _ensure_connected(self) -> Any:
        """Ensure Redis connection is established."""
        if self._client is None:
            self._client = redis.from_url(self._redis_url, decode_responses=False)
            self._owns_client = True
        return self._client

    # =========================================================================
    # KEYS
    # =========================================================================

    def stream_key(self, entity: EntityRef, sub_queue: SubQueue) -> str:
        return sub_queue_stream_key(entity, sub_queue, key_prefix=self._key_prefix)

    def _scheduled_key(self, entity: EntityRef) -> str:
        return scheduled_key(entity, key_prefix=self._key_prefix)

    # =========================================================================
    # PEEK
    # =========================================================================

    async def peek(
        self,
        entity: EntityRef,
        sub_queue: SubQueue,
        max_count: int,
        *,
        from_sequence_after: str | None = None,
    ) -> list[PeekedMessage]:
        if max_count < 1:
            return []
        if max_count > self.max_batch_size:
            raise ValueError(
                f"Peek batch of {max_count} exceeds the limit of {self.max_batch_size}"
            )

        client = await self._ensure_connected()
        start = "-" if from_sequence_after is None else f"({from_sequence_after}"
        rows = await client.xrange(
            self.stream_key(entity, sub_queue), min=start, max="+", count=max_count
        )
        return [self._parse_entry(msg_id, msg_data) for msg_id, msg_data in rows]

    @staticmethod
    def _parse_entry(msg_id: Any, msg_data: Mapping[Any, Any]) -> PeekedMessage:
        entry_id = _decode_text(msg_id)

        enqueued_at = stream_id_timestamp(entry_id)
        enqueued_raw = _field(msg_data, "enqueued_at")
        if enqueued_raw:
            try:
                enqueued_at = datetime.fromisoformat(_decode_text(enqueued_raw))
            except ValueError:
                pass

        body_raw = _field(msg_data, "body")
        if body_raw is None:
            body = b""
        elif isinstance(body_raw, bytes):
            body = body_raw
        else:
            body = str(body_raw).encode()

        def optional_text(name: str) -> str | None:
            value = _field(msg_data, name)
            return _decode_text(value) if value else None

        return PeekedMessage(
            sequence_number=entry_id,
            enqueued_at=enqueued_at,
            body=body,
            message_id=optional_text("message_id"),
            subject=optional_text("subject"),
            content_type=optional_text("content_type"),
        )

    # =========================================================================
    # COUNTS
    # =========================================================================

    async def get_runtime_properties(self, entity: EntityRef) -> RuntimeProperties:
        if not self._runtime_properties_enabled:
            raise RuntimePropertiesUnavailableError(entity, "disabled by configuration")

        client = await self._ensure_connected()
        async with client.pipeline(transaction=False) as pipe:
            pipe.xlen(self.stream_key(entity, SubQueue.ACTIVE))
            pipe.xlen(self.stream_key(entity, SubQueue.DEAD_LETTER))
            if not entity.is_subscription:
                pipe.zcard(self._scheduled_key(entity))
            results = await pipe.execute()

        active = int(results[0])
        dead_letter = int(results[1])
        # Subscriptions have no scheduled count in their runtime properties.
        scheduled = int(results[2]) if not entity.is_subscription else 0

        logger.debug(
            f"Runtime properties for {entity} - active: {active:,}, "
            f"dlq: {dead_letter:,}, scheduled: {scheduled:,}",
            extra=log_context(entity),
        )
        return RuntimeProperties(
            total=active + dead_letter + scheduled,
            active=active,
            dead_letter=dead_letter,
            scheduled=scheduled,
        )

    # =========================================================================
    # SEND
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
        if entity.is_subscription:
            raise SendNotSupportedError(
                "Cannot send messages to a subscription. Send to the topic instead."
            )

        client = await self._ensure_connected()
        payload: dict[str, Any] = {
            "message_id": uuid.uuid4().hex,
            "enqueued_at": datetime.now(UTC).isoformat(),
            "body": body,
        }
        if content_type:
            payload["content_type"] = content_type
        if label:
            payload["subject"] = label
        if properties:
            payload["properties"] = json.dumps(properties, default=str)

        sequence_numbers: list[str] = []
        for stream_key in await self._send_targets(client, entity):
            entry_id = await client.xadd(stream_key, payload)
            sequence_numbers.append(_decode_text(entry_id))
        logger.debug(
            f"Sent message {payload['message_id']} to {entity}",
            extra=log_context(entity),
        )
        return sequence_numbers

    async def _send_targets(self, client: Any, entity: EntityRef) -> list[str]:
        """Fan out to every subscription when the name is a topic, else the queue."""
        pattern = topic_subscription_stream_pattern(
            entity.name, key_prefix=self._key_prefix
        )
        topic_streams = sorted(
            [_decode_text(key) async for key in client.scan_iter(match=pattern, count=100)]
        )
        return topic_streams or [self.stream_key(entity, SubQueue.ACTIVE)]
