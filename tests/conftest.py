from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import pytest
import pytest_asyncio
from _fixtures.sources import ListPeekSource, make_messages
from fakeredis.aioredis import FakeRedis
from queuepeek.config import get_settings
from queuepeek.domain import EntityRef, SubQueue
from queuepeek.source.redis import RedisPeekSource


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def entity() -> EntityRef:
    return EntityRef("orders")


@pytest.fixture
def list_source() -> Callable[..., ListPeekSource]:
    def build(active: int = 0, dead_letter: int = 0, **kwargs) -> ListPeekSource:  # noqa: ANN003
        return ListPeekSource(
            active=make_messages("a", active),
            dead_letter=make_messages("d", dead_letter, start=5_000, step=11),
            **kwargs,
        )

    return build


@pytest_asyncio.fixture
async def fake_redis() -> AsyncIterator[FakeRedis]:
    client = FakeRedis(decode_responses=False)
    try:
        yield client
    finally:
        await client.aclose()


@pytest.fixture
def redis_source(fake_redis) -> RedisPeekSource:
    return RedisPeekSource(client=fake_redis, key_prefix="queuepeek-test")


@pytest.fixture
def seed(fake_redis, redis_source: RedisPeekSource):
    """Append messages with the given ids to a sub-queue stream."""

    async def _seed(
        entity: EntityRef,
        sub_queue: SubQueue,
        message_ids: list[str],
        *,
        body: bytes | None = None,
    ) -> list[str]:
        stream_key = redis_source.stream_key(entity, sub_queue)
        entry_ids: list[str] = []
        for message_id in message_ids:
            entry_id = await fake_redis.xadd(
                stream_key,
                {
                    "message_id": message_id,
                    "subject": f"label-{message_id}",
                    "content_type": "application/json",
                    "body": body if body is not None else f'{{"id": "{message_id}"}}'.encode(),
                },
            )
            entry_ids.append(entry_id.decode() if isinstance(entry_id, bytes) else entry_id)
        return entry_ids

    return _seed
