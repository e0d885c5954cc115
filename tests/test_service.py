from __future__ import annotations

import asyncio
import json

import pytest
from queuepeek.domain import (
    ApproximateCounts,
    AuthoritativeCounts,
    EntityRef,
    MessageFilter,
    SubQueue,
)
from queuepeek.errors import InvalidPageRequestError
from queuepeek.service import MessageService
from queuepeek.source.base import SendNotSupportedError
from queuepeek.source.redis import RedisPeekSource, sub_queue_stream_key


@pytest.fixture
def redis_service(fake_redis) -> MessageService:
    return MessageService(
        lambda: RedisPeekSource(client=fake_redis, key_prefix="queuepeek-test")
    )


@pytest.mark.asyncio
async def test_unified_pages_over_redis_streams(redis_service, seed) -> None:
    entity = EntityRef("orders")
    await seed(entity, SubQueue.ACTIVE, ["a1", "a2"])
    await seed(entity, SubQueue.DEAD_LETTER, ["d1"])

    first = await redis_service.get_paged_messages(entity, 1, 2)
    second = await redis_service.get_paged_messages(entity, 2, 2)

    assert [r.message_id for r in first.items] == ["a1", "a2"]
    assert [r.message_id for r in second.items] == ["d1"]
    assert second.items[0].is_dead_letter is True
    assert first.total_count == second.total_count == 3
    assert first.has_next_page is True
    assert second.has_next_page is False
    assert (second.start_index, second.end_index) == (3, 3)


@pytest.mark.asyncio
async def test_filtered_pages_cover_one_sub_queue(redis_service, seed) -> None:
    entity = EntityRef("events", "audit")
    await seed(entity, SubQueue.ACTIVE, ["a1", "a2", "a3"])
    await seed(entity, SubQueue.DEAD_LETTER, ["d1", "d2"])

    active = await redis_service.get_paged_messages(
        entity, 2, 2, message_filter=MessageFilter.ACTIVE
    )
    dead_letter = await redis_service.get_paged_messages(
        entity, 1, 10, message_filter=MessageFilter.DEAD_LETTER
    )

    assert [r.message_id for r in active.items] == ["a3"]
    assert active.total_count == 3
    assert [r.message_id for r in dead_letter.items] == ["d1", "d2"]
    assert dead_letter.total_count == 2


@pytest.mark.asyncio
async def test_resubmit_compressed_body_round_trips(redis_service) -> None:
    entity = EntityRef("orders")

    sequence_numbers = await redis_service.resubmit_message(
        entity, '{"retry": 1}', content_type="application/json", compress=True
    )
    compressed = await redis_service.peek(entity, 10)
    decompressed = await redis_service.peek(entity, 10, decompress=True)

    assert len(sequence_numbers) == 1
    assert compressed[0].body != '{"retry": 1}'
    assert decompressed[0].body == '{"retry": 1}'
    assert decompressed[0].content_type == "application/json"


@pytest.mark.asyncio
async def test_resubmit_stores_application_properties(redis_service, fake_redis) -> None:
    entity = EntityRef("orders")

    await redis_service.resubmit_message(
        entity, "retry", label="replayed", properties={"source": "replay", "attempt": 2}
    )
    ((_, fields),) = await fake_redis.xrange(
        sub_queue_stream_key(entity, SubQueue.ACTIVE, key_prefix="queuepeek-test")
    )

    assert json.loads(fields[b"properties"]) == {"source": "replay", "attempt": 2}
    assert fields[b"subject"] == b"replayed"


@pytest.mark.asyncio
async def test_resubmit_to_subscription_fails(redis_service) -> None:
    with pytest.raises(SendNotSupportedError):
        await redis_service.resubmit_message(EntityRef("events", "audit"), "x")


@pytest.mark.asyncio
async def test_peek_all_lists_active_before_dead_letter(list_source, entity) -> None:
    source = list_source(active=3, dead_letter=2)
    service = MessageService(lambda: source)

    records = await service.peek_all(entity, 2)

    assert [r.message_id for r in records] == ["a0", "a1", "d0", "d1"]
    assert [r.is_dead_letter for r in records] == [False, False, True, True]
    assert source.closed is True


@pytest.mark.asyncio
async def test_peek_dead_letter_only(list_source, entity) -> None:
    service = MessageService(lambda: list_source(active=3, dead_letter=4))

    records = await service.peek_dead_letter(entity, 3)

    assert [r.message_id for r in records] == ["d0", "d1", "d2"]


@pytest.mark.asyncio
async def test_message_counts(list_source, entity) -> None:
    service = MessageService(lambda: list_source(active=3, dead_letter=1))

    assert await service.get_message_counts(entity) == AuthoritativeCounts(3, 1)


@pytest.mark.asyncio
async def test_message_counts_fallback_honors_ceiling(list_source, entity) -> None:
    service = MessageService(
        lambda: list_source(active=9, dead_letter=1, properties_error=PermissionError()),
        count_ceiling=5,
    )

    counts = await service.get_message_counts(entity)

    assert counts == ApproximateCounts(active=5, dead_letter=1, ceiling_hit=True)


@pytest.mark.asyncio
async def test_page_size_is_capped(list_source, entity) -> None:
    service = MessageService(lambda: list_source(active=20), max_page_size=3)

    page = await service.get_paged_messages(entity, 2, 100)

    assert page.page_size == 3
    assert [r.message_id for r in page.items] == ["a3", "a4", "a5"]


@pytest.mark.asyncio
async def test_invalid_page_request_opens_no_source(entity) -> None:
    opened: list[object] = []

    def factory():  # noqa: ANN202
        opened.append(object())
        raise AssertionError("source should not be opened")

    service = MessageService(factory)

    with pytest.raises(InvalidPageRequestError):
        await service.get_paged_messages(entity, 0, 10)
    assert opened == []


@pytest.mark.asyncio
async def test_cancelled_read_closes_source(list_source, entity) -> None:
    source = list_source(active=3)
    started = asyncio.Event()

    async def hanging_peek(*args, **kwargs):  # noqa: ANN002, ANN003, ANN202, ARG001
        started.set()
        await asyncio.sleep(60)

    source.peek = hanging_peek  # type: ignore[method-assign]
    service = MessageService(lambda: source)

    task = asyncio.create_task(service.peek(entity, 2))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert source.closed is True
