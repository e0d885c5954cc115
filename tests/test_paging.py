from __future__ import annotations

import gzip

import pytest
from _fixtures.sources import BASE_TIME, ListPeekSource
from queuepeek.domain import MISSING_MESSAGE_ID, PeekedMessage, RuntimeProperties, SubQueue
from queuepeek.engine.counts import CountResolver
from queuepeek.engine.paging import PagedViewBuilder, validate_page_request
from queuepeek.errors import InvalidPageRequestError


def _builder(source, *, batch_cap: int | None = None) -> PagedViewBuilder:
    return PagedViewBuilder(source, CountResolver(source), batch_cap=batch_cap)


@pytest.mark.asyncio
@pytest.mark.parametrize("page_size", [1, 3, 4, 10, 11])
async def test_pages_cover_sub_queue_in_order(list_source, entity, page_size: int) -> None:
    source = list_source(active=10, max_batch_size=3)
    builder = _builder(source)

    seen: list[str] = []
    page_number = 1
    while True:
        page = await builder.get_page(entity, SubQueue.ACTIVE, page_number, page_size)
        assert page.total_count == 10
        assert len(page.items) <= page_size
        seen.extend(r.message_id for r in page.items)
        if not page.has_next_page:
            break
        page_number += 1

    assert seen == [f"a{i}" for i in range(10)]
    assert page_number == -(-10 // page_size)


@pytest.mark.asyncio
async def test_page_navigation_fields(list_source, entity) -> None:
    source = list_source(dead_letter=12)

    page = await _builder(source).get_page(entity, SubQueue.DEAD_LETTER, 2, 5)

    assert [r.message_id for r in page.items] == ["d5", "d6", "d7", "d8", "d9"]
    assert all(r.is_dead_letter for r in page.items)
    assert page.total_pages == 3
    assert page.has_previous_page is True
    assert page.has_next_page is True
    assert (page.start_index, page.end_index) == (6, 10)
    assert page.counts_approximate is False


@pytest.mark.asyncio
async def test_page_past_end_is_empty_with_real_total(list_source, entity) -> None:
    source = list_source(active=4)

    page = await _builder(source).get_page(entity, SubQueue.ACTIVE, 5, 2)

    assert page.items == []
    assert page.total_count == 4
    assert page.has_next_page is False
    assert page.total_pages == 2
    assert (page.start_index, page.end_index) == (0, 0)


@pytest.mark.asyncio
async def test_empty_sub_queue_page(list_source, entity) -> None:
    source = list_source()

    page = await _builder(source).get_page(entity, SubQueue.DEAD_LETTER, 1, 50)

    assert page.items == []
    assert page.total_count == 0
    assert page.total_pages == 0
    assert (page.start_index, page.end_index) == (0, 0)


@pytest.mark.asyncio
@pytest.mark.parametrize(("page_number", "page_size", "field"), [
    (0, 10, "page_number"),
    (-1, 10, "page_number"),
    (1, 0, "page_size"),
])
async def test_invalid_page_request_is_rejected_before_io(
    list_source, entity, page_number: int, page_size: int, field: str
) -> None:
    source = list_source(active=3)

    with pytest.raises(InvalidPageRequestError) as exc_info:
        await _builder(source).get_page(entity, SubQueue.ACTIVE, page_number, page_size)

    assert exc_info.value.field == field
    assert source.peek_calls == []
    assert source.properties_calls == 0


def test_invalid_page_request_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="page_size must be >= 1, got 0"):
        validate_page_request(1, 0)


@pytest.mark.asyncio
async def test_stale_count_is_requeried_once(list_source, entity) -> None:
    source = list_source(
        active=6,
        properties=RuntimeProperties(total=2, active=2, dead_letter=0),
    )

    page = await _builder(source).get_page(entity, SubQueue.ACTIVE, 1, 5)

    assert len(page.items) == 5
    # Still stale after the second query: never report less than was read.
    assert page.total_count == 5
    assert source.properties_calls == 2


@pytest.mark.asyncio
async def test_page_records_fill_sentinels_and_decompress(entity) -> None:
    source = ListPeekSource(
        active=[
            PeekedMessage(
                sequence_number="9",
                enqueued_at=BASE_TIME,
                body=gzip.compress(b'{"ok": true}'),
            )
        ]
    )

    page = await _builder(source).get_page(
        entity, SubQueue.ACTIVE, 1, 10, decompress=True
    )

    record = page.items[0]
    assert record.message_id == MISSING_MESSAGE_ID
    assert record.label == ""
    assert record.content_type == ""
    assert record.body == '{"ok": true}'
    assert record.is_dead_letter is False
