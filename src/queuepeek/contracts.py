"""Browsing response payloads."""

import math

from pydantic import BaseModel, ConfigDict, Field, computed_field

from queuepeek.domain import MessageCounts, MessageRecord


class MessagePage(BaseModel):
    """One page of browsed messages plus navigation metadata."""

    items: list[MessageRecord] = Field(default_factory=list)
    total_count: int = 0
    page_number: int = 1
    page_size: int = 50
    counts_approximate: bool = False

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @computed_field  # type: ignore[prop-decorator]
    @property
    def start_index(self) -> int:
        """1-based position of the first item on this page, 0 when empty."""
        first = (self.page_number - 1) * self.page_size + 1
        if self.total_count <= 0 or first > self.total_count:
            return 0
        return first

    @computed_field  # type: ignore[prop-decorator]
    @property
    def end_index(self) -> int:
        """1-based position of the last item on this page, 0 when empty."""
        if self.start_index == 0:
            return 0
        return min(self.page_number * self.page_size, self.total_count)


class MessageCountsResponse(BaseModel):
    """Active and dead-letter counts for an entity."""

    entity: str
    active: int
    dead_letter: int
    total: int
    approximate: bool = False
    ceiling_hit: bool = False

    @classmethod
    def from_counts(cls, entity: str, counts: MessageCounts) -> "MessageCountsResponse":
        return cls(
            entity=entity,
            active=counts.active,
            dead_letter=counts.dead_letter,
            total=counts.total,
            approximate=counts.approximate,
            ceiling_hit=getattr(counts, "ceiling_hit", False),
        )


__all__ = ["MessageCountsResponse", "MessagePage"]
