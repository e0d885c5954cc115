"""Core data models for QueuePeek."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

MISSING_MESSAGE_ID = "NO-ID"

# Largest count reported to callers; larger runtime counts are clamped.
MAX_REPORTED_COUNT = 2**31 - 1


class SubQueue(StrEnum):
    """Logical sub-queue of an entity."""

    ACTIVE = "active"
    DEAD_LETTER = "dead_letter"


class MessageFilter(StrEnum):
    """Which sub-queue(s) a paged browse covers."""

    ALL = "all"
    ACTIVE = "active"
    DEAD_LETTER = "dead-letter"


@dataclass(frozen=True)
class EntityRef:
    """
    A queue, or a subscription on a topic.

    Accepts the conventional entity path form via `parse`:
        "orders"                       -> queue "orders"
        "events/subscriptions/audit"   -> topic "events", subscription "audit"
    """

    name: str
    subscription: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Entity name must not be empty")
        if self.subscription == "":
            object.__setattr__(self, "subscription", None)

    @property
    def is_subscription(self) -> bool:
        return self.subscription is not None

    @classmethod
    def parse(cls, path: str, subscription: str | None = None) -> EntityRef:
        """Build an entity reference from a path and optional subscription."""
        path = path.strip().strip("/")
        parts = path.split("/")
        if len(parts) == 3 and parts[1].lower() == "subscriptions":
            if subscription and subscription != parts[2]:
                raise ValueError(
                    f"Conflicting subscriptions: '{parts[2]}' in path, '{subscription}' given"
                )
            return cls(name=parts[0], subscription=parts[2])
        if len(parts) != 1:
            raise ValueError(f"Invalid entity path: '{path}'")
        return cls(name=parts[0], subscription=subscription)

    def __str__(self) -> str:
        if self.subscription is None:
            return self.name
        return f"{self.name}/subscriptions/{self.subscription}"


@dataclass
class PeekedMessage:
    """
    Raw message returned by a single peek call.

    `sequence_number` is an ordered, opaque cursor token. It is only valid
    inside the read session that produced it.
    """

    sequence_number: str
    enqueued_at: datetime
    body: bytes = b""
    message_id: str | None = None
    subject: str | None = None
    content_type: str | None = None


@dataclass
class MessageRecord:
    """A browsed message with its body decoded for display."""

    message_id: str
    label: str
    content_type: str
    enqueued_at: datetime
    body: str
    is_dead_letter: bool = False

    @classmethod
    def from_peeked(
        cls, message: PeekedMessage, *, body: str, is_dead_letter: bool
    ) -> MessageRecord:
        return cls(
            message_id=message.message_id or MISSING_MESSAGE_ID,
            label=message.subject or "",
            content_type=message.content_type or "",
            enqueued_at=message.enqueued_at,
            body=body,
            is_dead_letter=is_dead_letter,
        )


@dataclass
class RuntimeProperties:
    """Counts reported by an entity's metadata endpoint."""

    total: int
    active: int
    dead_letter: int
    scheduled: int = 0


@dataclass(frozen=True)
class AuthoritativeCounts:
    """Exact counts read from the metadata endpoint."""

    active: int
    dead_letter: int

    approximate = False

    @property
    def total(self) -> int:
        return self.active + self.dead_letter

    def for_sub_queue(self, sub_queue: SubQueue) -> int:
        return self.active if sub_queue == SubQueue.ACTIVE else self.dead_letter

    def __iter__(self) -> Iterator[int]:
        return iter((self.active, self.dead_letter))


@dataclass(frozen=True)
class ApproximateCounts:
    """Counts derived by walking each sub-queue, possibly stopped at a ceiling."""

    active: int
    dead_letter: int
    ceiling_hit: bool = field(default=False)

    approximate = True

    @property
    def total(self) -> int:
        return self.active + self.dead_letter

    def for_sub_queue(self, sub_queue: SubQueue) -> int:
        return self.active if sub_queue == SubQueue.ACTIVE else self.dead_letter

    def __iter__(self) -> Iterator[int]:
        return iter((self.active, self.dead_letter))


MessageCounts = AuthoritativeCounts | ApproximateCounts
