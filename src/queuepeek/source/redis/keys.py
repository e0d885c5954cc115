"""Redis key helpers for stream-backed entities."""

import re

from queuepeek.domain import EntityRef, SubQueue

# Redis key prefix used by the default peek source.
DEFAULT_KEY_PREFIX = "queuepeek"

# Characters with special meaning in a SCAN MATCH glob.
_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")

_SUB_QUEUE_SUFFIX = {
    SubQueue.ACTIVE: "stream",
    SubQueue.DEAD_LETTER: "dlq",
}


def entity_key(*parts: str, key_prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Build an entity Redis key under the configured prefix."""
    return ":".join([key_prefix, *parts])


def entity_base_parts(entity: EntityRef) -> tuple[str, ...]:
    if entity.subscription is None:
        return ("queue", entity.name)
    return ("topic", entity.name, "sub", entity.subscription)


def sub_queue_stream_key(
    entity: EntityRef,
    sub_queue: SubQueue,
    *,
    key_prefix: str = DEFAULT_KEY_PREFIX,
) -> str:
    """Redis stream key holding one sub-queue of an entity."""
    return entity_key(
        *entity_base_parts(entity),
        _SUB_QUEUE_SUFFIX[sub_queue],
        key_prefix=key_prefix,
    )


def scheduled_key(entity: EntityRef, *, key_prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Redis sorted-set key for scheduled messages of a queue."""
    return entity_key(*entity_base_parts(entity), "scheduled", key_prefix=key_prefix)


def escape_glob(value: str) -> str:
    """Escape a literal for use inside a Redis glob pattern."""
    return _GLOB_SPECIAL.sub(r"\\\1", value)


def topic_subscription_stream_pattern(
    topic: str,
    *,
    key_prefix: str = DEFAULT_KEY_PREFIX,
) -> str:
    """SCAN pattern for the active streams of every subscription on a topic."""
    return entity_key(
        "topic",
        escape_glob(topic),
        "sub",
        "*",
        "stream",
        key_prefix=escape_glob(key_prefix),
    )
