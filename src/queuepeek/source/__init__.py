"""Peek source implementations for QueuePeek."""

from queuepeek.source.base import (
    BasePeekSource,
    RuntimePropertiesUnavailableError,
    SendNotSupportedError,
)
from queuepeek.source.redis import RedisPeekSource

__all__ = [
    "BasePeekSource",
    "RedisPeekSource",
    "RuntimePropertiesUnavailableError",
    "SendNotSupportedError",
]
