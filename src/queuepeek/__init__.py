"""QueuePeek - Non-destructive, paged browsing of queues and dead-letter queues."""

from queuepeek._version import __version__
from queuepeek.contracts import MessageCountsResponse, MessagePage
from queuepeek.domain import (
    ApproximateCounts,
    AuthoritativeCounts,
    EntityRef,
    MessageCounts,
    MessageFilter,
    MessageRecord,
    SubQueue,
)
from queuepeek.errors import InvalidPageRequestError, QueuePeekError
from queuepeek.service import MessageService
from queuepeek.source import (
    BasePeekSource,
    RedisPeekSource,
    RuntimePropertiesUnavailableError,
    SendNotSupportedError,
)

__all__ = [
    "ApproximateCounts",
    "AuthoritativeCounts",
    "BasePeekSource",
    "EntityRef",
    "InvalidPageRequestError",
    "MessageCounts",
    "MessageCountsResponse",
    "MessageFilter",
    "MessagePage",
    "MessageRecord",
    "MessageService",
    "QueuePeekError",
    "RedisPeekSource",
    "RuntimePropertiesUnavailableError",
    "SendNotSupportedError",
    "SubQueue",
    "__version__",
]
