"""Redis Streams peek source."""

from queuepeek.source.redis.keys import DEFAULT_KEY_PREFIX, sub_queue_stream_key
from queuepeek.source.redis.source import RedisPeekSource

__all__ = ["DEFAULT_KEY_PREFIX", "RedisPeekSource", "sub_queue_stream_key"]
