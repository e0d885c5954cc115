"""Message body encoding.

Bodies may carry a gzip envelope. Decoding never fails: a body that is not a
valid gzip stream is shown as its raw text.
"""

import gzip
import logging
import zlib

logger = logging.getLogger(__name__)


def _as_text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def decode_body(raw: bytes, decompress: bool = False) -> str:
    """Decode a message body, optionally reversing a gzip envelope."""
    if not decompress or not raw:
        return _as_text(raw)

    try:
        return _as_text(gzip.decompress(raw))
    except (OSError, EOFError, zlib.error) as e:
        logger.debug(f"Body is not gzip-compressed, using raw text: {e}")
        return _as_text(raw)


def encode_body(text: str, compress: bool = False) -> bytes:
    """Encode a message body as UTF-8, gzip-compressed when asked."""
    data = (text or "").encode("utf-8")
    if compress:
        return gzip.compress(data)
    return data
