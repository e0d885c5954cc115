"""QueuePeek engine - paging over cursor-only peek sources."""

from queuepeek.engine.codec import decode_body, encode_body
from queuepeek.engine.counts import CountResolver
from queuepeek.engine.paging import PagedViewBuilder, validate_page_request
from queuepeek.engine.reader import ReadWindow, iter_peek_batches, read_slice, read_window
from queuepeek.engine.unified import UnifiedPageCompositor

__all__ = [
    # Codec
    "decode_body",
    "encode_body",
    # Reader
    "ReadWindow",
    "iter_peek_batches",
    "read_slice",
    "read_window",
    # Counts
    "CountResolver",
    # Pages
    "PagedViewBuilder",
    "UnifiedPageCompositor",
    "validate_page_request",
]
