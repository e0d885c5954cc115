from __future__ import annotations

import gzip
import logging

from queuepeek.engine.codec import decode_body, encode_body


def test_decode_plain_utf8_body() -> None:
    assert decode_body("héllo wörld".encode()) == "héllo wörld"


def test_decode_empty_body_is_empty_string() -> None:
    assert decode_body(b"") == ""
    assert decode_body(b"", decompress=True) == ""


def test_decode_replaces_invalid_utf8() -> None:
    assert decode_body(b"ok\xff") == "ok�"


def test_decompress_reverses_gzip_envelope() -> None:
    raw = gzip.compress('{"order_id": 7}'.encode())
    assert decode_body(raw, decompress=True) == '{"order_id": 7}'


def test_compressed_body_is_left_alone_without_decompress() -> None:
    raw = gzip.compress(b"payload")
    assert decode_body(raw) != "payload"


def test_decompress_falls_back_to_raw_text_for_plain_body(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="queuepeek.engine.codec")

    assert decode_body(b"not compressed", decompress=True) == "not compressed"
    assert "not gzip-compressed" in caplog.text


def test_decompress_falls_back_for_truncated_gzip_stream() -> None:
    raw = gzip.compress(b"x" * 200)[:12]
    assert decode_body(raw, decompress=True) == raw.decode("utf-8", errors="replace")


def test_encode_body_plain_and_compressed() -> None:
    assert encode_body("hello") == b"hello"
    assert gzip.decompress(encode_body("hello", compress=True)) == b"hello"
    assert decode_body(encode_body("hello", compress=True), decompress=True) == "hello"


def test_decompress_fallback_matches_plain_decode() -> None:
    for raw in (b"plain text", b"\x1f\x8b broken header", "ünïcode".encode()):
        assert decode_body(raw, decompress=True) == decode_body(raw)
