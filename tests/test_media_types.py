"""Tests for media-type tables and byte sniffing."""

import pytest

from cdnsync.utils.media_types import (
    COMPRESS_BLACKLIST,
    CONTENT_TYPES,
    content_type_for_extension,
    is_compressible,
    sniff_content_type,
)


@pytest.mark.parametrize("data, expected", [
    (b"<!DOCTYPE html><html></html>", "text/html; charset=utf-8"),
    (b"  \n<html>\n<body>", "text/html; charset=utf-8"),
    (b"<p>hello</p>", "text/html; charset=utf-8"),
    (b"<?xml version='1.0'?><root/>", "text/xml; charset=utf-8"),
    (b"%PDF-1.7\n", "application/pdf"),
    (b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR", "image/png"),
    (b"GIF89a\x01\x00", "image/gif"),
    (b"\xff\xd8\xff\xe0\x00\x10JFIF", "image/jpeg"),
    (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
    (b"PK\x03\x04\x14\x00", "application/zip"),
    (b"\x1f\x8b\x08\x00", "application/x-gzip"),
    (b"wOF2\x00\x01", "font/woff2"),
    (b"\xef\xbb\xbfplain text", "text/plain; charset=utf-8"),
])
def test_sniff_signatures(data, expected):
    assert sniff_content_type(data) == expected


def test_sniff_mp4():
    data = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"
    assert sniff_content_type(data) == "video/mp4"


def test_plain_text_and_binary_fallbacks():
    assert sniff_content_type(b"just words\nand lines\n") == "text/plain; charset=utf-8"
    assert sniff_content_type(b"\x00\x01\x02\x03binary") == "application/octet-stream"


def test_empty_and_short_input_is_not_an_error():
    assert sniff_content_type(b"") == "text/plain; charset=utf-8"
    assert sniff_content_type(b"a") == "text/plain; charset=utf-8"


def test_only_first_512_bytes_are_considered():
    data = b"a" * 512 + b"\x00" * 100
    assert sniff_content_type(data) == "text/plain; charset=utf-8"


def test_html_tag_must_be_terminated():
    # "<a" followed by a letter is not an anchor tag
    assert sniff_content_type(b"<abc") == "text/plain; charset=utf-8"


def test_extension_table_lookup_is_case_insensitive():
    assert content_type_for_extension("CSS") == "text/css"
    assert content_type_for_extension("svg") == "image/svg+xml"
    assert content_type_for_extension("txt") is None


def test_blacklist():
    for ext in ("gif", "jpg", "png", "jpeg", "psd", "ai", "PNG"):
        assert not is_compressible(ext)
    assert is_compressible("html")
    assert is_compressible("")


def test_tables_are_immutable():
    with pytest.raises(TypeError):
        CONTENT_TYPES["txt"] = "text/plain"
    assert isinstance(COMPRESS_BLACKLIST, frozenset)
