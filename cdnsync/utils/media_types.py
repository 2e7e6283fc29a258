"""
Media-type tables and byte-pattern content sniffing.

The extension tables are immutable and built once at import.  When an
extension is unknown, :func:`sniff_content_type` classifies the first
512 bytes of a file by looking for well-known signatures.
"""
from types import MappingProxyType

SNIFF_LENGTH = 512

CONTENT_TYPES = MappingProxyType({
    "css": "text/css",
    "html": "text/html",
    "htm": "text/html",
    "ico": "image/x-ico",
    "js": "text/javascript",
    "jpg": "image/jpeg",
    "gif": "image/gif",
    "png": "image/png",
    "xml": "application/xml",
    "svg": "image/svg+xml",
    "jpeg": "image/jpeg",
})

# Already-compressed or binary media formats that gzip cannot shrink
COMPRESS_BLACKLIST = frozenset({
    "gif",
    "jpg",
    "png",
    "jpeg",
    "psd",
    "ai",
})

TEXT_PLAIN = "text/plain; charset=utf-8"
OCTET_STREAM = "application/octet-stream"

_WHITESPACE = b"\t\n\x0c\r "

# Case-insensitive HTML openers; each must be followed by a space or '>'
_HTML_TAGS = (
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME",
    b"<H1", b"<DIV", b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE",
    b"<B", b"<BODY", b"<BR", b"<P", b"<!--",
)

# (prefix, media type), checked in order against the raw bytes
_EXACT_SIGNATURES = (
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", TEXT_PLAIN),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x00\x00\x02\x00", "image/x-icon"),
    (b"BM", "image/bmp"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"OggS\x00", "application/ogg"),
    (b"ID3", "audio/mpeg"),
    (b"\x1a\x45\xdf\xa3", "video/webm"),
    (b"OTTO", "font/otf"),
    (b"wOFF", "font/woff"),
    (b"wOF2", "font/woff2"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
    (b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    (b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    (b"\x00asm", "application/wasm"),
)

# RIFF containers: bytes 8..12 name the format
_RIFF_FORMATS = (
    (b"WEBPVP", "image/webp"),
    (b"WAVE", "audio/wave"),
    (b"AVI ", "video/avi"),
)


def _is_html(data):
    data = data.lstrip(_WHITESPACE)
    for tag in _HTML_TAGS:
        if len(data) <= len(tag):
            continue
        if data[:len(tag)].upper() == tag and data[len(tag)] in b" >":
            return True
    return False


def _is_mp4(data):
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if box_size % 4 != 0 or len(data) < box_size or data[4:8] != b"ftyp":
        return False
    for start in range(8, box_size, 4):
        if start == 12:
            # minor version number
            continue
        if data[start:start + 3] == b"mp4":
            return True
    return False


def _has_binary_bytes(data):
    return any(b <= 0x08 or b == 0x0B or 0x0E <= b <= 0x1A or 0x1C <= b <= 0x1F
               for b in data)


def sniff_content_type(data: bytes) -> str:
    """Classify up to the first 512 bytes of a file.

    Always returns a valid media type: ``text/plain; charset=utf-8`` for
    anything that looks like text, ``application/octet-stream`` otherwise.

    Args:
        data: Leading bytes of the file (longer input is truncated)

    Returns:
        Media type string
    """
    data = data[:SNIFF_LENGTH]

    if _is_html(data):
        return "text/html; charset=utf-8"
    if data.lstrip(_WHITESPACE).startswith(b"<?xml"):
        return "text/xml; charset=utf-8"

    for prefix, media_type in _EXACT_SIGNATURES:
        if data.startswith(prefix):
            return media_type

    if data.startswith(b"RIFF") and len(data) >= 12:
        for fourcc, media_type in _RIFF_FORMATS:
            if data[8:8 + len(fourcc)] == fourcc:
                return media_type

    if _is_mp4(data):
        return "video/mp4"

    if _has_binary_bytes(data):
        return OCTET_STREAM
    return TEXT_PLAIN


def content_type_for_extension(extension):
    """Look up the fixed extension table; ``None`` on miss."""
    return CONTENT_TYPES.get(extension.lower())


def is_compressible(extension):
    """Whether files with this extension may be gzip-compressed."""
    return extension.lower() not in COMPRESS_BLACKLIST
