"""Content-type sniffing for uploads that arrive without an explicit type.

Implements the signature table of the WHATWG MIME Sniffing standard, the same
subset browsers and Go's ``net/http.DetectContentType`` use, so a payload is
labelled identically whichever client uploaded it.
"""

from __future__ import annotations

from .utils import SNIFF_LENGTH

DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

_WHITESPACE = b"\t\n\x0c\r "
_TAG_TERMINATORS = b" >"

_HTML_TAGS = (
    b"<!DOCTYPE HTML",
    b"<HTML",
    b"<HEAD",
    b"<SCRIPT",
    b"<IFRAME",
    b"<H1",
    b"<DIV",
    b"<FONT",
    b"<TABLE",
    b"<A",
    b"<STYLE",
    b"<TITLE",
    b"<B",
    b"<BODY",
    b"<BR",
    b"<P",
    b"<!--",
)

# (mask, pattern, content type); pattern bytes are compared after masking.
_MASKED_SIGNATURES: tuple[tuple[bytes, bytes, str], ...] = (
    (b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff\xff\xff",
     b"RIFF\x00\x00\x00\x00WEBPVP", "image/webp"),
    (b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
     b"FORM\x00\x00\x00\x00AIFF", "audio/aiff"),
    (b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
     b"RIFF\x00\x00\x00\x00AVI ", "video/avi"),
    (b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
     b"RIFF\x00\x00\x00\x00WAVE", "audio/wave"),
)

_EXACT_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", "text/plain; charset=utf-8"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x00\x00\x02\x00", "image/x-icon"),
    (b"BM", "image/bmp"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"ID3", "audio/mpeg"),
    (b"OggS\x00", "application/ogg"),
    (b"MThd\x00\x00\x00\x06", "audio/midi"),
    (b"\x1a\x45\xdf\xa3", "video/webm"),
)

# Embedded OpenType: "LP" magic at offset 34, checked between the two tables.
_EOT_MAGIC_OFFSET = 34
_EOT_MAGIC = b"LP"

_FONT_AND_ARCHIVE_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x00\x01\x00\x00", "font/ttf"),
    (b"OTTO", "font/otf"),
    (b"ttcf", "font/collection"),
    (b"wOFF", "font/woff"),
    (b"wOF2", "font/woff2"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
    (b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    (b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    (b"\x00asm", "application/wasm"),
)


def _skip_whitespace(data: bytes) -> bytes:
    return data.lstrip(_WHITESPACE)


def _match_html(data: bytes) -> bool:
    data = _skip_whitespace(data)
    for tag in _HTML_TAGS:
        if len(data) < len(tag) + 1:
            continue
        if data[: len(tag)].upper() == tag and data[len(tag)] in _TAG_TERMINATORS:
            return True
    return False


def _match_mp4(data: bytes) -> bool:
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0 or data[4:8] != b"ftyp":
        return False
    for start in range(8, box_size, 4):
        if start == 12:
            # version number
            continue
        if data[start : start + 3] == b"mp4":
            return True
    return False


def _is_binary_byte(b: int) -> bool:
    return b <= 0x08 or b == 0x0B or 0x0E <= b <= 0x1A or 0x1C <= b <= 0x1F


def sniff_content_type(data: bytes) -> str:
    """Return the sniffed MIME type of ``data``, considering at most 512 bytes.

    Always returns a valid type, falling back to ``application/octet-stream``.
    """
    data = data[:SNIFF_LENGTH]

    if _match_html(data):
        return "text/html; charset=utf-8"
    if _skip_whitespace(data)[:5] == b"<?xml":
        return "text/xml; charset=utf-8"

    for mask, pattern, content_type in _MASKED_SIGNATURES:
        if len(data) < len(pattern):
            continue
        if bytes(d & m for d, m in zip(data, mask)) == pattern:
            return content_type

    for prefix, content_type in _EXACT_SIGNATURES:
        if data.startswith(prefix):
            return content_type

    if data[_EOT_MAGIC_OFFSET : _EOT_MAGIC_OFFSET + len(_EOT_MAGIC)] == _EOT_MAGIC:
        return "application/vnd.ms-fontobject"

    for prefix, content_type in _FONT_AND_ARCHIVE_SIGNATURES:
        if data.startswith(prefix):
            return content_type

    if _match_mp4(data):
        return "video/mp4"

    if not any(_is_binary_byte(b) for b in data):
        return TEXT_CONTENT_TYPE
    return DEFAULT_CONTENT_TYPE


__all__ = ["DEFAULT_CONTENT_TYPE", "TEXT_CONTENT_TYPE", "sniff_content_type"]
