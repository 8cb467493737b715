"""Content-type sniffing from raw bytes, independent of any image codec.

Follows the WHATWG MIME sniffing table: only the first 512 bytes are looked at,
and the client-declared type is never consulted.
"""

from __future__ import annotations

from typing import Callable, Optional

SNIFF_LEN = 512

TEXT_PLAIN = "text/plain; charset=utf-8"
OCTET_STREAM = "application/octet-stream"

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

# (pattern, mask, skip leading whitespace, mime type); mask None means exact prefix.
_MASKED_SIGNATURES = (
    (b"<?xml", b"\xFF\xFF\xFF\xFF\xFF", True, "text/xml; charset=utf-8"),
    (b"%PDF-", None, False, "application/pdf"),
    (b"%!PS-Adobe-", None, False, "application/postscript"),
    # byte order marks
    (b"\xFE\xFF\x00\x00", b"\xFF\xFF\x00\x00", False, "text/plain; charset=utf-16be"),
    (b"\xFF\xFE\x00\x00", b"\xFF\xFF\x00\x00", False, "text/plain; charset=utf-16le"),
    (b"\xEF\xBB\xBF\x00", b"\xFF\xFF\xFF\x00", False, TEXT_PLAIN),
    # images
    (b"\x00\x00\x01\x00", None, False, "image/x-icon"),
    (b"\x00\x00\x02\x00", None, False, "image/x-icon"),
    (b"BM", None, False, "image/bmp"),
    (b"GIF87a", None, False, "image/gif"),
    (b"GIF89a", None, False, "image/gif"),
    (
        b"RIFF\x00\x00\x00\x00WEBPVP",
        b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF\xFF\xFF",
        False,
        "image/webp",
    ),
    (b"\x89PNG\x0D\x0A\x1A\x0A", None, False, "image/png"),
    (b"\xFF\xD8\xFF", None, False, "image/jpeg"),
    # audio and video
    (b".snd", b"\xFF\xFF\xFF\xFF", False, "audio/basic"),
    (
        b"FORM\x00\x00\x00\x00AIFF",
        b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF",
        False,
        "audio/aiff",
    ),
    (b"ID3", b"\xFF\xFF\xFF", False, "audio/mpeg"),
    (b"OggS\x00", b"\xFF\xFF\xFF\xFF\xFF", False, "application/ogg"),
    (b"MThd\x00\x00\x00\x06", b"\xFF\xFF\xFF\xFF\xFF\xFF\xFF\xFF", False, "audio/midi"),
    (
        b"RIFF\x00\x00\x00\x00AVI ",
        b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF",
        False,
        "video/avi",
    ),
    (
        b"RIFF\x00\x00\x00\x00WAVE",
        b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF",
        False,
        "audio/wave",
    ),
)

_LATE_SIGNATURES = (
    (b"\x1A\x45\xDF\xA3", None, False, "video/webm"),
    # fonts
    (b"\x00\x01\x00\x00", None, False, "font/ttf"),
    (b"OTTO", None, False, "font/otf"),
    (b"ttcf", None, False, "font/collection"),
    (b"wOFF", None, False, "font/woff"),
    (b"wOF2", None, False, "font/woff2"),
    # archives
    (b"\x1F\x8B\x08", None, False, "application/x-gzip"),
    (b"PK\x03\x04", None, False, "application/zip"),
    (b"Rar!\x1A\x07\x00", None, False, "application/x-rar-compressed"),
    (b"Rar!\x1A\x07\x01\x00", None, False, "application/x-rar-compressed"),
    (b"7z\xBC\xAF\x27\x1C", None, False, "application/x-7z-compressed"),
    (b"\x00\x61\x73\x6D", None, False, "application/wasm"),
)

_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)


def _first_non_ws(data: bytes) -> int:
    index = 0
    while index < len(data) and data[index] in _WHITESPACE:
        index += 1
    return index


def _match_html(data: bytes) -> Optional[str]:
    """Case-insensitive tag match, the tag must be followed by a space or '>'."""
    for tag in _HTML_TAGS:
        if len(data) < len(tag) + 1:
            continue
        if data[: len(tag)].upper() != tag:
            continue
        if data[len(tag)] in _TAG_TERMINATORS:
            return "text/html; charset=utf-8"
    return None


def _match_signature(
    data: bytes, pattern: bytes, mask: Optional[bytes], skip_ws: bool
) -> bool:
    if skip_ws:
        data = data[_first_non_ws(data):]
    if len(data) < len(pattern):
        return False
    if mask is None:
        return data.startswith(pattern)
    return all((data[i] & mask[i]) == pattern[i] for i in range(len(pattern)))


def _match_mp4(data: bytes) -> Optional[str]:
    """ISO base media file: an ``ftyp`` box listing an ``mp4`` brand."""
    if len(data) < 12:
        return None
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0:
        return None
    if data[4:8] != b"ftyp":
        return None
    for start in range(8, box_size, 4):
        if start == 12:
            # minor version, not a brand
            continue
        if data[start : start + 3] == b"mp4":
            return "video/mp4"
    return None


def _match_text(data: bytes) -> Optional[str]:
    if any(byte in _BINARY_BYTES for byte in data):
        return None
    return TEXT_PLAIN


def _signature_matcher(table) -> Callable[[bytes], Optional[str]]:
    def match(data: bytes) -> Optional[str]:
        for pattern, mask, skip_ws, mime_type in table:
            if _match_signature(data, pattern, mask, skip_ws):
                return mime_type
        return None

    return match


_MATCHERS = (
    lambda data: _match_html(data[_first_non_ws(data):]),
    _signature_matcher(_MASKED_SIGNATURES),
    _match_mp4,
    _signature_matcher(_LATE_SIGNATURES),
    _match_text,
)


def sniff_content_type(data: bytes) -> str:
    """
    Guesses the MIME type of ``data`` from its leading bytes.

    Always returns a valid MIME type; ``application/octet-stream`` when
    nothing more specific matches.
    """
    data = data[:SNIFF_LEN]
    for matcher in _MATCHERS:
        mime_type = matcher(data)
        if mime_type:
            return mime_type
    return OCTET_STREAM


def is_jpeg_content(data: bytes) -> bool:
    """True when the sniffed type of ``data`` is a JPEG image."""
    return sniff_content_type(data) in ("image/jpeg", "image/jpg")


__all__ = ["sniff_content_type", "is_jpeg_content", "SNIFF_LEN", "TEXT_PLAIN", "OCTET_STREAM"]
