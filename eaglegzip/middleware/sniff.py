# middleware/sniff.py
"""
Content-Type detection for response bodies.

Implements the signature tables of the WHATWG MIME Sniffing standard
(https://mimesniff.spec.whatwg.org/). At most the first 512 bytes of the
data are considered. ``detect_content_type`` always returns a valid MIME
type and falls back to ``application/octet-stream``.
"""
from typing import Callable, List, Optional

SNIFF_LEN = 512

TEXT_PLAIN = "text/plain; charset=utf-8"
OCTET_STREAM = "application/octet-stream"

_WHITESPACE = b"\t\n\x0c\r "
_BINARY_BYTES = frozenset(list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20)))

Matcher = Callable[[bytes, int], Optional[str]]


def _html(sig: bytes) -> Matcher:
    """Case-insensitive tag match followed by a tag-terminating byte."""
    def match(data: bytes, first_non_ws: int) -> Optional[str]:
        data = data[first_non_ws:]
        if len(data) < len(sig) + 1:
            return None
        for expected, actual in zip(sig, data):
            if ord("A") <= expected <= ord("Z"):
                actual &= 0xDF
            if expected != actual:
                return None
        if data[len(sig)] not in b" >":
            return None
        return "text/html; charset=utf-8"
    return match


def _masked(mask: bytes, pattern: bytes, content_type: str, skip_ws: bool = False) -> Matcher:
    def match(data: bytes, first_non_ws: int) -> Optional[str]:
        if skip_ws:
            data = data[first_non_ws:]
        if len(data) < len(pattern):
            return None
        for m, p, d in zip(mask, pattern, data):
            if d & m != p:
                return None
        return content_type
    return match


def _exact(sig: bytes, content_type: str) -> Matcher:
    def match(data: bytes, first_non_ws: int) -> Optional[str]:
        return content_type if data.startswith(sig) else None
    return match


def _mp4(data: bytes, first_non_ws: int) -> Optional[str]:
    # https://mimesniff.spec.whatwg.org/#signature-for-mp4
    if len(data) < 12:
        return None
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0:
        return None
    if data[4:8] != b"ftyp":
        return None
    for start in range(8, box_size, 4):
        if start == 12:
            # Skips the minor version number.
            continue
        if data[start:start + 3] == b"mp4":
            return "video/mp4"
    return None


def _text(data: bytes, first_non_ws: int) -> Optional[str]:
    for b in data[first_non_ws:]:
        if b in _BINARY_BYTES:
            return None
    return TEXT_PLAIN


_SIGNATURES: List[Matcher] = [
    _html(b"<!DOCTYPE HTML"),
    _html(b"<HTML"),
    _html(b"<HEAD"),
    _html(b"<SCRIPT"),
    _html(b"<IFRAME"),
    _html(b"<H1"),
    _html(b"<DIV"),
    _html(b"<FONT"),
    _html(b"<TABLE"),
    _html(b"<A"),
    _html(b"<STYLE"),
    _html(b"<TITLE"),
    _html(b"<B"),
    _html(b"<BODY"),
    _html(b"<BR"),
    _html(b"<P"),
    _html(b"<!--"),
    _masked(b"\xFF\xFF\xFF\xFF\xFF", b"<?xml", "text/xml; charset=utf-8", skip_ws=True),
    _exact(b"%PDF-", "application/pdf"),
    _exact(b"%!PS-Adobe-", "application/postscript"),

    # UTF BOMs.
    _masked(b"\xFF\xFF\x00\x00", b"\xFE\xFF\x00\x00", "text/plain; charset=utf-16be"),
    _masked(b"\xFF\xFF\x00\x00", b"\xFF\xFE\x00\x00", "text/plain; charset=utf-16le"),
    _masked(b"\xFF\xFF\xFF\x00", b"\xEF\xBB\xBF\x00", TEXT_PLAIN),

    # Image types
    _exact(b"\x00\x00\x01\x00", "image/x-icon"),
    _exact(b"\x00\x00\x02\x00", "image/x-icon"),
    _exact(b"BM", "image/bmp"),
    _exact(b"GIF87a", "image/gif"),
    _exact(b"GIF89a", "image/gif"),
    _masked(
        b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF\xFF\xFF",
        b"RIFF\x00\x00\x00\x00WEBPVP",
        "image/webp",
    ),
    _exact(b"\x89PNG\x0D\x0A\x1A\x0A", "image/png"),
    _exact(b"\xFF\xD8\xFF", "image/jpeg"),

    # Audio and Video types
    _masked(b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF", b"FORM\x00\x00\x00\x00AIFF", "audio/aiff"),
    _masked(b"\xFF\xFF\xFF", b"ID3", "audio/mpeg"),
    _masked(b"\xFF\xFF\xFF\xFF\xFF", b"OggS\x00", "application/ogg"),
    _masked(b"\xFF\xFF\xFF\xFF\xFF\xFF\xFF\xFF", b"MThd\x00\x00\x00\x06", "audio/midi"),
    _masked(b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF", b"RIFF\x00\x00\x00\x00AVI ", "video/avi"),
    _masked(b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF", b"RIFF\x00\x00\x00\x00WAVE", "audio/wave"),
    _mp4,
    _exact(b"\x1A\x45\xDF\xA3", "video/webm"),

    # Font types
    _masked(b"\xFF\xFF\xFF\xFF", b"\x00\x01\x00\x00", "font/ttf"),
    _exact(b"OTTO", "font/otf"),
    _exact(b"ttcf", "font/collection"),
    _exact(b"wOFF", "font/woff"),
    _exact(b"wOF2", "font/woff2"),

    # Archive types
    _exact(b"\x1F\x8B\x08", "application/x-gzip"),
    _exact(b"PK\x03\x04", "application/zip"),
    _exact(b"Rar!\x1A\x07\x00", "application/x-rar-compressed"),
    _exact(b"Rar!\x1A\x07\x01\x00", "application/x-rar-compressed"),
    _exact(b"\x00\x61\x73\x6D", "application/wasm"),

    _text,
]


def detect_content_type(data: bytes) -> str:
    """
    Determine the Content-Type of the given bytes.

    Args:
        data: The first chunk of a response body

    Returns:
        A MIME type suitable for a Content-Type header
    """
    data = bytes(data[:SNIFF_LEN])

    first_non_ws = 0
    while first_non_ws < len(data) and data[first_non_ws] in _WHITESPACE:
        first_non_ws += 1

    for matcher in _SIGNATURES:
        content_type = matcher(data, first_non_ws)
        if content_type:
            return content_type

    return OCTET_STREAM
