"""
Unit tests for Content-Type detection.
"""
import pytest

from eaglegzip.middleware.sniff import detect_content_type


@pytest.mark.parametrize(
    "data,expected",
    [
        (b"", "text/plain; charset=utf-8"),
        (b"Foobar Wibble Content", "text/plain; charset=utf-8"),
        (b"\x01\x02\x03", "application/octet-stream"),
        (b"<!DOCTYPE HTML><html></html>", "text/html; charset=utf-8"),
        (b"  \n<html><body>", "text/html; charset=utf-8"),
        (b"<HtMl>", "text/html; charset=utf-8"),
        (b"<p>paragraph</p>", "text/html; charset=utf-8"),
        (b"<!-- comment -->", "text/html; charset=utf-8"),
        (b"<pre>not a known tag", "text/plain; charset=utf-8"),
        (b"<html", "text/plain; charset=utf-8"),
        (b"\n<?xml version='1.0'?><a/>", "text/xml; charset=utf-8"),
        (b"%PDF-1.7", "application/pdf"),
        (b"%!PS-Adobe-3.0", "application/postscript"),
        (b"\xfe\xff\x00\x41", "text/plain; charset=utf-16be"),
        (b"\xff\xfe\x41\x00", "text/plain; charset=utf-16le"),
        (b"\xef\xbb\xbfhello", "text/plain; charset=utf-8"),
        (b"GIF89a\x01\x00", "image/gif"),
        (b"\x89PNG\r\n\x1a\n\x00", "image/png"),
        (b"\xff\xd8\xff\xe0", "image/jpeg"),
        (b"BM\x00\x00", "image/bmp"),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
        (b"RIFF\x24\x00\x00\x00WAVEfmt ", "audio/wave"),
        (b"ID3\x03\x00", "audio/mpeg"),
        (b"OggS\x00\x02", "application/ogg"),
        (b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom", "video/mp4"),
        (b"\x1a\x45\xdf\xa3", "video/webm"),
        (b"wOF2\x00\x01", "font/woff2"),
        (b"\x1f\x8b\x08\x00", "application/x-gzip"),
        (b"PK\x03\x04", "application/zip"),
        (b"\x00asm\x01\x00\x00\x00", "application/wasm"),
    ],
)
def test_detect_content_type(data, expected):
    assert detect_content_type(data) == expected


def test_only_first_512_bytes_considered():
    data = b"a" * 512 + b"\x00"
    assert detect_content_type(data) == "text/plain; charset=utf-8"
