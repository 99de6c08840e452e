"""
Unit tests for the gzip stream writer.
"""
import gzip

import pytest

from eaglegzip import CompressionLevelError, WriterClosedError
from eaglegzip.middleware.codec import (
    BEST_COMPRESSION,
    BEST_SPEED,
    DEFAULT_COMPRESSION,
    NO_COMPRESSION,
    GzipWriter,
    is_valid_level,
)


class BufferSink:
    def __init__(self):
        self.chunks = []

    async def write(self, data: bytes) -> int:
        self.chunks.append(data)
        return len(data)

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


@pytest.mark.parametrize("level", [DEFAULT_COMPRESSION, NO_COMPRESSION, BEST_SPEED, 5, BEST_COMPRESSION])
def test_valid_levels(level):
    assert is_valid_level(level)
    assert GzipWriter.new(BufferSink(), level).level == level


@pytest.mark.parametrize("level", [-2, 10, 11, "6", None, True])
def test_invalid_levels(level):
    assert not is_valid_level(level)
    with pytest.raises(CompressionLevelError) as exc_info:
        GzipWriter.new(BufferSink(), level)
    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.context == {"level": level}


@pytest.mark.asyncio
async def test_nothing_reaches_sink_before_write():
    sink = BufferSink()
    GzipWriter.new(sink, DEFAULT_COMPRESSION)

    assert sink.chunks == []


@pytest.mark.asyncio
async def test_write_and_close_produce_gzip_member():
    sink = BufferSink()
    writer = GzipWriter.new(sink, BEST_COMPRESSION)

    assert await writer.write(b"hello ") == 6
    assert await writer.write(b"world") == 5
    await writer.close()

    assert writer.closed
    assert gzip.decompress(sink.data) == b"hello world"


@pytest.mark.asyncio
async def test_close_twice_raises():
    writer = GzipWriter.new(BufferSink(), DEFAULT_COMPRESSION)
    await writer.close()

    with pytest.raises(WriterClosedError):
        await writer.close()


@pytest.mark.asyncio
async def test_write_after_close_raises():
    writer = GzipWriter.new(BufferSink(), DEFAULT_COMPRESSION)
    await writer.close()

    with pytest.raises(WriterClosedError):
        await writer.write(b"late")


@pytest.mark.asyncio
async def test_sink_errors_propagate():
    class FailingSink:
        async def write(self, data):
            raise BrokenPipeError("sink closed")

    writer = GzipWriter.new(FailingSink(), DEFAULT_COMPRESSION)
    with pytest.raises(BrokenPipeError):
        await writer.close()
