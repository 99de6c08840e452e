# middleware/codec.py
"""Gzip stream writer that feeds compressed bytes into a response writer."""
import gzip
import io
import logging
import zlib

from ..exceptions import CompressionLevelError, WriterClosedError

logger = logging.getLogger("eagle.gzip.codec")

# These compression constants follow the zlib levels used by the gzip module.
NO_COMPRESSION = 0
BEST_SPEED = 1
BEST_COMPRESSION = 9
DEFAULT_COMPRESSION = -1


def is_valid_level(level: int) -> bool:
    """Return True if ``level`` is accepted by zlib."""
    return isinstance(level, int) and not isinstance(level, bool) and DEFAULT_COMPRESSION <= level <= BEST_COMPRESSION


class GzipWriter:
    """
    Writes a single gzip member to a sink.

    Compressed output is collected in an in-memory buffer and drained into
    ``sink.write`` after every operation, so nothing reaches the sink until
    the first call to ``write``. ``close`` must be called exactly once to
    emit the gzip trailer.
    """

    def __init__(self, sink, level: int = DEFAULT_COMPRESSION):
        if not is_valid_level(level):
            raise CompressionLevelError(
                f"invalid gzip compression level: {level!r}",
                context={"level": level},
            )
        self.sink = sink
        self.level = level
        self.closed = False
        self._buffer = io.BytesIO()
        self._gzip_file = gzip.GzipFile(mode="wb", fileobj=self._buffer, compresslevel=level)

    @classmethod
    def new(cls, sink, level: int) -> "GzipWriter":
        """Create a writer for ``sink``, raising CompressionLevelError for a bad level."""
        return cls(sink, level)

    def _check_open(self) -> None:
        if self.closed:
            raise WriterClosedError("gzip writer is already closed")

    def _take(self) -> bytes:
        data = self._buffer.getvalue()
        self._buffer.seek(0)
        self._buffer.truncate()
        return data

    async def _drain(self) -> None:
        data = self._take()
        if data:
            await self.sink.write(data)

    async def write(self, data: bytes) -> int:
        """Compress ``data`` and pass any produced bytes on to the sink."""
        self._check_open()
        self._gzip_file.write(data)
        await self._drain()
        return len(data)

    async def flush(self) -> None:
        """Sync-flush pending input so the client can decode everything sent so far."""
        self._check_open()
        self._gzip_file.flush(zlib.Z_SYNC_FLUSH)
        await self._drain()

    async def close(self) -> None:
        """Finish the gzip member and write the trailer to the sink."""
        self._check_open()
        self.closed = True
        self._gzip_file.close()
        await self._drain()
        logger.debug(f"Closed gzip writer (level={self.level})")
