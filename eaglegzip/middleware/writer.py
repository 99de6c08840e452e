# middleware/writer.py
"""Response writers used by the gzip middleware.

``ResponseWriter`` turns an ASGI ``send`` callable into a writer with mutable
headers, a one-time status commit and body writes. ``GzipResponseWriter``
decorates a ``ResponseWriter`` and decides, at the first header commit or
body write, whether the rest of the response is gzip compressed.
"""
import enum
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import Send

from ..exceptions import ResponseClosedError
from .codec import GzipWriter
from .sniff import detect_content_type

logger = logging.getLogger("eagle.gzip.writer")

ENCODING_GZIP = "gzip"

HEADER_ACCEPT_ENCODING = "Accept-Encoding"
HEADER_CONTENT_ENCODING = "Content-Encoding"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_VARY = "Vary"
HEADER_SEC_WEBSOCKET_KEY = "Sec-WebSocket-Key"

AllowCompressionFunc = Callable[[Any, Request], Union[bool, Awaitable[bool]]]


def body_allowed_for_status(status_code: int) -> bool:
    """Report whether a response with this status may carry a body."""
    if 100 <= status_code <= 199:
        return False
    return status_code not in (204, 304)


class ResponseWriter:
    """
    Writer over an ASGI ``send`` callable that captures the committed status.

    Headers stay mutable until ``write_header`` sends ``http.response.start``.
    The status passed to implicit commits is ``status_code``, which callers
    may change before anything is written.
    """

    def __init__(self, send: Send, status_code: int = 200):
        self._send = send
        self.headers = MutableHeaders()
        self.status_code = status_code
        self.size = 0
        self.written = False
        self.finished = False

    async def write_header(self, status_code: Optional[int] = None) -> None:
        """Send the status line and headers. Only the first call has an effect."""
        if self.written:
            logger.warning(
                f"Superfluous write_header call ignored; status {self.status_code} was already sent"
            )
            return
        if status_code is not None:
            self.status_code = status_code
        self.written = True
        await self._send({
            "type": "http.response.start",
            "status": self.status_code,
            "headers": list(self.headers.raw),
        })

    async def write(self, data: bytes) -> int:
        if self.finished:
            raise ResponseClosedError(
                "write after the response body was finished",
                context={"status_code": self.status_code},
            )
        if not self.written:
            await self.write_header()
        await self._send({"type": "http.response.body", "body": bytes(data), "more_body": True})
        self.size += len(data)
        return len(data)

    async def close(self) -> None:
        """Finish the response body. Safe to call more than once."""
        if self.finished:
            return
        if not self.written:
            await self.write_header()
        self.finished = True
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})


class Decision(enum.Enum):
    UNDECIDED = "undecided"
    DISABLED = "disabled"
    ENABLED = "enabled"


class GzipResponseWriter:
    """
    Decorates a ResponseWriter and gzip-compresses the body when allowed.

    The decision is deferred until the first ``write_header`` or ``write``
    call, when the downstream handler has finished setting headers. It is
    taken exactly once. The optional ``allow_compression`` callback receives
    this writer and the request and may return a bool or an awaitable bool.

    The gzip writer is owned by this object but is never closed here; the
    middleware closes it after the downstream handler returns.
    """

    def __init__(
        self,
        writer: ResponseWriter,
        codec: GzipWriter,
        request: Request,
        allow_compression: Optional[AllowCompressionFunc] = None,
    ):
        self.writer = writer
        self.codec = codec
        self.request = request
        self.allow_compression = allow_compression
        self.decision = Decision.UNDECIDED

    @property
    def headers(self) -> MutableHeaders:
        return self.writer.headers

    @property
    def status_code(self) -> int:
        return self.writer.status_code

    @status_code.setter
    def status_code(self, value: int) -> None:
        self.writer.status_code = value

    @property
    def written(self) -> bool:
        return self.writer.written

    @property
    def size(self) -> int:
        return self.writer.size

    async def _allowed(self) -> bool:
        if self.allow_compression is None:
            return True
        result = self.allow_compression(self, self.request)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    async def _decide(self) -> None:
        if not body_allowed_for_status(self.writer.status_code):
            self.decision = Decision.DISABLED
        elif HEADER_CONTENT_ENCODING in self.headers:
            # The handler already encoded the body.
            self.decision = Decision.DISABLED
        elif await self._allowed():
            self.decision = Decision.ENABLED
            headers = self.headers
            # A stale length would break the client's framing of the gzip stream.
            del headers[HEADER_CONTENT_LENGTH]
            headers[HEADER_CONTENT_ENCODING] = ENCODING_GZIP
            vary = headers.get(HEADER_VARY, "")
            if HEADER_ACCEPT_ENCODING.lower() not in vary.lower():
                headers.add_vary_header(HEADER_ACCEPT_ENCODING)
        else:
            self.decision = Decision.DISABLED

        scope = self.request.scope
        logger.debug(
            f"Compression {self.decision.value} for {scope.get('method')} "
            f"{scope.get('path')} (status {self.writer.status_code})"
        )

    async def write_header(self, status_code: Optional[int] = None) -> None:
        if status_code is not None and not self.writer.written:
            self.writer.status_code = status_code
        if self.decision is Decision.UNDECIDED:
            await self._decide()
        await self.writer.write_header(status_code)

    async def write(self, data: bytes) -> int:
        """
        Write body bytes, compressed if compression is enabled.

        On the first call the Content-Type is sniffed from ``data`` when the
        handler did not set one, so detection runs on uncompressed bytes.
        """
        if self.decision is Decision.UNDECIDED:
            if HEADER_CONTENT_TYPE not in self.headers:
                self.headers[HEADER_CONTENT_TYPE] = detect_content_type(data)
            await self.write_header()

        if self.decision is Decision.ENABLED:
            return await self.codec.write(data)
        return await self.writer.write(data)

    async def flush(self) -> None:
        """Push compressed bytes buffered so far to the client."""
        if self.decision is Decision.ENABLED:
            await self.codec.flush()
