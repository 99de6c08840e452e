# middleware/compression.py
"""Gzip compression middleware for Eagle applications.

Compression is negotiated per request and decided lazily: the decision is
taken the first time the downstream handler commits headers or writes body
bytes, so an ``allow_compression`` callback can inspect the final response
headers (e.g. 'Content-Type', 'Content-Range', 'Content-Length').
"""
import logging
from typing import Awaitable, Callable, Optional

from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.types import Message, Receive, Scope, Send

from ..core.config import settings
from ..exceptions import CompressionLevelError
from .base import EagleMiddleware
from .codec import DEFAULT_COMPRESSION, GzipWriter, is_valid_level
from .writer import (
    ENCODING_GZIP,
    HEADER_ACCEPT_ENCODING,
    HEADER_CONTENT_ENCODING,
    HEADER_SEC_WEBSOCKET_KEY,
    AllowCompressionFunc,
    Decision,
    GzipResponseWriter,
    ResponseWriter,
)

logger = logging.getLogger("eagle.gzip.middleware")

CallNext = Callable[..., Awaitable[None]]

OUT_OF_BAND_BODY_MESSAGES = ("http.response.pathsend", "http.response.zerocopysend")


def should_negotiate(request: Request, headers: Headers) -> bool:
    """
    Decide whether compression may apply to this request at all.

    Args:
        request: The incoming request
        headers: Response headers set so far

    Returns:
        False when the client does not accept gzip, is opening a WebSocket,
        the response is already gzip encoded, or the request is a HEAD request
    """
    # Skip compression if the client doesn't accept gzip encoding.
    if ENCODING_GZIP not in request.headers.get(HEADER_ACCEPT_ENCODING, ""):
        return False

    # Compressing the handshake response would break the upgrade.
    if request.headers.get(HEADER_SEC_WEBSOCKET_KEY):
        return False

    # Skip compression if already compressed
    if headers.get(HEADER_CONTENT_ENCODING) == ENCODING_GZIP:
        return False

    if request.method == "HEAD":
        return False

    return True


class GzipMiddleware(EagleMiddleware):
    """
    Gzip compression middleware.

    Options:
        level: zlib compression level, -1 to 9. Defaults to ``settings.GZIP_LEVEL``.
            An invalid level is not rejected here; such requests are served
            uncompressed.
        allow_compression: Optional callback ``(writer, request) -> bool``
            run once per response, when all response headers are set.
    """

    def setup(self):
        level = self.config.get('level')
        self.level = settings.GZIP_LEVEL if level is None else level
        self.allow_compression: Optional[AllowCompressionFunc] = self.config.get('allow_compression')

        if not is_valid_level(self.level):
            logger.warning(f"Invalid gzip level {self.level!r}; responses will not be compressed")

    async def process(self, writer: ResponseWriter, request: Request, call_next: CallNext) -> None:
        """
        Run ``call_next(writer, request)``, wrapping ``writer`` for compression when possible.

        Args:
            writer: The response writer for this request
            request: The incoming request
            call_next: Downstream handler, called with the writer to use
        """
        if not should_negotiate(request, writer.headers):
            await call_next(writer, request)
            return

        try:
            codec = GzipWriter.new(writer, self.level)
        except CompressionLevelError as e:
            logger.debug(f"Serving {request.scope.get('path')} uncompressed: {e}")
            await call_next(writer, request)
            return

        gzip_writer = GzipResponseWriter(
            writer,
            codec,
            request,
            allow_compression=self.allow_compression,
        )
        try:
            await call_next(gzip_writer, request)
        except BaseException:
            # Still finish the gzip stream, but the handler's error is the one to report.
            if gzip_writer.decision is Decision.ENABLED:
                try:
                    await codec.close()
                except Exception as e:
                    logger.warning(f"Failed to finish gzip stream for {request.scope.get('path')}: {e}")
            raise

        # Only an enabled writer has produced gzip output that needs a trailer.
        if gzip_writer.decision is Decision.ENABLED:
            await codec.close()

    async def dispatch(self, scope: Scope, receive: Receive, send: Send) -> None:
        writer = ResponseWriter(send)
        request = Request(scope, receive)

        async def call_next(response_writer, request: Request) -> None:
            app_scope = scope
            if isinstance(response_writer, GzipResponseWriter) and scope.get("extensions"):
                # Bodies sent out of band would bypass the gzip writer.
                extensions = {
                    name: value for name, value in scope["extensions"].items()
                    if name not in OUT_OF_BAND_BODY_MESSAGES
                }
                app_scope = {**scope, "extensions": extensions}

            async def send_wrapper(message: Message) -> None:
                message_type = message["type"]
                if message_type == "http.response.start":
                    response_writer.status_code = message["status"]
                    for key, value in message.get("headers", []):
                        response_writer.headers.append(key.decode("latin-1"), value.decode("latin-1"))
                elif message_type == "http.response.body":
                    body = message.get("body", b"")
                    if body or not response_writer.written:
                        await response_writer.write(body)
                elif message_type in OUT_OF_BAND_BODY_MESSAGES:
                    # The body goes straight to the server, uncompressed.
                    if not writer.written:
                        await writer.write_header()
                    await send(message)
                    if not message.get("more_body", False):
                        writer.finished = True
                else:
                    # Other messages must follow the staged status and headers.
                    if not response_writer.written:
                        await response_writer.write_header()
                    await send(message)

            await self.app(app_scope, receive, send_wrapper)

        await self.process(writer, request, call_next)
        await writer.close()


def new(level: int = DEFAULT_COMPRESSION, allow_compression: Optional[AllowCompressionFunc] = None) -> GzipMiddleware:
    """
    Create a gzip handler for use with ``GzipMiddleware.process``.

    Valid values for level are identical to those in the zlib module.
    An optional callback can be registered to enable/disable compression.
    """
    return GzipMiddleware(level=level, allow_compression=allow_compression)


def default() -> GzipMiddleware:
    return new(DEFAULT_COMPRESSION, None)
