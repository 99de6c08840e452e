#main __init__.py
"""
Eagle Gzip - lazy gzip response compression for FastAPI and Starlette apps.

The compress/don't-compress decision is deferred until the application writes
the first header or body byte, when all response headers are known.
"""

__version__ = "0.1.0"

from .core.config import settings
from .exceptions import CompressionLevelError, GzipError, ResponseClosedError, WriterClosedError
from .middleware import (
    BEST_COMPRESSION,
    BEST_SPEED,
    DEFAULT_COMPRESSION,
    NO_COMPRESSION,
    Decision,
    GzipMiddleware,
    GzipResponseWriter,
    MiddlewareManager,
    ResponseWriter,
    default,
    middleware_manager,
    new,
)

__all__ = [
    'GzipMiddleware',
    'GzipResponseWriter',
    'ResponseWriter',
    'Decision',
    'MiddlewareManager',
    'middleware_manager',
    'new',
    'default',
    'settings',
    'GzipError',
    'CompressionLevelError',
    'WriterClosedError',
    'ResponseClosedError',
    'NO_COMPRESSION',
    'BEST_SPEED',
    'BEST_COMPRESSION',
    'DEFAULT_COMPRESSION',
]
