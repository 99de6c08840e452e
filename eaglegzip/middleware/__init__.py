# middleware/__init__.py
"""
Eagle Gzip Middleware

Provides lazy gzip response compression and its registration on FastAPI apps.
"""
from typing import List, Dict, Any, Optional, Union
from fastapi import FastAPI
import logging as log

from ..core.config import settings
from .base import EagleMiddleware
from .codec import (
    BEST_COMPRESSION,
    BEST_SPEED,
    DEFAULT_COMPRESSION,
    NO_COMPRESSION,
    GzipWriter,
    is_valid_level,
)
from .compression import GzipMiddleware, default, new, should_negotiate
from .sniff import detect_content_type
from .writer import AllowCompressionFunc, Decision, GzipResponseWriter, ResponseWriter

log.basicConfig(level=settings.LOG_LEVEL)

logger = log.getLogger("eagle.gzip.middleware")


class MiddlewareManager:
    """Manages middleware registration and configuration for FastAPI apps."""

    def __init__(self):
        self.middlewares: List[Dict[str, Any]] = []
        self._builtin_middlewares = {
            'gzip': GzipMiddleware,
        }

    def add_middleware(
        self,
        middleware_class: Union[str, type],
        **options
    ) -> 'MiddlewareManager':
        """Add middleware to the stack."""
        if isinstance(middleware_class, str):
            if middleware_class not in self._builtin_middlewares:
                raise ValueError(f"Unknown middleware: {middleware_class}")
            middleware_class = self._builtin_middlewares[middleware_class]

        self.middlewares.append({
            'class': middleware_class,
            'options': options
        })
        return self

    def configure_gzip(
        self,
        enabled: Optional[bool] = None,
        level: Optional[int] = None,
        allow_compression: Optional[AllowCompressionFunc] = None,
    ) -> 'MiddlewareManager':
        """Configure gzip middleware. Unset values fall back to the settings."""
        if enabled is None:
            enabled = settings.GZIP_ENABLED
        if enabled:
            options = {
                'level': settings.GZIP_LEVEL if level is None else level,
                'allow_compression': allow_compression,
            }
            return self.add_middleware('gzip', **options)
        return self

    def apply_to_app(self, app: FastAPI) -> None:
        """Apply all configured middlewares to the FastAPI app."""
        # Apply middlewares in reverse order (LIFO stack)
        for middleware_config in reversed(self.middlewares):
            middleware_class = middleware_config['class']
            options = middleware_config['options']

            try:
                app.add_middleware(middleware_class, **options)
                logger.info(f"Added middleware: {middleware_class.__name__}")
            except Exception as e:
                logger.error(f"Failed to add middleware {middleware_class.__name__}: {e}")
                raise


middleware_manager = MiddlewareManager()

__all__ = [
    'MiddlewareManager',
    'EagleMiddleware',
    'GzipMiddleware',
    'GzipResponseWriter',
    'GzipWriter',
    'ResponseWriter',
    'Decision',
    'AllowCompressionFunc',
    'should_negotiate',
    'detect_content_type',
    'is_valid_level',
    'new',
    'default',
    'NO_COMPRESSION',
    'BEST_SPEED',
    'BEST_COMPRESSION',
    'DEFAULT_COMPRESSION',
    'middleware_manager',
]
