# middleware/base.py
"""Base middleware classes for the Eagle gzip middleware."""
from abc import ABC, abstractmethod
from typing import Optional

from starlette.types import ASGIApp, Receive, Scope, Send


class EagleMiddleware(ABC):
    """Base class for pure ASGI middlewares with common functionality."""

    def __init__(self, app: Optional[ASGIApp] = None, **kwargs):
        self.app = app
        self.config = kwargs
        self.setup()

    def setup(self) -> None:
        """Override this method for middleware-specific setup."""
        pass

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI entry point. Only HTTP requests reach ``dispatch``."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        await self.dispatch(scope, receive, send)

    @abstractmethod
    async def dispatch(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Handle an HTTP request."""
