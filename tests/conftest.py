"""
Pytest configuration and fixtures for eaglegzip tests.
"""
import pytest
from typing import Any, Dict, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse
from fastapi.testclient import TestClient
from starlette.datastructures import Headers
from starlette.requests import Request

GZIP_TEST_STRING = "Foobar Wibble Content"
GZIP_TEST_WEBSOCKET_KEY = "Test"
GZIP_INVALID_COMPRESSION_LEVEL = 11


class RecordingSend:
    """ASGI send callable that records every message."""

    def __init__(self):
        self.messages: List[Dict[str, Any]] = []

    async def __call__(self, message: Dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def starts(self) -> List[Dict[str, Any]]:
        return [m for m in self.messages if m["type"] == "http.response.start"]

    @property
    def status(self) -> int:
        return self.starts[0]["status"]

    @property
    def headers(self) -> Headers:
        return Headers(raw=self.starts[0]["headers"])

    @property
    def body(self) -> bytes:
        return b"".join(m.get("body", b"") for m in self.messages if m["type"] == "http.response.body")


def make_request(headers: Optional[Dict[str, str]] = None, method: str = "GET", path: str = "/foobar") -> Request:
    """Build a starlette Request for http://localhost/foobar."""
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    return Request({
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": raw,
        "server": ("localhost", 80),
    })


async def http_content(writer, request) -> None:
    await writer.write(GZIP_TEST_STRING.encode())


@pytest.fixture
def recorder() -> RecordingSend:
    return RecordingSend()


@pytest.fixture
def app() -> FastAPI:
    """Create a FastAPI application with routes covering the common response shapes."""
    app = FastAPI()

    @app.get("/foobar")
    def foobar():
        return Response(content=GZIP_TEST_STRING)

    @app.get("/text")
    def text():
        return PlainTextResponse(GZIP_TEST_STRING * 10)

    @app.get("/json")
    def json_route():
        return JSONResponse({"message": GZIP_TEST_STRING})

    @app.get("/html")
    def html():
        return Response(content="<html><body>" + GZIP_TEST_STRING + "</body></html>")

    @app.get("/stream")
    def stream():
        def chunks():
            for i in range(3):
                yield f"chunk{i} ".encode() * 50
        return StreamingResponse(chunks(), media_type="text/plain")

    @app.get("/encoded")
    def encoded():
        return Response(content=b"already encoded", headers={"Content-Encoding": "br"})

    @app.get("/empty")
    def empty():
        return Response(status_code=204)

    @app.get("/image")
    def image():
        return Response(content=b"\x89PNG\r\n\x1a\n" + b"\x00" * 64)

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client for an app wrapped by the default gzip middleware."""
    from eaglegzip import GzipMiddleware

    app.add_middleware(GzipMiddleware, level=-1)
    return TestClient(app)
