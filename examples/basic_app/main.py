"""
Basic eaglegzip example

Run with:
    eaglegzip server run examples.basic_app.main:app
or mount the middleware yourself and start uvicorn:
    uvicorn examples.basic_app.main:compressed_app
"""
from fastapi import FastAPI
from fastapi.responses import Response, StreamingResponse

from eaglegzip import middleware_manager


def allow_compression(writer, request) -> bool:
    """Skip compression for images and partial content."""
    content_type = writer.headers.get("content-type", "")
    if content_type.startswith("image/"):
        return False
    return "content-range" not in writer.headers


app = FastAPI(
    title="eaglegzip example",
    description="Responses are gzip compressed when the client accepts it",
    version="0.1.0",
)


@app.get("/")
def index():
    return {"message": "Welcome to eaglegzip"}


@app.get("/page")
def page():
    # No media type: the Content-Type is detected from the body.
    return Response(content="<html><body>" + "<p>Hello</p>" * 200 + "</body></html>")


@app.get("/logo.png")
def logo():
    return Response(content=b"\x89PNG\r\n\x1a\n" + b"\x00" * 1024)


@app.get("/stream")
def stream():
    def lines():
        for i in range(100):
            yield f"line {i}\n"
    return StreamingResponse(lines(), media_type="text/plain")


compressed_app = FastAPI()
compressed_app.mount("/", app)
middleware_manager.configure_gzip(enabled=True, allow_compression=allow_compression).apply_to_app(compressed_app)
