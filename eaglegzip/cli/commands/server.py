"""
Server management commands.

This module is loaded on-demand when server-related commands are invoked.
"""
import typer
from typing import Optional

from ..utils import print_info, print_success

# Create the command group
app = typer.Typer(help="Server management commands")


@app.command("run")
def run_server(
    target: str = typer.Argument(..., help="ASGI app to serve, as 'module:attribute'"),
    host: Optional[str] = None,
    port: Optional[int] = None,
    level: Optional[int] = None,
) -> None:
    """Serve an ASGI app behind the gzip middleware."""
    # Import uvicorn only when needed
    import os
    import sys

    import uvicorn
    from uvicorn.importer import import_from_string

    from eaglegzip.core.config import settings
    from eaglegzip.middleware import GzipMiddleware

    # Add the current directory to Python path if it's not already there
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    host = host or settings.HOST
    port = port or settings.PORT
    asgi_app = GzipMiddleware(import_from_string(target), level=level)

    print_success(f"Serving {target} with gzip (level {asgi_app.level}) at http://{host}:{port}")
    uvicorn.run(asgi_app, host=host, port=port)


@app.command("status")
def server_status() -> None:
    """Show the effective gzip configuration."""
    from eaglegzip.core.config import settings
    from eaglegzip.middleware.codec import is_valid_level

    print_info("Gzip configuration:")
    print_info(f"  Enabled: {settings.GZIP_ENABLED}")
    print_info(f"  Level: {settings.GZIP_LEVEL}" + ("" if is_valid_level(settings.GZIP_LEVEL) else " (invalid, compression disabled)"))
    print_info(f"  Log level: {settings.LOG_LEVEL}")
    print_info(f"  Server: http://{settings.HOST}:{settings.PORT}")
