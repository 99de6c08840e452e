"""
Main CLI command registration.

This module sets up the main CLI command group and registers all subcommands.
"""
import typer

from ..utils import print_error, print_success

# Create the main command group
app = typer.Typer(help="Eagle Gzip CLI")


@app.callback()
def main_callback():
    """Eagle Gzip command line interface."""
    pass


from . import server as server_module
app.add_typer(server_module.app, name="server", help="Server management commands")


@app.command("check-level")
def check_level(level: int) -> None:
    """Report whether LEVEL is a valid gzip compression level."""
    from eaglegzip.middleware.codec import is_valid_level

    if is_valid_level(level):
        print_success(f"{level} is a valid gzip compression level")
        return
    print_error(f"{level} is not a valid gzip compression level (expected -1 to 9)")
    raise typer.Exit(code=1)


__all__ = ['app']
