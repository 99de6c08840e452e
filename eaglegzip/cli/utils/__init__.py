"""
Shared utilities for CLI commands.
"""
from rich.console import Console

# Global console instance
console = Console()
error_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓ {message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    error_console.print(f"[red]✗ {message}[/red]")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]ℹ {message}[/blue]")
