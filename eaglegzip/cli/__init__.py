"""
Command Line Interface for Eagle Gzip.

This module provides the main entry point for the eaglegzip CLI.
Run it with `eaglegzip` or `python -m eaglegzip.cli`.
"""
from .commands import app

__all__ = ['app']
