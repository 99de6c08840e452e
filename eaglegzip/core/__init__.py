"""
Core configuration for the Eagle gzip middleware.
"""
from .config import Settings, settings

__all__ = ['Settings', 'settings']
