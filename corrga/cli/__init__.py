"""
Command Line Interface for corrga.

This package provides CLI tools for headless search and interactive tracking.
"""

from .search import search_command
from .track import track_command

__all__ = [
    'search_command',
    'track_command'
]
