"""
Utility functions for corrga.

This module contains validators and small helper functions.
"""

from .validators import validate_image, validate_rate, validate_search_dimensions
from .helpers import ensure_directory, safe_divide, slider_to_rate, parse_roi

__all__ = [
    "validate_image",
    "validate_rate",
    "validate_search_dimensions",
    "ensure_directory",
    "safe_divide",
    "slider_to_rate",
    "parse_roi"
]
