"""
Helper utilities for corrga.

This module contains small helper functions shared by the CLI and the driver.
"""

from pathlib import Path
from typing import Union

from ..core.exceptions import ValidationError


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.
    
    Args:
        path: Directory path
    
    Returns:
        Path object for the directory
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning a default value if denominator is zero.
    
    Args:
        numerator: Numerator value
        denominator: Denominator value
        default: Default value to return if denominator is zero
    
    Returns:
        Division result or default value
    """
    if denominator == 0:
        return default
    return numerator / denominator


def slider_to_rate(value: int) -> float:
    """Convert an integer slider position in [0, 100] to a rate in [0, 1]."""
    return 0.01 * max(0, min(100, int(value)))


def parse_roi(text: str):
    """
    Parse a region of interest given as "x,y,width,height".
    
    Args:
        text: Comma separated integers
    
    Returns:
        Tuple of (x, y, width, height)
    
    Raises:
        ValidationError: If the string is malformed or the size is not positive
    """
    parts = [p.strip() for p in text.split(',')]
    if len(parts) != 4:
        raise ValidationError(f"ROI must have four comma separated values, got: {text!r}")
    
    try:
        x, y, width, height = (int(p) for p in parts)
    except ValueError:
        raise ValidationError(f"ROI values must be integers, got: {text!r}")
    
    if x < 0 or y < 0:
        raise ValidationError(f"ROI origin must not be negative, got: {text!r}")
    if width <= 0 or height <= 0:
        raise ValidationError(f"ROI width and height must be positive, got: {text!r}")
    
    return x, y, width, height
