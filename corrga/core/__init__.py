"""
Core functionality for corrga.

This module contains configuration management, logging setup, and custom exceptions.
"""

from .config import Config
from .exceptions import CorrGAException, ConfigurationError, ValidationError, ImageError, CaptureError
from .logging import setup_logging, get_logger

__all__ = [
    "Config",
    "CorrGAException",
    "ConfigurationError",
    "ValidationError",
    "ImageError",
    "CaptureError",
    "setup_logging",
    "get_logger"
]
