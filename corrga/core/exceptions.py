"""
Custom exceptions for the corrga template search system.

This module defines a hierarchy of exceptions that provide specific error handling
for configuration, image handling, frame capture and the genetic search.
"""

from typing import Optional, Any

class CorrGAException(Exception):
    """Base exception for errors."""
    
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(CorrGAException):
    """Raised when there are issues with configuration settings."""
    pass


class ValidationError(CorrGAException):
    """Raised when data or parameters fail validation."""
    pass


class ImageError(CorrGAException):
    """Raised when an image cannot be loaded, decoded or cropped."""
    pass


class CaptureError(CorrGAException):
    """Raised when a video file or camera cannot deliver frames."""
    pass
