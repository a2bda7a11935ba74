"""
Validation utilities for corrga.

This module provides validation functions for images, rates and search configuration.
"""

import numpy as np
from typing import Any

from ..core.exceptions import ValidationError, ConfigurationError
from ..core.logging import get_logger


def validate_image(image: Any, name: str = "image") -> bool:
    """
    Validate an image array as produced by OpenCV.
    
    Args:
        image: Array to validate
        name: Name used in error messages
    
    Returns:
        True if validation passes
    
    Raises:
        ValidationError: If the value is not a non-empty 2D or 3D array
    """
    logger = get_logger(__name__)
    
    if image is None:
        raise ValidationError(f"{name} cannot be None")
    
    if not isinstance(image, np.ndarray):
        raise ValidationError(f"Expected numpy array for {name}, got {type(image)}")
    
    if image.ndim not in (2, 3):
        raise ValidationError(f"{name} must be 2D (grayscale) or 3D (color), got {image.ndim} dimensions")
    
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise ValidationError(f"{name} must not be empty, got shape {image.shape}")
    
    logger.debug(f"{name} validation passed: shape {image.shape}, dtype {image.dtype}")
    return True


def validate_rate(value: Any, name: str) -> bool:
    """
    Validate a rate expressed as a fraction of the population.
    
    Args:
        value: Rate to validate
        name: Name used in error messages
    
    Returns:
        True if validation passes
    
    Raises:
        ConfigurationError: If the rate is not a number in [0, 1]
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number, got {type(value).__name__}")
    
    if not 0 <= value <= 1:
        raise ConfigurationError(f"{name} must be between 0 and 1, got {value}")
    
    return True


def validate_search_dimensions(image: np.ndarray, template: np.ndarray) -> bool:
    """
    Validate that a template can be placed somewhere inside an image.
    
    A location is only valid when the template fits with at least one pixel to
    spare on the right and bottom edges, so the template must be strictly
    smaller than the image in both dimensions.
    
    Args:
        image: Search image
        template: Template to locate
    
    Returns:
        True if validation passes
    
    Raises:
        ConfigurationError: If either array is unusable or the template is too large
    """
    try:
        validate_image(image, "image")
        validate_image(template, "template")
    except ValidationError as e:
        raise ConfigurationError(e.message)
    
    if image.ndim != template.ndim or image.shape[2:] != template.shape[2:]:
        raise ConfigurationError(
            f"Image and template must have the same number of channels: "
            f"{image.shape} vs {template.shape}"
        )
    
    image_height, image_width = image.shape[:2]
    template_height, template_width = template.shape[:2]
    
    if template_width >= image_width or template_height >= image_height:
        raise ConfigurationError(
            "Template must be smaller than the image",
            details={
                "image_size": (image_width, image_height),
                "template_size": (template_width, template_height)
            }
        )
    
    return True
