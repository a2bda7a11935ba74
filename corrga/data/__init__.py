"""
Image data handling for corrga.
"""

from .images import Region, load_image, crop_region

__all__ = ["Region", "load_image", "crop_region"]
