"""
Image loading and region handling.

Images are plain numpy arrays in OpenCV's layout (rows, columns[, channels]).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from ..core.exceptions import ImageError
from ..core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Region:
    """Axis-aligned rectangle in pixel coordinates."""
    
    x: int
    y: int
    width: int
    height: int
    
    @property
    def area(self) -> int:
        return self.width * self.height
    
    def clip(self, image_width: int, image_height: int) -> "Region":
        """Intersect the region with an image of the given size."""
        x0 = max(0, self.x)
        y0 = max(0, self.y)
        x1 = min(image_width, self.x + self.width)
        y1 = min(image_height, self.y + self.height)
        if x1 <= x0 or y1 <= y0:
            return Region(x0, y0, 0, 0)
        return Region(x0, y0, x1 - x0, y1 - y0)
    
    def slices(self):
        """Return (row_slice, column_slice) for numpy indexing."""
        return slice(self.y, self.y + self.height), slice(self.x, self.x + self.width)


def load_image(path: Union[str, Path], grayscale: bool = False) -> np.ndarray:
    """
    Load an image from disk.
    
    Args:
        path: Image file path
        grayscale: Whether to decode as a single channel image
    
    Returns:
        Decoded image
    
    Raises:
        ImageError: If the file does not exist or cannot be decoded
    """
    path = Path(path)
    if not path.is_file():
        raise ImageError(f"Image file does not exist: {path}")
    
    flags = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
    image = cv2.imread(str(path), flags)
    if image is None:
        raise ImageError(f"Could not decode image: {path}")
    
    logger.debug(f"Loaded {path} with shape {image.shape}")
    return image


def crop_region(image: np.ndarray, region: Region) -> np.ndarray:
    """
    Copy a region out of an image.
    
    Raises:
        ImageError: If the region is empty or does not lie fully inside the image
    """
    height, width = image.shape[:2]
    if region.area <= 0:
        raise ImageError(f"Region must have a positive area: {region}")
    if (region.x < 0 or region.y < 0 or
            region.x + region.width > width or region.y + region.height > height):
        raise ImageError(
            "Region lies outside the image",
            details={"region": region, "image_size": (width, height)}
        )
    
    rows, cols = region.slices()
    return image[rows, cols].copy()
