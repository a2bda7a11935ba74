"""
Tests for image loading and regions.
"""

import numpy as np
import pytest

from corrga.core.exceptions import ImageError
from corrga.data.images import Region, load_image, crop_region

pytestmark = [
    pytest.mark.unit,
    pytest.mark.data
]


class TestRegion:
    """Test the Region rectangle."""
    
    def test_area(self):
        assert Region(1, 2, 3, 4).area == 12
        assert Region(1, 2, 0, 4).area == 0
    
    def test_clip_inside_is_unchanged(self):
        assert Region(2, 3, 4, 5).clip(20, 20) == Region(2, 3, 4, 5)
    
    def test_clip_to_image(self):
        assert Region(-5, 8, 20, 20).clip(10, 12) == Region(0, 8, 10, 4)
    
    def test_clip_outside_is_empty(self):
        assert Region(30, 30, 5, 5).clip(10, 10).area == 0
    
    def test_slices(self):
        image = np.arange(100).reshape(10, 10)
        rows, cols = Region(2, 1, 3, 2).slices()
        
        assert image[rows, cols].tolist() == [[12, 13, 14], [22, 23, 24]]


class TestLoadImage:
    """Test image loading."""
    
    def test_color(self, scene_files):
        image_path, _ = scene_files
        image = load_image(image_path)
        
        assert image.shape == (120, 160, 3)
    
    def test_grayscale_is_lossless(self, scene_files, scene_image):
        image_path, _ = scene_files
        image = load_image(str(image_path), grayscale=True)
        
        assert np.array_equal(image, scene_image)
    
    def test_missing_file(self, temp_dir):
        with pytest.raises(ImageError, match="does not exist"):
            load_image(temp_dir / "missing.png")
    
    def test_undecodable_file(self, temp_dir):
        path = temp_dir / "broken.png"
        path.write_text("not an image")
        
        with pytest.raises(ImageError, match="Could not decode"):
            load_image(path)


class TestCropRegion:
    """Test region cropping."""
    
    def test_crop_is_a_copy(self, scene_image, scene_template, template_location):
        cropped = crop_region(scene_image, Region(*template_location))
        
        assert np.array_equal(cropped, scene_template)
        cropped[0, 0] ^= 0xFF
        assert not np.array_equal(cropped, scene_image[40:56, 60:84])
    
    def test_empty_region(self, scene_image):
        with pytest.raises(ImageError, match="positive area"):
            crop_region(scene_image, Region(5, 5, 0, 3))
    
    @pytest.mark.parametrize("region", [
        Region(-1, 0, 5, 5),
        Region(0, -1, 5, 5),
        Region(150, 0, 20, 5),
        Region(0, 110, 5, 20),
    ])
    def test_outside_image(self, scene_image, region):
        with pytest.raises(ImageError, match="outside the image"):
            crop_region(scene_image, region)
