"""
Tests for corrga helper utilities.
"""

import pytest
from pathlib import Path

from corrga.core.exceptions import ValidationError
from corrga.utils.helpers import ensure_directory, safe_divide, slider_to_rate, parse_roi

pytestmark = [
    pytest.mark.unit,
    pytest.mark.utils
]


class TestDirectoryHelpers:
    """Test directory-related helper functions."""
    
    def test_ensure_directory_new(self, temp_dir):
        """Test creating a new directory."""
        new_dir = temp_dir / "new_directory"
        result = ensure_directory(new_dir)
        
        assert result == new_dir
        assert new_dir.is_dir()
    
    def test_ensure_directory_nested_from_string(self, temp_dir):
        """Test creating nested directories from a string path."""
        nested_dir = temp_dir / "parent" / "child"
        result = ensure_directory(str(nested_dir))
        
        assert isinstance(result, Path)
        assert nested_dir.is_dir()
    
    def test_ensure_directory_exists(self, temp_dir):
        assert ensure_directory(temp_dir) == temp_dir


class TestMathHelpers:
    """Test mathematical helper functions."""
    
    def test_safe_divide_normal(self):
        assert safe_divide(10, 4) == 2.5
    
    def test_safe_divide_by_zero(self):
        assert safe_divide(10, 0) == 0.0
        assert safe_divide(10, 0, default=-1.0) == -1.0


class TestSliderToRate:
    """Test trackbar position conversion."""
    
    @pytest.mark.parametrize("value,expected", [
        (0, 0.0),
        (3, 0.03),
        (40, 0.40),
        (100, 1.0),
    ])
    def test_conversion(self, value, expected):
        assert slider_to_rate(value) == pytest.approx(expected)
    
    def test_out_of_range_is_clamped(self):
        assert slider_to_rate(-5) == 0.0
        assert slider_to_rate(250) == pytest.approx(1.0)


class TestParseRoi:
    """Test region of interest parsing."""
    
    def test_valid(self):
        assert parse_roi("10,20,30,40") == (10, 20, 30, 40)
    
    def test_whitespace_allowed(self):
        assert parse_roi(" 1, 2 ,3 , 4 ") == (1, 2, 3, 4)
    
    @pytest.mark.parametrize("text", [
        "1,2,3",
        "1,2,3,4,5",
        "a,2,3,4",
        "1.5,2,3,4",
        "-1,2,3,4",
        "1,2,0,4",
        "1,2,3,-4",
        "",
    ])
    def test_invalid(self, text):
        with pytest.raises(ValidationError):
            parse_roi(text)
