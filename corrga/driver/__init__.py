"""
Interactive driver: frame capture, region selection and the tracking viewer.
"""

from .capture import FrameSource
from .selection import RegionSelector
from .viewer import InteractiveTracker

__all__ = ["FrameSource", "RegionSelector", "InteractiveTracker"]
