"""
Mouse-driven selection of the template region.
"""

from typing import Optional, Tuple

import cv2

from ..data.images import Region


class RegionSelector:
    """
    State machine for an OpenCV mouse callback that drags out a rectangle.

    Pressing the left button starts a selection at the cursor, moving the
    mouse while the button is held stretches it, and releasing the button
    completes it if the rectangle has a positive area. Once complete, further
    mouse input is ignored until ``reset``.
    """

    def __init__(self, frame_width: int = 0, frame_height: int = 0):
        self.frame_width = frame_width
        self.frame_height = frame_height
        self.reset()

    def reset(self) -> None:
        self.dragging = False
        self.complete = False
        self.origin: Tuple[int, int] = (0, 0)
        self.selection = Region(0, 0, 0, 0)

    def set_frame_size(self, width: int, height: int) -> None:
        self.frame_width = width
        self.frame_height = height

    @property
    def region(self) -> Optional[Region]:
        """The completed selection, or None."""
        if self.complete and self.selection.area > 0:
            return self.selection
        return None

    def on_mouse(self, event: int, x: int, y: int, flags: int = 0, param=None) -> None:
        """Callback with the signature expected by ``cv2.setMouseCallback``."""
        if self.dragging and not self.complete:
            origin_x, origin_y = self.origin
            self.selection = Region(
                min(x, origin_x),
                min(y, origin_y),
                abs(x - origin_x),
                abs(y - origin_y)
            ).clip(self.frame_width, self.frame_height)

        if event == cv2.EVENT_LBUTTONDOWN:
            if not self.complete:
                self.origin = (x, y)
                self.selection = Region(x, y, 0, 0)
                self.dragging = True
        elif event == cv2.EVENT_LBUTTONUP:
            self.dragging = False
            if self.selection.area > 0:
                self.complete = True
