"""
Frame acquisition from a video file or an attached camera.
"""

from typing import Optional, Union

import cv2
import numpy as np

from ..core.exceptions import CaptureError
from ..core.logging import get_logger

logger = get_logger(__name__)


class FrameSource:
    """
    Synchronous wrapper around ``cv2.VideoCapture``.

    Usage:
        with FrameSource("clip.avi") as source:
            frame = source.read()
    """

    def __init__(self, source: Union[str, int] = 0):
        """
        Args:
            source: Video file path, or camera index for an attached camera
        """
        self.source = source
        self._cap: Optional[cv2.VideoCapture] = None
        self._frame_count = 0

    @property
    def is_file(self) -> bool:
        return not isinstance(self.source, int)

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    @property
    def frame_count(self) -> int:
        """Frames read since the source was opened."""
        return self._frame_count

    def open(self) -> "FrameSource":
        """
        Open the capture device.

        Raises:
            CaptureError: If the file or camera cannot be opened
        """
        if self.is_open:
            return self

        self._cap = cv2.VideoCapture(self.source)
        if not self._cap.isOpened():
            self._cap = None
            kind = "video file" if self.is_file else "camera"
            raise CaptureError(f"Could not open {kind} {self.source}")

        self._frame_count = 0
        logger.info(f"Opened {'video file' if self.is_file else 'camera'} {self.source}")
        return self

    def read(self) -> np.ndarray:
        """
        Read the next frame.

        Raises:
            CaptureError: At the end of a video file, or when the camera fails
        """
        if not self.is_open:
            raise CaptureError(f"Frame source {self.source} is not open")

        ret, frame = self._cap.read()
        if not ret or frame is None:
            if self.is_file:
                raise CaptureError("End of video file reached", details={"frames_read": self._frame_count})
            raise CaptureError("Cannot get next frame from camera", details={"camera": self.source})

        self._frame_count += 1
        return frame

    def release(self) -> None:
        """Release the capture device."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.debug(f"Released frame source {self.source}")

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False
