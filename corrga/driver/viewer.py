"""
Interactive template tracking viewer.

Frames are shown live until the user drags out a region with the mouse. The
region becomes the template, the current frame is frozen as the search image,
and a genetic search runs one generation per event loop tick while the best
location found so far is drawn in red.

Keys: ``x`` exits, ``r`` discards the search and the selection.
"""

from typing import Optional, Tuple

import cv2
import numpy as np

from ..core.config import Config, get_config
from ..core.exceptions import CaptureError, ConfigurationError
from ..core.logging import get_logger
from ..data.images import crop_region
from ..genetic import CorrelationGA, GeneticSearchConfig
from ..utils.helpers import slider_to_rate
from .capture import FrameSource
from .selection import RegionSelector

logger = get_logger(__name__)

MUTATION_TRACKBAR = "M x 0.01"
CROSSOVER_TRACKBAR = "C x 0.01"
POPULATION_TRACKBAR = "P"

BEST_COLOR = (0, 0, 255)


def _ignore_trackbar(value: int) -> None:
    pass


class InteractiveTracker:
    """Event loop that drives a CorrelationGA from a frame source."""

    def __init__(
        self,
        source: FrameSource,
        config: Optional[Config] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.source = source
        self.config = config or get_config()
        self.viewer = self.config.viewer
        self.rng = rng if rng is not None else np.random.default_rng(self.config.search.seed)

        self.selector = RegionSelector()
        self.engine: Optional[CorrelationGA] = None
        self.template: Optional[np.ndarray] = None
        self.frame: Optional[np.ndarray] = None
        self.running = False

    def _setup_windows(self) -> None:
        search = self.config.search
        cv2.namedWindow(self.viewer.window_name, cv2.WINDOW_NORMAL)
        cv2.namedWindow(self.viewer.selection_window_name, cv2.WINDOW_NORMAL)
        cv2.setMouseCallback(self.viewer.window_name, self.selector.on_mouse)
        cv2.createTrackbar(MUTATION_TRACKBAR, self.viewer.window_name,
                           int(round(search.mutation_rate * 100)), 100, _ignore_trackbar)
        cv2.createTrackbar(CROSSOVER_TRACKBAR, self.viewer.window_name,
                           int(round(search.crossover_rate * 100)), 100, _ignore_trackbar)
        cv2.createTrackbar(POPULATION_TRACKBAR, self.viewer.window_name,
                           min(search.population_size, self.viewer.max_population),
                           self.viewer.max_population, _ignore_trackbar)

    def _read_sliders(self) -> Tuple[int, int, int]:
        """Current (mutation, crossover, population) trackbar positions."""
        window = self.viewer.window_name
        return (
            cv2.getTrackbarPos(MUTATION_TRACKBAR, window),
            cv2.getTrackbarPos(CROSSOVER_TRACKBAR, window),
            cv2.getTrackbarPos(POPULATION_TRACKBAR, window)
        )

    def _create_engine(self, image: np.ndarray, template: np.ndarray) -> Optional[CorrelationGA]:
        mutation, crossover, population = self._read_sliders()
        config = GeneticSearchConfig(
            population_size=max(1, population),
            crossover_rate=slider_to_rate(crossover),
            mutation_rate=slider_to_rate(mutation)
        )
        try:
            return CorrelationGA(image, template, config=config, rng=self.rng)
        except ConfigurationError as e:
            logger.error(f"Cannot start search on this selection: {e}")
            return None

    def reset(self) -> None:
        """Discard the search and the selection."""
        logger.info("Reset requested")
        self.engine = None
        self.template = None
        self.selector.reset()

    def handle_key(self, key: int) -> bool:
        """
        React to a key press.

        Returns:
            False when the loop should stop
        """
        if key == ord('x'):
            logger.info("Keyboard exit requested")
            return False
        if key == ord('r'):
            self.reset()
        return True

    def process_frame(self, frame: np.ndarray) -> np.ndarray:
        """
        Advance the tracker by one tick and return the image to display.

        While no template is selected the given frame becomes the current
        frame; after that the frame on which the selection finished stays the
        search image.
        """
        if self.template is None:
            self.frame = frame
            height, width = frame.shape[:2]
            self.selector.set_frame_size(width, height)

        selection = self.selector.selection
        display = self.frame.copy()

        if self.selector.dragging and selection.area > 0:
            rows, cols = selection.slices()
            display[rows, cols] = cv2.bitwise_not(display[rows, cols])
        elif self.selector.region is not None and self.template is None:
            self.template = crop_region(self.frame, self.selector.region)
            logger.info(f"Template selected: {self.selector.region}")

        if self.engine is None and self.template is not None:
            self.engine = self._create_engine(self.frame, self.template)
            if self.engine is None:
                self.template = None
                self.selector.reset()

        if self.engine is not None:
            best = self.engine.best_individual()
            template_height, template_width = self.template.shape[:2]
            cv2.rectangle(
                display,
                (best.x, best.y),
                (best.x + template_width, best.y + template_height),
                BEST_COLOR,
                2
            )
            self.engine.advance_generation()

        return display

    def run(self) -> None:
        """Run the event loop until the user exits or the frames run out."""
        self._setup_windows()
        self.running = True
        try:
            while self.running:
                frame = self.frame
                if self.template is None:
                    try:
                        frame = self.source.read()
                    except CaptureError as e:
                        logger.error(str(e))
                        break

                display = self.process_frame(frame)

                if self.template is not None:
                    cv2.imshow(self.viewer.selection_window_name, self.template)
                cv2.imshow(self.viewer.window_name, display)

                key = cv2.waitKey(self.viewer.event_loop_delay_ms) & 0xFF
                self.running = self.handle_key(key)
        finally:
            self.running = False
            cv2.destroyAllWindows()
