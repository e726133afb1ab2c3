import logging
import os

import cv2
from dotenv import load_dotenv

from stream_image.models.raster import Raster

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class DisplayRepository:
    """
    Thin wrapper around an OpenCV HighGUI window.
    show() blocks until the user closes the window.
    """

    def __init__(self, window_title: str = None, poll_ms: int = 50):
        self.window_title = window_title or os.getenv("STREAM_IMAGE_WINDOW_TITLE", "StreamImage")
        self.poll_ms = poll_ms

    def show(self, raster: Raster) -> None:
        bgra = cv2.cvtColor(raster.to_rgba(), cv2.COLOR_RGBA2BGRA)

        # WINDOW_AUTOSIZE → window is sized to the image
        cv2.namedWindow(self.window_title, cv2.WINDOW_AUTOSIZE)
        cv2.imshow(self.window_title, bgra)
        logger.debug(f"Showing {raster.width}x{raster.height} raster in '{self.window_title}'")
        try:
            while cv2.getWindowProperty(self.window_title, cv2.WND_PROP_VISIBLE) >= 1:
                cv2.waitKey(self.poll_ms)
        finally:
            if cv2.getWindowProperty(self.window_title, cv2.WND_PROP_VISIBLE) >= 1:
                cv2.destroyWindow(self.window_title)
