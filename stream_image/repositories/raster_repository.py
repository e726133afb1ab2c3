from pathlib import Path
from typing import Union
import logging
import os

import cv2
import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from stream_image.models.raster import Raster

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_FORMAT_ALIASES = {"jpg": "jpeg", "tif": "tiff"}
_NO_ALPHA_FORMATS = {"jpeg", "bmp"}


class RasterRepository:
    """
    Handles file I/O for Raster entities.
    OpenCV decodes, Pillow encodes; nothing else touches the filesystem.
    """
    def __init__(self, output_format: str = None):
        self.output_format = output_format or os.getenv("STREAM_IMAGE_OUTPUT_FORMAT", "png")

    @staticmethod
    def load(path: Union[str, Path]) -> Raster:
        path = Path(path)
        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        # Normalise every OpenCV layout to RGBA
        if arr.ndim == 2:
            rgba = cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        elif arr.shape[2] == 4:
            rgba = cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        else:
            rgba = cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)

        if rgba.dtype == np.uint16:
            # keep the high byte
            rgba = (rgba >> 8).astype(np.uint8)
        elif np.issubdtype(rgba.dtype, np.floating):
            # float sources (HDR, EXR) map [0, 1] onto [0, 255]
            rgba = np.clip(np.nan_to_num(rgba) * 255, 0, 255).astype(np.uint8)
        elif rgba.dtype != np.uint8:
            raise ValueError(f"Unsupported pixel depth {rgba.dtype} in {path}")

        logger.debug(f"Decoded {path} ({rgba.shape[1]}x{rgba.shape[0]})")
        return Raster.from_rgba(rgba)

    def save(self, raster: Raster, path: Union[str, Path], fmt: str = None) -> Path:
        path = Path(path)
        fmt = fmt or self.output_format
        fmt = _FORMAT_ALIASES.get(fmt.lower(), fmt)
        PILImage.init()
        if fmt.upper() not in PILImage.SAVE:
            raise ValueError(f"Unknown image format: {fmt}")
        pil_img = PILImage.fromarray(raster.to_rgba())
        if fmt.lower() in _NO_ALPHA_FORMATS:
            pil_img = pil_img.convert("RGB")
        pil_img.save(path, format=fmt)
        logger.debug(f"Encoded {raster.width}x{raster.height} raster to {path} as {fmt}")
        return path
