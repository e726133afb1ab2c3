from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from stream_image.models.bounds import Bounds
from stream_image.models.pixel import Pixel
from stream_image.models.pixel_stream import PixelStream
from stream_image.models.raster import Raster


@dataclass(frozen=True, eq=False)
class StreamImage:
    """
    Data object: a pixel collection plus the raster rendered from it.
    The raster is computed once, when the container is built, and is never
    re-synchronised; transforms produce a new StreamImage instead.
    Build instances through StreamImageService.
    """
    collection: Tuple[Pixel, ...]
    raster: Raster
    bounds: Bounds
    path: Path | None = None  # Source of the image, if decoded from a file.
    workers: Optional[int] = field(default=None, repr=False)

    def pixels(self) -> PixelStream:
        """Sequential view in collection order (row-major for decoded images)."""
        return PixelStream(self.collection)

    def parallel_pixels(self) -> PixelStream:
        """Same elements as pixels(); map/filter stages run on a thread pool."""
        return PixelStream(self.collection, parallel=True, workers=self.workers)

    @property
    def offset_x(self) -> float:
        return self.bounds.offset_x

    @property
    def offset_y(self) -> float:
        return self.bounds.offset_y

    @property
    def width(self) -> float:
        return self.bounds.width

    @property
    def height(self) -> float:
        return self.bounds.height

    def size(self) -> float:
        """Image area, width * height; only approximately a pixel count."""
        return self.bounds.area

    def __len__(self) -> int:
        return len(self.collection)
