from __future__ import annotations
from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Bounds:
    """
    Placement of a raster relative to the pixel collection's own coordinates.
    width/height are real-valued; the raster itself is ceil(width) x ceil(height).
    """
    offset_x: float
    offset_y: float
    width: float
    height: float

    @classmethod
    def from_extent(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> "Bounds":
        # +1 so that a single point still covers one cell
        return cls(min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)

    @property
    def raster_width(self) -> int:
        return max(1, math.ceil(self.width))

    @property
    def raster_height(self) -> int:
        return max(1, math.ceil(self.height))

    @property
    def area(self) -> float:
        return self.width * self.height
