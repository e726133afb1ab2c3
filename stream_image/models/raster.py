from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass
class Raster:
    """
    Dense grid of packed 0xAARRGGBB words.
    cells: np.ndarray  (H, W)  uint32, addressed as cells[y, x].
    """
    cells: np.ndarray

    def __post_init__(self):
        if self.cells.ndim != 2:
            raise ValueError(f"Raster cells must be 2-D (H, W), got shape {self.cells.shape}")
        self.cells = np.ascontiguousarray(self.cells, dtype=np.uint32)

    @property
    def width(self) -> int:
        return self.cells.shape[1]

    @property
    def height(self) -> int:
        return self.cells.shape[0]

    @classmethod
    def from_rgba(cls, rgba: np.ndarray) -> "Raster":
        """
        Pack an (H, W, 4) uint8 RGBA array, or an (H, W, 3) RGB array which
        is treated as fully opaque.
        """
        if rgba.ndim != 3 or rgba.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3|4) array, got shape {rgba.shape}")
        arr = rgba.astype(np.uint32)
        alpha = arr[:, :, 3] if arr.shape[2] == 4 else np.full(arr.shape[:2], 0xFF, np.uint32)
        cells = (alpha << 24) | (arr[:, :, 0] << 16) | (arr[:, :, 1] << 8) | arr[:, :, 2]
        return cls(cells)

    @classmethod
    def from_rgb_floats(cls, rgb: np.ndarray, opaque: np.ndarray) -> "Raster":
        """
        Encode float colors (H, W, 3) into packed words.  Channels are
        truncated after scaling by 255 and clamped to [0, 255]; cells where
        `opaque` is False stay fully transparent.
        """
        scaled = np.nan_to_num(rgb * 255.0, nan=0.0, posinf=255.0, neginf=0.0)
        channels = np.clip(np.trunc(scaled), 0, 255).astype(np.uint32)
        cells = ((np.uint32(0xFF) << 24)
                 | (channels[:, :, 0] << 16)
                 | (channels[:, :, 1] << 8)
                 | channels[:, :, 2])
        return cls(np.where(opaque, cells, np.uint32(0)))

    def to_rgba(self) -> np.ndarray:
        """Unpack into an (H, W, 4) uint8 RGBA array."""
        c = self.cells
        return np.stack(
            [(c >> 16) & 0xFF, (c >> 8) & 0xFF, c & 0xFF, (c >> 24) & 0xFF],
            axis=-1,
        ).astype(np.uint8)

    def word_at(self, x: int, y: int) -> int:
        return int(self.cells[y, x])
