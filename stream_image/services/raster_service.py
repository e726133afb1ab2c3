from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Sequence, Tuple
import logging
import math
import os

import numpy as np
from dotenv import load_dotenv

from stream_image.models.bounds import Bounds
from stream_image.models.pixel import Pixel
from stream_image.models.raster import Raster

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# (column, row, weight) for one cell touched by a splat
SplatTarget = Tuple[int, int, float]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class RasterService:
    """
    Pixel collection <-> raster conversion.

    * infer_bounds  – bounding box of a collection (origin-seeded by default).
    * rasterize     – bilinear splat of every pixel onto a fresh raster.
    * decode_pixels – one Pixel per raster cell, row-major.

    Large collections are split into contiguous index ranges and processed on
    a thread pool.  Only pure work (decoding, splat target computation) is
    fanned out; the read-modify-write blends run on the calling thread in
    collection order, so results do not depend on scheduling.
    """

    def __init__(self,
                 workers: int = None,
                 parallel_threshold: int = None,
                 origin_inclusive_bounds: bool = None):
        self.workers = workers if workers is not None else int(os.getenv("STREAM_IMAGE_WORKERS", "0"))
        self.parallel_threshold = (
            parallel_threshold if parallel_threshold is not None
            else int(os.getenv("STREAM_IMAGE_PARALLEL_THRESHOLD", "65536"))
        )
        self.origin_inclusive_bounds = (
            origin_inclusive_bounds if origin_inclusive_bounds is not None
            else _env_flag("STREAM_IMAGE_ORIGIN_INCLUSIVE_BOUNDS", "true")
        )

    @property
    def max_workers(self) -> int:
        return self.workers or max(1, os.cpu_count() or 1)

    # ─── Bounds inference ─────────────────────────────────────────
    def infer_bounds(self, pixels: Sequence[Pixel]) -> Bounds:
        """
        Fold the pixel positions into (min_x, min_y, max_x, max_y).

        With origin_inclusive_bounds the fold is seeded with (0, 0, 0, 0), so
        the box always contains the origin: a lone pixel at (5, 5) gives
        offset (0, 0) and a 6x6 footprint.  Otherwise the seed is
        (+inf, +inf, -inf, -inf) and the box hugs the pixels; an empty
        collection then falls back to a 1x1 box at the origin.
        """
        if self.origin_inclusive_bounds:
            min_x = min_y = max_x = max_y = 0.0
        else:
            min_x = min_y = math.inf
            max_x = max_y = -math.inf

        for px in pixels:
            min_x = min(min_x, px.x)
            min_y = min(min_y, px.y)
            max_x = max(max_x, px.x)
            max_y = max(max_y, px.y)

        if min_x > max_x:
            min_x = min_y = max_x = max_y = 0.0

        bounds = Bounds.from_extent(min_x, min_y, max_x, max_y)
        logger.debug(f"Inferred bounds {bounds}")
        return bounds

    # ─── Rasterization ────────────────────────────────────────────
    @staticmethod
    def splat_targets(pixel: Pixel, bounds: Bounds) -> List[SplatTarget]:
        """
        Cells of the 2x2 lattice around the pixel's local position, clipped to
        the raster, each with weight 1 - |(x - i) * (y - j)|.
        """
        x = pixel.x - bounds.offset_x
        y = pixel.y - bounds.offset_y
        last_i = min(x + 1, bounds.raster_width - 1)
        last_j = min(y + 1, bounds.raster_height - 1)

        targets = []
        i = max(0, math.floor(x))
        while i <= last_i:
            j = max(0, math.floor(y))
            while j <= last_j:
                targets.append((i, j, 1 - abs((x - i) * (y - j))))
                j += 1
            i += 1
        return targets

    def rasterize(self, pixels: Sequence[Pixel], bounds: Bounds = None) -> Raster:
        """
        Splat every pixel onto a transparent raster of
        ceil(width) x ceil(height) cells.  Each touched cell is replaced by
        cell.blend(pixel, weight) and becomes opaque; untouched cells stay
        transparent.  Colors are clamped only when the raster is packed.
        """
        if bounds is None:
            bounds = self.infer_bounds(pixels)
        width, height = bounds.raster_width, bounds.raster_height

        reds = [0.0] * (width * height)
        greens = [0.0] * (width * height)
        blues = [0.0] * (width * height)
        opaque = bytearray(width * height)

        for px, targets in zip(pixels, self._compute_targets(pixels, bounds)):
            for i, j, weight in targets:
                k = j * width + i
                # Pixel.blend: new * weight + current * (1 - weight)
                reds[k] = px.r * weight + reds[k] * (1 - weight)
                greens[k] = px.g * weight + greens[k] * (1 - weight)
                blues[k] = px.b * weight + blues[k] * (1 - weight)
                opaque[k] = 1

        rgb = np.stack([reds, greens, blues], axis=-1).reshape(height, width, 3)
        mask = np.frombuffer(bytes(opaque), dtype=np.uint8).reshape(height, width).astype(bool)
        logger.debug(f"Rasterized {len(pixels)} pixels onto {width}x{height} cells")
        return Raster.from_rgb_floats(rgb, mask)

    def _compute_targets(self, pixels: Sequence[Pixel], bounds: Bounds) -> List[List[SplatTarget]]:
        def _targets_slice(lo: int, hi: int) -> List[List[SplatTarget]]:
            return [self.splat_targets(pixels[k], bounds) for k in range(lo, hi)]

        ranges = self._split_ranges(len(pixels))
        if len(ranges) <= 1:
            return _targets_slice(0, len(pixels))

        with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
            futures: List[Future] = [pool.submit(_targets_slice, lo, hi) for lo, hi in ranges]
            return [targets for fut in futures for targets in fut.result()]

    # ─── Decoding ─────────────────────────────────────────────────
    def decode_pixels(self, raster: Raster) -> Tuple[Pixel, ...]:
        """One Pixel per cell at integer coordinates, in row-major order."""
        cells = raster.cells
        if cells.size == 0:
            return ()

        def _decode_rows(lo: int, hi: int) -> List[Pixel]:
            return [
                Pixel.from_rgb_word(x, y, word)
                for y in range(lo, hi)
                for x, word in enumerate(cells[y].tolist())
            ]

        # Split on rows, so the threshold is compared against the cell count
        if raster.width * raster.height < self.parallel_threshold:
            return tuple(_decode_rows(0, raster.height))

        ranges = self._split_ranges(raster.height, force=True)
        with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
            futures: List[Future] = [pool.submit(_decode_rows, lo, hi) for lo, hi in ranges]
            return tuple(px for fut in futures for px in fut.result())

    # ─── Helpers ──────────────────────────────────────────────────
    def _split_ranges(self, n: int, force: bool = False) -> List[Tuple[int, int]]:
        """Contiguous [lo, hi) ranges, one per worker; a single range below the threshold."""
        if n == 0:
            return []
        if not force and n < self.parallel_threshold:
            return [(0, n)]
        n_workers = min(self.max_workers, n)
        step = math.ceil(n / n_workers)
        return [(lo, min(lo + step, n)) for lo in range(0, n, step)]
