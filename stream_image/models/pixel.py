from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import math


def _channel_to_byte(value: float) -> int:
    # Encode-time clamp; intermediate colors may be anywhere on the real line.
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return 255 if value > 0 else 0
    return max(0, min(255, int(value * 255)))


@dataclass(frozen=True)
class Pixel:
    """
    One image pixel: a continuous position plus an additive RGB color.

    Color channels are conventionally in [0, 1] but never clamped here;
    `brighter`, `add_rgb` and friends may push them out of range.  The only
    clamp happens in `to_rgb_word()`, at encode time.
    """
    x: float
    y: float
    r: float
    g: float
    b: float

    def __post_init__(self):
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Pixel coordinates must be finite, got ({self.x}, {self.y})")

    # ── Construction helpers ─────────────────────────────────────────
    @classmethod
    def from_brightness(cls, x: float, y: float, brightness: float) -> "Pixel":
        """Grayscale pixel: r = g = b = brightness."""
        return cls(x, y, brightness, brightness, brightness)

    @classmethod
    def from_rgb_word(cls, x: int, y: int, rgb: int) -> "Pixel":
        """Decode a packed 0xAARRGGBB word; alpha is ignored."""
        return cls(
            x, y,
            ((rgb >> 16) & 0xFF) / 255.0,
            ((rgb >> 8) & 0xFF) / 255.0,
            (rgb & 0xFF) / 255.0,
        )

    @classmethod
    def with_color(cls, x: float, y: float, color: "Pixel") -> "Pixel":
        """Copy `color`'s RGB onto new coordinates."""
        return cls(x, y, color.r, color.g, color.b)

    def to_rgb_word(self) -> int:
        """Packed opaque ARGB word, each channel clamped to [0, 255]."""
        return (0xFF000000
                | (_channel_to_byte(self.r) << 16)
                | (_channel_to_byte(self.g) << 8)
                | _channel_to_byte(self.b))

    # ── Color ops ────────────────────────────────────────────────────
    def gray(self) -> "Pixel":
        avg = (self.r + self.g + self.b) / 3
        return Pixel(self.x, self.y, avg, avg, avg)

    def brighter(self, amount: float) -> "Pixel":
        return self.map_rgb(lambda component: component + amount)

    def darker(self, amount: float) -> "Pixel":
        return self.brighter(-amount)

    def map_rgb(self, mapper: Callable[[float], float]) -> "Pixel":
        """Apply `mapper` to each of r, g, b.  Position stays intact."""
        return Pixel(self.x, self.y, mapper(self.r), mapper(self.g), mapper(self.b))

    def blend(self, other: "Pixel", alpha: float) -> "Pixel":
        """
        Alpha blend `other` over this pixel: other * alpha + self * (1 - alpha).
        Alpha is not bounded, so callers may extrapolate.  The result keeps
        this pixel's position.
        """
        return Pixel(
            self.x, self.y,
            other.r * alpha + self.r * (1 - alpha),
            other.g * alpha + self.g * (1 - alpha),
            other.b * alpha + self.b * (1 - alpha),
        )

    def add_rgb(self, other: "Pixel") -> "Pixel":
        return Pixel(self.x, self.y, self.r + other.r, self.g + other.g, self.b + other.b)

    def average_rgb(self, other: "Pixel") -> "Pixel":
        return Pixel(
            self.x, self.y,
            (self.r + other.r) / 2,
            (self.g + other.g) / 2,
            (self.b + other.b) / 2,
        )

    # ── Geometry ops ─────────────────────────────────────────────────
    def map_xy(self, mapper: Callable[[float], float]) -> "Pixel":
        """Apply `mapper` to x and y.  Color stays intact."""
        return Pixel(mapper(self.x), mapper(self.y), self.r, self.g, self.b)

    def rotated(self, angle_deg: float) -> "Pixel":
        """Rotate about the origin (0, 0), not about the image center."""
        angle_rad = math.pi * angle_deg / 180
        cosa = math.cos(angle_rad)
        sina = math.sin(angle_rad)
        return Pixel(
            self.x * cosa - self.y * sina,
            self.x * sina + self.y * cosa,
            self.r, self.g, self.b,
        )

    def distance(self, ox: float, oy: float) -> float:
        return math.hypot(self.x - ox, self.y - oy)
