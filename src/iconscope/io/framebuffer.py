"""
Writable raster surfaces.

The engine never touches a display directly; it writes RGB values into any
object implementing the ``Framebuffer`` protocol.
"""

from typing import Protocol, Sequence, Tuple

import numpy as np

Color = Tuple[int, int, int]


class Framebuffer(Protocol):
    """
    Host-owned RGB raster of ``width`` x ``height`` pixels.

    ``write_rgb`` is optional; surfaces without it are painted pixel by
    pixel through ``write``.
    """

    width: int
    height: int

    def write(self, x: int, y: int, color: Color) -> None:
        ...

    def write_rgb(self, rgb: np.ndarray) -> None:
        """Overwrite the whole raster from an (H, W, 3) uint8 array."""
        ...

    def fill(self, color: Color) -> None:
        ...


class ArrayFramebuffer:
    """In-memory framebuffer backed by an (H, W, 3) uint8 numpy array."""

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((max(self.height, 0), max(self.width, 0), 3), dtype=np.uint8)

    def write(self, x: int, y: int, color: Color) -> None:
        self.pixels[y, x] = color

    def write_rgb(self, rgb: np.ndarray) -> None:
        if rgb.shape != self.pixels.shape:
            raise ValueError(f"Frame shape {rgb.shape} does not match raster {self.pixels.shape}")
        self.pixels[...] = rgb

    def fill(self, color: Sequence[int]) -> None:
        self.pixels[...] = color

    def to_array(self) -> np.ndarray:
        """Copy of the raster as (H, W, 3) uint8."""
        return self.pixels.copy()
