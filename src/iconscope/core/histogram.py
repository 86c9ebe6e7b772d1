"""
Saturating visitation histogram.

Each raster cell counts how often the orbit landed on it. Counters stop at
``max_hit`` instead of wrapping, and ``colorize`` maps counts through a
palette into the host framebuffer. Vectorized with numpy; the scalar
``increment`` exists for single points, ``increment_many`` for batches.
"""

import logging
from typing import Sequence

import numpy as np

from iconscope.core.palette import palette_to_array
from iconscope.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

BACKGROUND = (0, 0, 0)
MAX_COUNTER = int(np.iinfo(np.uint32).max)


class HistogramCanvas:
    """
    Width x height grid of saturating hit counters bound to a framebuffer.

    Plane point (x, y) lands on pixel
    ``px = (y / extent + 0.5) * width``, ``py = (-x / extent + 0.5) * height``,
    i.e. the plane is rotated a quarter turn so the real axis points up.
    """

    def __init__(self, framebuffer, extent: float, max_hit: int):
        width = int(framebuffer.width)
        height = int(framebuffer.height)
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Raster dimensions must be positive, got {width}x{height}")
        if not extent > 0:
            raise ConfigurationError(f"Extent must be positive, got {extent}")
        if not 1 <= max_hit <= MAX_COUNTER:
            raise ConfigurationError(f"max_hit must be in [1, {MAX_COUNTER}], got {max_hit}")

        self.framebuffer = framebuffer
        self.width = width
        self.height = height
        self.extent = float(extent)
        self.max_hit = int(max_hit)
        self.counts = np.zeros((height, width), dtype=np.uint32)

    def _to_pixel(self, x, y):
        px = (y / self.extent + 0.5) * self.width
        py = (-x / self.extent + 0.5) * self.height
        return px, py

    def increment(self, x: float, y: float) -> int:
        """
        Record one hit at plane point (x, y).

        Returns the cell's new count, the unchanged cap when the cell is
        saturated, or 0 when the point falls off the raster.
        """
        px, py = self._to_pixel(x, y)
        # NaN fails every comparison and is dropped here
        if not (0.0 <= px < self.width and 0.0 <= py < self.height):
            return 0
        col = int(px)
        row = int(py)
        count = int(self.counts[row, col])
        if count < self.max_hit:
            count += 1
            self.counts[row, col] = count
        return count

    def increment_many(self, xs: np.ndarray, ys: np.ndarray) -> int:
        """
        Record a batch of hits. Equivalent to calling ``increment`` for each
        point in turn; returns the number of points that landed on the raster.
        """
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        with np.errstate(invalid="ignore", over="ignore"):
            px, py = self._to_pixel(xs, ys)
            inside = (px >= 0.0) & (px < self.width) & (py >= 0.0) & (py < self.height)
        if not inside.any():
            return 0

        cols = px[inside].astype(np.int64)
        rows = py[inside].astype(np.int64)
        hits = np.bincount(rows * self.width + cols, minlength=self.width * self.height)

        flat = self.counts.reshape(-1)
        total = flat.astype(np.int64) + hits
        np.minimum(total, self.max_hit, out=total)
        flat[...] = total
        return int(inside.sum())

    def colorize(self, palette: Sequence) -> None:
        """Write ``palette[min(count, len(palette) - 1)]`` for every cell."""
        lut = palette_to_array(palette)
        rgb = lut[np.minimum(self.counts, len(lut) - 1)]

        write_rgb = getattr(self.framebuffer, "write_rgb", None)
        if write_rgb is not None:
            write_rgb(rgb)
            return

        write = self.framebuffer.write
        for y in range(self.height):
            for x in range(self.width):
                r, g, b = rgb[y, x]
                write(x, y, (int(r), int(g), int(b)))

    def clear(self) -> None:
        """Zero every counter and paint the framebuffer background."""
        self.counts.fill(0)
        self.framebuffer.fill(BACKGROUND)

    @property
    def total_hits(self) -> int:
        return int(self.counts.sum(dtype=np.int64))

    @property
    def occupied(self) -> int:
        """Number of cells hit at least once."""
        return int(np.count_nonzero(self.counts))
