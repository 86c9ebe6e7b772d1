"""
Gradient palette builder.

Turns an ordered list of color anchors into a fixed-length color ramp by
piecewise-linear interpolation, in a single forward sweep.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from iconscope.exceptions import ConfigurationError

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class PaletteControlPoint:
    """Gradient anchor: position in [0, 1] and an RGB color in [0, 255]."""

    position: float
    r: float
    g: float
    b: float

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "PaletteControlPoint":
        """Build from a ``[position, r, g, b]`` record."""
        if len(values) != 4:
            raise ConfigurationError(
                f"Palette control point needs 4 values [position, r, g, b], got {list(values)}"
            )
        try:
            return cls(*(float(v) for v in values))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Palette control point is not numeric: {list(values)}") from exc

    @property
    def color(self) -> Tuple[float, float, float]:
        return (self.r, self.g, self.b)


def parse_control_points(records: Iterable) -> List[PaletteControlPoint]:
    """Accept control points or ``[position, r, g, b]`` records."""
    points = []
    for rec in records:
        if isinstance(rec, PaletteControlPoint):
            points.append(rec)
        else:
            points.append(PaletteControlPoint.from_sequence(rec))
    return points


def validate_control_points(points: Sequence[PaletteControlPoint]):
    """Raise ConfigurationError unless the anchors form a usable gradient."""
    if len(points) < 2:
        raise ConfigurationError(f"Palette needs at least 2 control points, got {len(points)}")

    for pt in points:
        if not (0.0 <= pt.position <= 1.0):
            raise ConfigurationError(f"Palette position {pt.position} outside [0, 1]")
        for channel in pt.color:
            if not (math.isfinite(channel) and 0.0 <= channel <= 255.0):
                raise ConfigurationError(f"Palette channel {channel} outside [0, 255]")

    for prev, nxt in zip(points, points[1:]):
        if nxt.position <= prev.position:
            raise ConfigurationError(
                "Palette control points must have strictly increasing positions "
                f"({prev.position} followed by {nxt.position})"
            )


def build_palette(anchors: Sequence, maxval: int) -> List[RGB]:
    """
    Build a ramp of ``maxval`` RGB colors from gradient anchors.

    Sample ``i`` sits at position ``i / maxval``. A cursor walks the anchor
    list once; inside the active bracket [a_k, a_{k+1}] every channel is
    interpolated linearly. Samples before the first or past the last anchor
    take that anchor's color.

    Args:
        anchors: PaletteControlPoint objects or [position, r, g, b] records,
            strictly increasing in position.
        maxval: Number of colors to produce.

    Returns:
        List of (r, g, b) integer tuples.
    """
    points = parse_control_points(anchors)
    validate_control_points(points)
    if int(maxval) != maxval or maxval < 1:
        raise ConfigurationError(f"Palette length must be a positive integer, got {maxval}")
    maxval = int(maxval)

    palette: List[RGB] = []
    k = 0
    last = len(points) - 2
    for i in range(maxval):
        pos = i / maxval
        while k < last and pos > points[k + 1].position:
            k += 1

        lo = points[k]
        hi = points[k + 1]
        t = (pos - lo.position) / (hi.position - lo.position)
        t = min(max(t, 0.0), 1.0)

        palette.append(tuple(
            int(min(max(base + t * (top - base), 0.0), 255.0))
            for base, top in zip(lo.color, hi.color)
        ))

    return palette


def palette_to_array(palette: Sequence[RGB]) -> np.ndarray:
    """Convert a color ramp into a (N, 3) uint8 lookup table."""
    lut = np.asarray(palette, dtype=np.uint8)
    if lut.ndim != 2 or lut.shape[1] != 3:
        raise ConfigurationError(f"Palette must be a sequence of RGB triples, got shape {lut.shape}")
    return lut
