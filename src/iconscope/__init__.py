"""
iconscope: renders symmetric chaotic attractors ("symmetry icons").

An orbit of a dihedrally symmetric complex map is accumulated into a
saturating hit histogram and colored through a gradient palette.
"""

from iconscope.core.histogram import HistogramCanvas
from iconscope.core.palette import PaletteControlPoint, build_palette
from iconscope.core.symmetry import MapParameters, SymmetricMap
from iconscope.exceptions import ConfigurationError
from iconscope.io.framebuffer import ArrayFramebuffer
from iconscope.runner import RenderLoop, RunConfig

__version__ = "0.1.0"

__all__ = [
    "ArrayFramebuffer",
    "ConfigurationError",
    "HistogramCanvas",
    "MapParameters",
    "PaletteControlPoint",
    "RenderLoop",
    "RunConfig",
    "SymmetricMap",
    "build_palette",
]
