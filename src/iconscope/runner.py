"""
Run orchestration for symmetric attractor rendering.

A RenderLoop owns one orbit, one histogram and one palette. The host calls
``start(config)`` once, then ``tick()`` while ``running()`` is true,
interleaving its own event handling and presentation between ticks.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import numpy as np

from iconscope.core.histogram import MAX_COUNTER, HistogramCanvas
from iconscope.core.palette import (
    PaletteControlPoint,
    build_palette,
    parse_control_points,
    validate_control_points,
)
from iconscope.core.symmetry import MapParameters, SymmetricMap
from iconscope.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SEED = complex(0.001, 0.002)
WARMUP_ITERATIONS = 20


def _default_palette() -> List[PaletteControlPoint]:
    return [
        PaletteControlPoint(0.0, 0.0, 0.0, 0.0),
        PaletteControlPoint(0.02, 40.0, 20.0, 120.0),
        PaletteControlPoint(0.2, 230.0, 80.0, 40.0),
        PaletteControlPoint(1.0, 255.0, 255.0, 220.0),
    ]


@dataclass
class RunConfig:
    """Configuration for one attractor run."""

    # Map coefficients
    lambda_: float = 1.56
    alpha: float = -1.0
    beta: float = 0.1
    gamma: float = -0.82
    delta: float = 0.0
    omega: float = 0.0
    n: int = 3
    p: int = 1

    # Plotted square is [-extent/2, extent/2] on both axes
    extent: float = 3.0

    palette: List[PaletteControlPoint] = field(default_factory=_default_palette)

    # Saturation cap; the palette holds max_hit + 1 colors
    max_hit: int = 1200

    tick_iterations: int = 100_000
    total_iterations: int = 50_000_000

    @property
    def map_parameters(self) -> MapParameters:
        return MapParameters(
            lambda_=self.lambda_,
            alpha=self.alpha,
            beta=self.beta,
            gamma=self.gamma,
            delta=self.delta,
            omega=self.omega,
            n=self.n,
            p=self.p,
        )

    def validate(self, width: int, height: int):
        """Raise ConfigurationError if this config cannot start a run."""
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Raster dimensions must be positive, got {width}x{height}")
        self.map_parameters.validate()
        validate_control_points(parse_control_points(self.palette))
        if not (math.isfinite(self.extent) and self.extent > 0):
            raise ConfigurationError(f"Extent must be a positive finite number, got {self.extent}")
        if not 1 <= self.max_hit <= MAX_COUNTER:
            raise ConfigurationError(f"max_hit must be in [1, {MAX_COUNTER}], got {self.max_hit}")
        if self.tick_iterations < 1:
            raise ConfigurationError(f"tick_iterations must be >= 1, got {self.tick_iterations}")
        if self.total_iterations < 0:
            raise ConfigurationError(f"total_iterations must be >= 0, got {self.total_iterations}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], **overrides) -> "RunConfig":
        """
        Build a config from a dataset record.

        Expected keys: lambda, alpha, beta, gamma, n, extent, palette
        (list of [position, r, g, b]); delta and omega default to 0, p to 1.
        Optional keys max_hit, tick_iterations and total_iterations override
        the run defaults, as do keyword ``overrides``.
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Dataset must be a JSON object, got {type(data).__name__}")

        missing = [k for k in ("lambda", "alpha", "beta", "gamma", "n", "extent", "palette") if k not in data]
        if missing:
            raise ConfigurationError(f"Dataset is missing keys: {', '.join(missing)}")

        try:
            kwargs: Dict[str, Any] = {
                "lambda_": float(data["lambda"]),
                "alpha": float(data["alpha"]),
                "beta": float(data["beta"]),
                "gamma": float(data["gamma"]),
                "delta": float(data.get("delta", 0.0)),
                "omega": float(data.get("omega", 0.0)),
                "n": _as_int(data["n"], "n"),
                "p": _as_int(data.get("p", 1), "p"),
                "extent": float(data["extent"]),
                "palette": parse_control_points(data["palette"]),
            }
            for key in ("max_hit", "tick_iterations", "total_iterations"):
                if key in data:
                    kwargs[key] = _as_int(data[key], key)
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Malformed dataset: {exc}") from exc

        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)

    @classmethod
    def from_json(cls, text: str, **overrides) -> "RunConfig":
        """Parse a JSON dataset record (see ``from_dict``)."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON: {exc}") from exc
        return cls.from_dict(data, **overrides)


def _as_int(value: Any, name: str) -> int:
    number = float(value)
    if not number.is_integer():
        raise ConfigurationError(f"{name} must be an integer, got {value}")
    return int(number)


class RenderLoop:
    """
    Drives one attractor run into a host framebuffer.

    States: uninitialized -> running (``start``) -> stopped (iteration budget
    spent, or ``stop``). ``start`` may be called again from any state and
    replaces the whole run.
    """

    def __init__(self, framebuffer, present: Optional[Callable[[], None]] = None):
        """
        Args:
            framebuffer: Host raster implementing the Framebuffer protocol.
            present: Optional callback invoked after each tick so the host can
                show the updated frame.
        """
        self.framebuffer = framebuffer
        self.present = present

        self.config: Optional[RunConfig] = None
        self.map: Optional[SymmetricMap] = None
        self.canvas: Optional[HistogramCanvas] = None
        self.palette: list = []
        self.z = SEED
        self.iterations_done = 0
        self._running = False

    def start(self, config: RunConfig):
        """Validate ``config`` and begin a fresh run, discarding any prior one."""
        config.validate(int(self.framebuffer.width), int(self.framebuffer.height))

        symmetric_map = SymmetricMap(config.map_parameters)
        canvas = HistogramCanvas(self.framebuffer, config.extent, config.max_hit)
        palette = build_palette(config.palette, config.max_hit + 1)

        # Skip transients before recording
        x, y = SEED.real, SEED.imag
        for _ in range(WARMUP_ITERATIONS):
            x, y = symmetric_map.iterate_xy(x, y)

        canvas.clear()

        self.config = config
        self.map = symmetric_map
        self.canvas = canvas
        self.palette = palette
        self.z = complex(x, y)
        self.iterations_done = 0
        self._running = True

        logger.info(
            "Started run: n=%d p=%d extent=%.3f raster=%dx%d total=%d",
            config.n, config.p, config.extent, canvas.width, canvas.height, config.total_iterations,
        )

    def tick(self):
        """Run one batch of iterations, recolor the framebuffer and present it."""
        if not self._running:
            raise RuntimeError("RenderLoop.tick() called while not running; call start() first")

        count = self.config.tick_iterations
        iterate_xy = self.map.iterate_xy
        xs = [0.0] * count
        ys = [0.0] * count
        x, y = self.z.real, self.z.imag
        for i in range(count):
            x, y = iterate_xy(x, y)
            xs[i] = x
            ys[i] = y
        self.z = complex(x, y)

        landed = self.canvas.increment_many(np.array(xs), np.array(ys))
        self.canvas.colorize(self.palette)
        if self.present is not None:
            self.present()

        self.iterations_done += count
        logger.debug("Tick: %d/%d points on raster, %d iterations done", landed, count, self.iterations_done)

        if self.iterations_done >= self.config.total_iterations:
            self._running = False
            logger.info("Run finished after %d iterations", self.iterations_done)

    def running(self) -> bool:
        return self._running

    def stop(self):
        """Stop the run; the histogram and framebuffer keep their contents."""
        if self._running:
            logger.info("Run stopped at %d iterations", self.iterations_done)
        self._running = False

    @property
    def progress(self) -> float:
        """Fraction of the iteration budget spent, in [0, 1]."""
        if self.config is None:
            return 0.0
        total = max(self.config.total_iterations, 1)
        return min(self.iterations_done / total, 1.0)
