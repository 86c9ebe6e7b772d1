"""
Symmetric complex-plane map.

Implements the polynomial family of Field & Golubitsky whose attractors have
exact n-fold rotational symmetry:

    F(z) = (lambda + alpha*|z|^2 + beta*Re(z^n) + delta*E(z)) * z
           + gamma * conj(z)^(n-1) + i*omega*z

where E(z) = Re((z/|z|)^(n*p)) * |z| is an extra n*p-fold rotational
perturbation that is only evaluated when delta is non-zero.

Plain Python floats are used throughout: overflow yields inf/nan instead of
raising, so divergent orbits never crash the caller.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from iconscope.exceptions import ConfigurationError


@dataclass(frozen=True)
class MapParameters:
    """Coefficients of the symmetric map. Immutable for the map's lifetime."""

    lambda_: float
    alpha: float
    beta: float
    gamma: float
    delta: float = 0.0
    omega: float = 0.0
    n: int = 3
    p: int = 1

    def validate(self):
        if int(self.n) != self.n or self.n < 3:
            raise ConfigurationError(f"Symmetry order n must be an integer >= 3, got {self.n}")
        if int(self.p) != self.p or self.p < 0:
            raise ConfigurationError(f"Rotation multiplier p must be a non-negative integer, got {self.p}")
        for name in ("lambda_", "alpha", "beta", "gamma", "delta", "omega"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"Coefficient {name.rstrip('_')} must be finite")


class SymmetricMap:
    """
    One step of the symmetric orbit.

    ``iterate`` commutes with rotation by 2*pi/n: rotating the input rotates
    the output by the same angle.
    """

    def __init__(self, params: MapParameters):
        params.validate()
        self.params = params
        self._lambda = float(params.lambda_)
        self._alpha = float(params.alpha)
        self._beta = float(params.beta)
        self._gamma = float(params.gamma)
        self._delta = float(params.delta)
        self._omega = float(params.omega)
        self._n = int(params.n)
        self._np = int(params.n) * int(params.p)

    def iterate_xy(self, x: float, y: float) -> Tuple[float, float]:
        """Advance the point (x, y) by one step; returns the new (x, y)."""
        r = x * x + y * y

        extra = 0.0
        if self._delta != 0.0 and r != 0.0:
            zabs = math.sqrt(r)
            ex = x / zabs
            ey = y / zabs
            # (ex + i*ey)^(n*p) by repeated rotation
            ec, ed = 1.0, 0.0
            for _ in range(self._np):
                ec, ed = ex * ec - ey * ed, ex * ed + ey * ec
            extra = ec * zabs

        # z^(n-1)
        zr, zi = x, y
        for _ in range(self._n - 2):
            zr, zi = zr * x - zi * y, zi * x + zr * y

        zn_real = x * zr - y * zi
        scale = self._lambda + self._alpha * r + self._beta * zn_real + self._delta * extra

        return (
            scale * x + self._gamma * zr - self._omega * y,
            scale * y - self._gamma * zi + self._omega * x,
        )

    def iterate(self, z: complex) -> complex:
        """Advance the complex point ``z`` by one step."""
        x, y = self.iterate_xy(z.real, z.imag)
        return complex(x, y)

    def orbit(self, z: complex, count: int):
        """Yield the next ``count`` points of the orbit starting after ``z``."""
        x, y = z.real, z.imag
        for _ in range(count):
            x, y = self.iterate_xy(x, y)
            yield complex(x, y)


def rotate(z: complex, angle: float) -> complex:
    """Rotate ``z`` about the origin by ``angle`` radians."""
    c = math.cos(angle)
    s = math.sin(angle)
    return complex(z.real * c - z.imag * s, z.real * s + z.imag * c)
