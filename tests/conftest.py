"""Pytest configuration and shared fixtures."""

import pytest

from iconscope.core.palette import PaletteControlPoint
from iconscope.io.framebuffer import ArrayFramebuffer
from iconscope.runner import RunConfig

GRAYSCALE = [
    PaletteControlPoint(0.0, 0.0, 0.0, 0.0),
    PaletteControlPoint(1.0, 255.0, 255.0, 255.0),
]


@pytest.fixture
def framebuffer() -> ArrayFramebuffer:
    """Small square raster."""
    return ArrayFramebuffer(64, 64)


@pytest.fixture
def halo_config() -> RunConfig:
    """
    Orbit spiralling out to a stable circle of radius 1.

    With beta = gamma = delta = 0 the map is z -> (0.9 - 0.1|z|^2 + 0.6i) z,
    whose modulus is 1 exactly at |z| = 1 and larger inside it.
    """
    return RunConfig(
        lambda_=0.9,
        alpha=-0.1,
        beta=0.0,
        gamma=0.0,
        delta=0.0,
        omega=0.6,
        n=3,
        p=1,
        extent=3.0,
        palette=list(GRAYSCALE),
        max_hit=1200,
        tick_iterations=10_000,
        total_iterations=10_000,
    )


@pytest.fixture
def chaotic_config() -> RunConfig:
    """Seven-fold icon with every coefficient of the extended map active."""
    return RunConfig(
        lambda_=-2.08,
        alpha=1.0,
        beta=-0.1,
        gamma=0.167,
        delta=0.05,
        omega=0.02,
        n=7,
        p=2,
        extent=3.0,
        palette=list(GRAYSCALE),
        max_hit=255,
        tick_iterations=2_000,
        total_iterations=6_000,
    )
