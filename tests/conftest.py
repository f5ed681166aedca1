"""Pytest configuration for lumen2d tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import numpy as np
import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Every later init_taichi() call from library code is then a no-op.
    """
    from lumen2d.core.backend import init_taichi

    init_taichi(random_seed=42)
    yield


@pytest.fixture
def rng():
    """A seeded random generator, fresh for every test."""
    return np.random.default_rng(12345)


@pytest.fixture
def lit_wall_scene():
    """Factory for a diffuse floor segment lit by a small light above it.

    The floor spans x in [0, 1] at y = 1.0 and the light is centered at
    (0.5, 1.0 - distance), so the point (0.5, 1.0) of the floor sees the
    light straight above it with nothing in between.
    """

    def _make(distance=0.5, intensity=1.0, radius=0.005, color=(1.0, 1.0, 1.0)):
        from lumen2d.materials import Diffuse
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_segment((0.0, 1.0), (1.0, 1.0), Diffuse(color), name="floor")
        builder.add_light_circle((0.5, 1.0 - distance), radius, intensity, name="light")
        return builder.build()

    return _make
