"""Core rendering module.

This module contains the fundamental building blocks for 2D light transport:

Components:
    ray: Vector2, Ray and scattering/sampling helpers
    spectrum: Fixed three-channel radiance representation
    settings: Render configuration
    tracer: Recursive light-path integrator
    sampler: Per-pixel Monte Carlo accumulation
    buffer: Pixel buffer, tiles and Taichi-backed resolve
    backend: One-time Taichi runtime initialisation
    scheduler: Thread-pool fan-out over tiles
    progressive: Multi-pass accumulation with progress reporting

The tracer is a pure function of a ray, a read-only scene and an explicit
random generator, so tiles can be traced on any number of workers without
locking.
"""

from .ray import (
    RAY_EPSILON,
    T_MIN,
    Ray,
    Vector2,
    make_ray,
    offset_ray_origin,
    random_in_unit_disk,
    random_unit_vector,
    ray_at,
    reflect,
    refract,
    schlick_fresnel,
    vec2,
)
from .spectrum import CHANNELS, Spectrum, luminance, spectrum, zero_spectrum

# Note: tracer, sampler, scheduler and progressive are NOT imported here to
# avoid circular imports (they depend on the scene package, which depends on
# this one). Import them directly, e.g.:
#   from lumen2d.core.scheduler import render

__all__ = [
    "Vector2",
    "vec2",
    "Ray",
    "ray_at",
    "make_ray",
    "reflect",
    "refract",
    "schlick_fresnel",
    "offset_ray_origin",
    "random_unit_vector",
    "random_in_unit_disk",
    "T_MIN",
    "RAY_EPSILON",
    "CHANNELS",
    "Spectrum",
    "spectrum",
    "zero_spectrum",
    "luminance",
]
