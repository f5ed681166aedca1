"""Monte Carlo pixel sampling.

Every pixel is a small square of the scene plane. A sample picks a point in
that square (the center, or a jittered point when antialiasing), draws a
direction and traces the ray leaving the point in that direction. The pixel
estimate is the mean radiance over its samples: each sample is an
independent draw, so the estimate is unbiased and its variance falls as the
sample count grows.

Functions here only read the scene and write to arrays they own; the caller
supplies the random generator.
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

from lumen2d.core.buffer import Tile
from lumen2d.core.ray import Ray, Vector2
from lumen2d.core.settings import RenderSettings, SamplingStrategy, TraceOptions
from lumen2d.core.spectrum import CHANNELS, Spectrum, zero_spectrum
from lumen2d.core.tracer import trace
from lumen2d.scene.intersection import media_at
from lumen2d.scene.scene import Scene

TWO_PI = 2.0 * math.pi


def pixel_origin(settings: RenderSettings, col: int, row: int, u: float = 0.5, v: float = 0.5) -> Vector2:
    """Map a position inside a pixel to the scene plane.

    Args:
        settings: Render settings holding origin and pixel_size.
        col: Pixel column.
        row: Pixel row (rows grow along +y).
        u: Horizontal offset inside the pixel, in [0, 1).
        v: Vertical offset inside the pixel, in [0, 1).

    Returns:
        origin + (col + u, row + v) * pixel_size.
    """
    size = settings.pixel_size
    return Vector2(settings.origin.x + (col + u) * size, settings.origin.y + (row + v) * size)


def sample_angles(
    rng: np.random.Generator,
    count: int,
    strategy: SamplingStrategy = SamplingStrategy.UNIFORM,
) -> npt.NDArray[np.float64]:
    """Draw ``count`` ray angles in [0, 2pi).

    UNIFORM draws each angle independently; STRATIFIED places one jittered
    angle in each of ``count`` equal strata.
    """
    if strategy is SamplingStrategy.STRATIFIED:
        return (np.arange(count) + rng.random(count)) * (TWO_PI / count)
    return rng.random(count) * TWO_PI


def accumulate_pixel(
    scene: Scene,
    settings: RenderSettings,
    col: int,
    row: int,
    rng: np.random.Generator,
    samples: int | None = None,
    options: TraceOptions | None = None,
) -> Spectrum:
    """Trace every sample of a pixel and sum their radiance.

    Args:
        scene: The scene to render.
        settings: Render settings.
        col: Pixel column.
        row: Pixel row.
        rng: Random generator for this pixel's samples.
        samples: Number of samples. Defaults to settings.samples_per_pixel.
        options: Trace options. Defaults to settings.trace_options.

    Returns:
        The sum of all sample contributions (not yet divided by the count).

    Raises:
        ValueError: If samples is not positive.
    """
    if samples is None:
        samples = settings.samples_per_pixel
    if samples <= 0:
        raise ValueError(f"samples must be positive, got {samples}")
    if options is None:
        options = settings.trace_options

    total = zero_spectrum()
    for angle in sample_angles(rng, samples, settings.strategy):
        if settings.antialias:
            u, v = rng.random(2)
        else:
            u = v = 0.5
        point = pixel_origin(settings, col, row, u, v)
        ray = Ray(point, Vector2.from_angle(angle))
        total += trace(ray, scene, rng, options, media=media_at(scene, point))
    return total


def estimate_pixel(
    scene: Scene,
    settings: RenderSettings,
    col: int,
    row: int,
    rng: np.random.Generator,
    samples: int | None = None,
) -> Spectrum:
    """Compute the Monte Carlo radiance estimate of a pixel (mean over samples)."""
    if samples is None:
        samples = settings.samples_per_pixel
    if samples <= 0:
        raise ValueError(f"samples must be positive, got {samples}")
    return accumulate_pixel(scene, settings, col, row, rng, samples) / samples


def render_tile(
    scene: Scene,
    settings: RenderSettings,
    tile: Tile,
    rng: np.random.Generator,
    samples: int | None = None,
) -> npt.NDArray[np.float64]:
    """Render the sample sums of every pixel in a tile.

    Args:
        scene: The scene to render.
        settings: Render settings.
        tile: The block of pixels to render.
        rng: Random generator owned by this tile.
        samples: Samples per pixel. Defaults to settings.samples_per_pixel.

    Returns:
        Array of shape (tile.height, tile.width, CHANNELS) of radiance sums.
    """
    options = settings.trace_options
    sums = np.zeros((tile.height, tile.width, CHANNELS), dtype=np.float64)
    for row in range(tile.y0, tile.y1):
        for col in range(tile.x0, tile.x1):
            sums[row - tile.y0, col - tile.x0] = accumulate_pixel(scene, settings, col, row, rng, samples, options)
    return sums
