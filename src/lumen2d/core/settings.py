"""Render configuration.

RenderSettings gathers every parameter of a render (resolution, sample count,
bounce depth, ambient index of refraction, seeding and tiling) in one frozen
dataclass validated at construction. TraceOptions is the subset the tracer
reads on every bounce.

The image maps onto the scene plane with ``origin`` at the top-left corner of
pixel (0, 0) and square pixels of ``pixel_size`` scene units; rows grow along
+y. With the default pixel_size the longer image side spans one scene unit.

Example:
    >>> from lumen2d.core.settings import RenderSettings
    >>> settings = RenderSettings(width=256, height=256, samples_per_pixel=64)
    >>> settings.pixel_size
    0.00390625
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass, field
from enum import Enum

from lumen2d.core.ray import Vector2, VectorLike, vec2
from lumen2d.core.spectrum import Spectrum, SpectrumLike, channel_tuple, spectrum

# =============================================================================
# Defaults
# =============================================================================

# Maximum bounce count before a path is terminated with zero contribution
MAX_DEPTH = 16

DEFAULT_SAMPLES_PER_PIXEL = 16
DEFAULT_TILE_SIZE = 16

# Largest supported image side
MAX_RESOLUTION = 8192


def _as_int(name: str, value: object) -> int:
    """Coerce an integer-like value (including numpy integers) to int; bool is rejected."""
    if isinstance(value, bool):
        raise ValueError(f"{name} = {value!r} must be an integer, not a bool")
    try:
        return operator.index(value)
    except TypeError:
        raise ValueError(f"{name} = {value!r} must be an integer") from None


class SamplingStrategy(Enum):
    """How sample directions are drawn for a pixel.

    UNIFORM draws every angle independently. STRATIFIED splits [0, 2pi) into
    one stratum per sample and jitters inside each stratum.
    """

    UNIFORM = "uniform"
    STRATIFIED = "stratified"


@dataclass(frozen=True)
class TraceOptions:
    """Parameters read by the tracer on every bounce.

    Attributes:
        max_depth: Paths deeper than this return zero radiance.
        ambient_ior: Index of refraction outside every refractive medium.
        background: Radiance of rays escaping the scene, scalar or per channel.
    """

    max_depth: int = MAX_DEPTH
    ambient_ior: float = 1.0
    background: SpectrumLike = 0.0
    background_radiance: Spectrum = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        max_depth = _as_int("max_depth", self.max_depth)
        if max_depth < 0:
            raise ValueError(f"max_depth must be a non-negative integer, got {max_depth!r}")
        object.__setattr__(self, "max_depth", max_depth)
        if not math.isfinite(self.ambient_ior) or self.ambient_ior < 1.0:
            raise ValueError(f"ambient_ior = {self.ambient_ior} must be finite and >= 1.0")
        background = channel_tuple("background", self.background)
        object.__setattr__(self, "background", background)
        radiance = spectrum(background)
        radiance.setflags(write=False)
        object.__setattr__(self, "background_radiance", radiance)


@dataclass(frozen=True)
class RenderSettings:
    """Configuration for a render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of paths traced per pixel in a full render.
        max_depth: Maximum bounce count.
        ambient_ior: Index of refraction of the space between objects.
        background: Radiance of escaping rays.
        seed: Root seed; every tile derives its own generator from it.
        tile_size: Side of the square tiles handed to workers.
        pixel_size: Scene units per pixel. None picks 1 / max(width, height).
        origin: Scene-plane position of the top-left image corner.
        strategy: Direction sampling strategy (enum or its string value).
        antialias: Jitter the sample position inside the pixel. If False,
            every sample starts at the pixel center.
    """

    width: int
    height: int
    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    max_depth: int = MAX_DEPTH
    ambient_ior: float = 1.0
    background: SpectrumLike = 0.0
    seed: int = 0
    tile_size: int = DEFAULT_TILE_SIZE
    pixel_size: float | None = None
    origin: VectorLike = (0.0, 0.0)
    strategy: SamplingStrategy | str = SamplingStrategy.UNIFORM
    antialias: bool = True

    def __post_init__(self) -> None:
        for name in ("width", "height", "samples_per_pixel", "max_depth", "tile_size", "seed"):
            object.__setattr__(self, name, _as_int(name, getattr(self, name)))
        for name in ("width", "height"):
            value = getattr(self, name)
            if not (0 < value <= MAX_RESOLUTION):
                raise ValueError(f"{name} = {value!r} must be an integer in [1, {MAX_RESOLUTION}]")
        for name in ("samples_per_pixel", "tile_size"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} = {value!r} must be a positive integer")
        if self.seed < 0:
            raise ValueError(f"seed = {self.seed!r} must be a non-negative integer")

        if self.pixel_size is None:
            object.__setattr__(self, "pixel_size", 1.0 / max(self.width, self.height))
        elif not math.isfinite(self.pixel_size) or self.pixel_size <= 0.0:
            raise ValueError(f"pixel_size = {self.pixel_size} must be positive and finite")

        object.__setattr__(self, "origin", vec2(self.origin))
        object.__setattr__(self, "strategy", SamplingStrategy(self.strategy))

        # Validates max_depth, ambient_ior and background
        options = self.trace_options
        object.__setattr__(self, "background", options.background)

    @property
    def trace_options(self) -> TraceOptions:
        return TraceOptions(
            max_depth=self.max_depth,
            ambient_ior=self.ambient_ior,
            background=self.background,
        )

    @property
    def extent(self) -> tuple[Vector2, Vector2]:
        """Get the scene-plane corners (top-left, bottom-right) the image covers."""
        size = Vector2(self.width * self.pixel_size, self.height * self.pixel_size)
        return self.origin, self.origin + size
