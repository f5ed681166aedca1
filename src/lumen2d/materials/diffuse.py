"""Diffuse (matte) material implementation.

Diffuse surfaces are shaded by direct light sampling: the tracer casts one
shadow ray toward a sampled point on every light and weights the unoccluded
contributions by the 2D falloff

    intensity * max(0, n . l) / distance

No secondary diffuse bounce is traced, so diffuse interreflection is not
simulated.

Example:
    >>> from lumen2d.materials.diffuse import Diffuse
    >>> wall = Diffuse(color=(0.8, 0.8, 0.8))
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lumen2d.core.ray import Vector2
from lumen2d.core.spectrum import Spectrum, SpectrumLike, channel_tuple, spectrum


@dataclass(frozen=True)
class Diffuse:
    """Diffuse material properties.

    Attributes:
        color: The diffuse reflectance per channel, each in [0, 1].
    """

    color: SpectrumLike = (0.8, 0.8, 0.8)
    albedo: Spectrum = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        color = channel_tuple("Diffuse color", self.color, upper=1.0)
        object.__setattr__(self, "color", color)
        albedo = spectrum(color)
        albedo.setflags(write=False)
        object.__setattr__(self, "albedo", albedo)


def diffuse_falloff(normal: Vector2, to_light: Vector2, distance: float) -> float:
    """Compute the geometric weight of a light sample on a diffuse surface.

    Args:
        normal: Unit surface normal facing the shaded side.
        to_light: Unit direction from the surface point to the light sample.
        distance: Distance travelled to the light surface (positive).

    Returns:
        max(0, n . l) / distance, or 0 for back-facing samples.
    """
    cosine = normal.dot(to_light)
    if cosine <= 0.0 or distance <= 0.0:
        return 0.0
    return cosine / distance
