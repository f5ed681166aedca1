"""Specular (mirror) material implementation.

A specular surface reflects the incoming ray about the surface normal,

    r = d - 2 (d . n) n

and scales the radiance carried back along the reflected path by its
reflectivity. The angle of incidence equals the angle of reflection, so
r . n == -(d . n).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lumen2d.core.ray import Vector2, reflect
from lumen2d.core.spectrum import Spectrum, SpectrumLike, channel_tuple, spectrum


@dataclass(frozen=True)
class Specular:
    """Specular reflector properties.

    Attributes:
        reflectivity: Fraction of radiance reflected, scalar or per channel,
            each in [0, 1]. 1.0 is a perfect mirror.
    """

    reflectivity: SpectrumLike = 1.0
    reflectance: Spectrum = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        reflectivity = channel_tuple("Specular reflectivity", self.reflectivity, upper=1.0)
        object.__setattr__(self, "reflectivity", reflectivity)
        reflectance = spectrum(reflectivity)
        reflectance.setflags(write=False)
        object.__setattr__(self, "reflectance", reflectance)


def scatter_specular(incident: Vector2, normal: Vector2) -> Vector2:
    """Compute the mirror direction for a specular surface.

    Args:
        incident: The incoming unit direction.
        normal: The unit surface normal (either orientation).

    Returns:
        The reflected unit direction.
    """
    return reflect(incident, normal)
