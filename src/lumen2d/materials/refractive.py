"""Refractive (glass/water) material implementation.

This module implements transparent media bounded by a closed primitive.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Total internal reflection when the discriminant goes negative, in which
      case the ray is reflected instead
    - Optional Schlick approximation of Fresnel reflectance, choosing between
      reflection and refraction stochastically
    - Optional interior absorption (tinted glass), applied by the tracer with
      the Beer-Lambert law over the path length inside

Whether a ray enters or exits is decided by the sign of d . n against the
outward normal; the indices on each side come from the media the ray is in.

Example:
    >>> from lumen2d.materials.refractive import Refractive
    >>> glass = Refractive(ior=1.5)
    >>> green_glass = Refractive(ior=1.5, absorption=(4.0, 0.5, 4.0))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from lumen2d.core.ray import Vector2, reflect, refract, schlick_fresnel
from lumen2d.core.spectrum import Spectrum, SpectrumLike, channel_tuple, spectrum


@dataclass(frozen=True)
class Refractive:
    """Refractive medium properties.

    Attributes:
        ior: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
        absorption: Extinction coefficient per channel for the interior.
            Zero (the default) is a clear medium.
        fresnel: If True, reflect with Schlick probability at every boundary
            crossing. If False, always refract unless total internal
            reflection occurs.
    """

    ior: float = 1.5
    absorption: SpectrumLike = (0.0, 0.0, 0.0)
    fresnel: bool = False
    sigma: Spectrum = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not math.isfinite(self.ior) or self.ior < 1.0:
            raise ValueError(
                f"Index of refraction = {self.ior} is less than 1.0. "
                "IOR must be >= 1.0 for physically meaningful materials."
            )
        absorption = channel_tuple("Refractive absorption", self.absorption)
        object.__setattr__(self, "absorption", absorption)
        sigma = spectrum(absorption)
        sigma.setflags(write=False)
        object.__setattr__(self, "sigma", sigma)


def will_reflect(incident: Vector2, normal: Vector2, eta: float) -> bool:
    """Determine if total internal reflection will occur.

    Args:
        incident: The incoming unit direction.
        normal: The unit normal facing the incident side.
        eta: Ratio of refractive indices n_incident / n_transmitted.

    Returns:
        True if no transmitted ray exists.
    """
    cos_theta = min(-incident.dot(normal), 1.0)
    sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    return eta * sin_theta > 1.0


def fresnel_reflectance(incident: Vector2, normal: Vector2, eta: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation."""
    cos_theta = min(-incident.dot(normal), 1.0)
    return schlick_fresnel(cos_theta, eta)


def scatter_refractive(
    incident: Vector2,
    normal: Vector2,
    eta: float,
    rng: np.random.Generator | None = None,
    fresnel: bool = False,
) -> tuple[Vector2, bool]:
    """Compute the scattered direction at a refractive boundary.

    Args:
        incident: The incoming unit direction.
        normal: The unit normal facing the incident side
            (incident . normal <= 0).
        eta: Ratio of refractive indices n_incident / n_transmitted.
        rng: Random generator, required when ``fresnel`` is True.
        fresnel: Whether to reflect with Schlick probability.

    Returns:
        A tuple of (direction, transmitted) where ``transmitted`` is False when
        the ray was reflected (total internal reflection or Fresnel choice).
    """
    refracted = refract(incident, normal, eta)
    if refracted is None:
        return reflect(incident, normal), False

    if fresnel:
        if rng is None:
            raise ValueError("A random generator is required for Fresnel sampling")
        if rng.random() < fresnel_reflectance(incident, normal, eta):
            return reflect(incident, normal), False

    return refracted, True
