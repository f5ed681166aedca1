"""Emissive (light source) material implementation.

Any primitive with an Emissive material is a light: rays that hit it collect
its intensity, and diffuse surfaces sample it with shadow rays. Lights are
ordinary primitives otherwise, so they occlude and can be occluded.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lumen2d.core.spectrum import Spectrum, SpectrumLike, channel_tuple, spectrum


@dataclass(frozen=True)
class Emissive:
    """Light emitter properties.

    Attributes:
        intensity: Radiant intensity, scalar or per channel, non-negative.
            Values above 1.0 are expected (HDR).
    """

    intensity: SpectrumLike = 1.0
    radiance: Spectrum = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        intensity = channel_tuple("Emissive intensity", self.intensity)
        object.__setattr__(self, "intensity", intensity)
        radiance = spectrum(intensity)
        radiance.setflags(write=False)
        object.__setattr__(self, "radiance", radiance)
