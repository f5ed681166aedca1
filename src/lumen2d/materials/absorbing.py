"""Absorbing medium implementation (Beer-Lambert law).

An absorbing primitive is a medium boundary that does not bend light: rays
cross it in a straight line. While a ray travels inside the medium, the
radiance it carries is attenuated per channel by

    T(L) = exp(-sigma * L)

where sigma is the extinction coefficient and L the path length travelled
inside. Free-space travel is never attenuated: outside every medium sigma is
zero and T == 1.

The same rule applies to the interior of a Refractive material with a
non-zero absorption (tinted glass).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from lumen2d.core.spectrum import Spectrum, SpectrumLike, channel_tuple, spectrum


@dataclass(frozen=True)
class Absorbing:
    """Non-refracting absorbing medium.

    Attributes:
        extinction: Extinction coefficient per channel (per unit length),
            each non-negative.
    """

    extinction: SpectrumLike = (1.0, 1.0, 1.0)
    sigma: Spectrum = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        extinction = channel_tuple("Absorbing extinction", self.extinction)
        object.__setattr__(self, "extinction", extinction)
        sigma = spectrum(extinction)
        sigma.setflags(write=False)
        object.__setattr__(self, "sigma", sigma)


def transmittance(extinction: Spectrum, distance: float) -> Spectrum:
    """Compute the Beer-Lambert transmittance over a path inside a medium.

    Args:
        extinction: Per-channel extinction coefficients (non-negative).
        distance: Path length travelled inside the medium. May be infinite
            for rays escaping through an unbounded medium.

    Returns:
        exp(-extinction * distance) per channel. Channels with zero extinction
        always transmit fully, including over an infinite path.
    """
    if distance <= 0.0:
        return np.ones_like(extinction, dtype=np.float64)
    if math.isinf(distance):
        return np.where(extinction > 0.0, 0.0, 1.0)
    return np.exp(-extinction * distance)
