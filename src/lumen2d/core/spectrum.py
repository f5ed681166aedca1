"""Fixed three-channel radiance representation.

Radiance is carried as a NumPy float64 array of shape (CHANNELS,). Materials
store their colors as plain tuples so they stay hashable and immutable, and
convert them with spectrum() when shading.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

# Number of color channels (R, G, B)
CHANNELS = 3

Spectrum = npt.NDArray[np.float64]

# Anything accepted where a per-channel value is expected
SpectrumLike = float | Sequence[float]

# Rec. 709 luminance weights
_LUMINANCE_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])


def zero_spectrum() -> Spectrum:
    """Return a new all-zero spectrum."""
    return np.zeros(CHANNELS, dtype=np.float64)


def spectrum(value: SpectrumLike) -> Spectrum:
    """Coerce a scalar or per-channel sequence to a Spectrum.

    A scalar is broadcast to every channel.

    Raises:
        ValueError: If a sequence does not have exactly CHANNELS entries.
    """
    if np.ndim(value) == 0:
        return np.full(CHANNELS, float(value), dtype=np.float64)
    result = np.asarray(value, dtype=np.float64)
    if result.shape != (CHANNELS,):
        raise ValueError(f"Expected {CHANNELS} channels, got {value!r}")
    return result.copy()


def channel_tuple(
    name: str,
    value: SpectrumLike,
    *,
    upper: float | None = None,
) -> tuple[float, float, float]:
    """Validate a per-channel parameter and return it as a tuple.

    Args:
        name: Parameter name used in error messages.
        value: Scalar or per-channel sequence.
        upper: Optional inclusive upper bound for every channel.

    Returns:
        The value as a (R, G, B) tuple of floats.

    Raises:
        ValueError: If any channel is negative, non-finite or above ``upper``.
    """
    channels = spectrum(value)
    for c in channels:
        if not math.isfinite(c) or c < 0.0:
            raise ValueError(f"{name} = {tuple(channels)} must be finite and non-negative")
        if upper is not None and c > upper:
            raise ValueError(f"{name} = {tuple(channels)} must not exceed {upper}")
    return (float(channels[0]), float(channels[1]), float(channels[2]))


def luminance(value: Spectrum) -> float:
    """Compute the luminance of a linear RGB spectrum."""
    return float(np.dot(_LUMINANCE_WEIGHTS, value))
