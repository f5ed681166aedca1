"""Tone mapping and gamma for displaying radiance images.

Rendered buffers hold unclamped linear radiance. Before an image can be
shown or encoded to 8 bits it is tone mapped into [0, 1] and gamma encoded.

Operators:
    - none: clamp only
    - reinhard: c / (1 + c) per channel
    - luminance: Reinhard on luminance, keeping each pixel's hue
    - exposure: 1 - exp(-c * exposure)

Example:
    >>> from lumen2d.preview.display import process_image_for_display
    >>> display = process_image_for_display(buffer.finalize(), tone_map="reinhard")
"""

from __future__ import annotations

from typing import Literal

import numpy as np
import numpy.typing as npt

ToneMapMethod = Literal["none", "reinhard", "luminance", "exposure"]

_LUMINANCE_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])


def tone_map_reinhard(image: npt.NDArray[np.floating]) -> npt.NDArray[np.float32]:
    """Apply per-channel Reinhard tone mapping: c / (1 + c)."""
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def tone_map_luminance(image: npt.NDArray[np.floating]) -> npt.NDArray[np.float32]:
    """Apply Reinhard to the luminance of each pixel and rescale its channels.

    Unlike per-channel Reinhard, saturated colors keep their hue.
    """
    image = np.maximum(image, 0.0)
    lum = image @ _LUMINANCE_WEIGHTS
    scale = np.divide(1.0, 1.0 + lum, out=np.zeros_like(lum), where=lum > 0.0)
    # Scale down further where the brightest channel would exceed 1
    peak = image.max(axis=-1) * scale
    scale = np.divide(scale, peak, out=scale, where=peak > 1.0)
    return np.clip(image * scale[..., np.newaxis], 0.0, 1.0).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.floating],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Apply exposure tone mapping: 1 - exp(-c * exposure).

    Args:
        image: Linear image of shape (H, W, 3).
        exposure: Brightness multiplier. Higher values brighten the image.

    Returns:
        Tone mapped image in [0, 1].
    """
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float32)


def auto_exposure(image: npt.NDArray[np.floating], percentile: float = 99.0) -> float:
    """Pick an exposure that maps the given luminance percentile to about 0.9.

    Returns 1.0 for an all-black image.
    """
    lum = np.maximum(image, 0.0) @ _LUMINANCE_WEIGHTS
    level = float(np.percentile(lum, percentile))
    if level <= 0.0:
        return 1.0
    # 1 - exp(-2.3) ~= 0.9
    return 2.3 / level


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Gamma encode an image already in [0, 1].

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    image = np.clip(image, 0.0, 1.0)
    if gamma == 1.0:
        return image.astype(np.float32)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.floating],
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Run the display pipeline: tone map, gamma encode, clamp.

    Args:
        image: Linear radiance of shape (H, W, 3).
        tone_map: Tone mapping operator.
        gamma: Gamma value (2.2 for sRGB displays).
        exposure: Exposure for the "exposure" operator.

    Returns:
        Display-ready float32 image in [0, 1].

    Raises:
        ValueError: If the image is not (H, W, 3) or the operator is unknown.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    if tone_map == "none":
        result = np.asarray(image, dtype=np.float32)
    elif tone_map == "reinhard":
        result = tone_map_reinhard(image)
    elif tone_map == "luminance":
        result = tone_map_luminance(image)
    elif tone_map == "exposure":
        result = tone_map_exposure(image, exposure)
    else:
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    return apply_gamma(result, gamma)
