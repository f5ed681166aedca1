"""PNG export for rendered images.

Encoding is a thin wrapper: resolve the buffer to linear radiance, run the
display pipeline, quantise to 8 bits and hand the array to Pillow.

Example:
    >>> from lumen2d.core.scheduler import render
    >>> from lumen2d.preview.export import save_png
    >>> buffer = render(scene, settings)
    >>> save_png(buffer, "output.png", tone_map="reinhard")
"""

from __future__ import annotations

import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from lumen2d.core.buffer import PixelBuffer
from lumen2d.core.progressive import ProgressiveRenderer

from .display import ToneMapMethod, process_image_for_display

logger = logging.getLogger(__name__)


def radiance_image(source: PixelBuffer | ProgressiveRenderer) -> npt.NDArray[np.float64]:
    """Get the linear radiance array of a buffer or a progressive renderer."""
    if isinstance(source, ProgressiveRenderer):
        return source.get_image()
    if isinstance(source, PixelBuffer):
        return source.finalize() if source.is_finalized else source.resolve()
    raise TypeError(f"Expected PixelBuffer or ProgressiveRenderer, got {type(source).__name__}")


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear radiance image to 8-bit RGB.

    Args:
        image: Linear radiance of shape (H, W, 3).
        tone_map: Tone mapping operator.
        gamma: Gamma value (2.2 for sRGB).
        exposure: Exposure for the "exposure" operator.

    Returns:
        Array of shape (H, W, 3), dtype uint8.
    """
    processed = process_image_for_display(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    return np.round(processed * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.floating],
    filepath: str | os.PathLike[str],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Encode a linear radiance array as an 8-bit sRGB PNG."""
    pixels = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(pixels).save(filepath, format="PNG")
    logger.info(f"Wrote {pixels.shape[1]}x{pixels.shape[0]} PNG to {filepath}")


def save_png(
    source: PixelBuffer | ProgressiveRenderer,
    filepath: str | os.PathLike[str],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save a rendered buffer (or a renderer's current image) as a PNG.

    Args:
        source: A PixelBuffer or ProgressiveRenderer.
        filepath: Output path.
        tone_map: Tone mapping operator.
        gamma: Gamma value (2.2 for sRGB).
        exposure: Exposure for the "exposure" operator.
    """
    save_png_from_array(radiance_image(source), filepath, tone_map=tone_map, gamma=gamma, exposure=exposure)


def load_png(filepath: str | os.PathLike[str]) -> npt.NDArray[np.uint8]:
    """Load a PNG as an (H, W, 3) uint8 array."""
    with PILImage.open(filepath) as image:
        return np.asarray(image.convert("RGB"), dtype=np.uint8)


def compute_rmse(
    image_a: npt.NDArray[np.number],
    image_b: npt.NDArray[np.number],
) -> float:
    """Compute the root mean squared error between two images.

    Raises:
        ValueError: If the shapes differ.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")
    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
