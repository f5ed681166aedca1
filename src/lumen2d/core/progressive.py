"""Progressive renderer for iterative sample accumulation.

This module provides a convenient wrapper around the tile scheduler that
supports:
- Progressive rendering that refines over time
- Batch rendering (multiple SPP in one call)
- Progress callbacks and a generator interface
- Easy reset and re-render functionality

Every batch is one scheduler pass with its own pass index, so its samples are
independent of every earlier batch while staying reproducible for a given
seed.

Example:
    >>> from lumen2d.core.progressive import ProgressiveRenderer
    >>> from lumen2d.core.settings import RenderSettings
    >>> from lumen2d.scene.presets import create_lens_scene
    >>>
    >>> renderer = ProgressiveRenderer(create_lens_scene(), RenderSettings(width=256, height=256))
    >>> renderer.render(64, batch_size=16)
    >>> image = renderer.get_image_numpy()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from lumen2d.core.buffer import PixelBuffer
from lumen2d.core.scheduler import render_pass
from lumen2d.core.settings import RenderSettings
from lumen2d.scene.scene import Scene

logger = logging.getLogger(__name__)

# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A progressive renderer that accumulates samples over time.

    The renderer owns a PixelBuffer and adds samples to it one batch at a
    time. The buffer is never finalized, so rendering can always continue.

    Attributes:
        scene: The scene being rendered.
        settings: Render settings. samples_per_pixel is ignored; the sample
            count is driven by render() calls.
        workers: Thread pool size for each pass (None for the default).
    """

    def __init__(self, scene: Scene, settings: RenderSettings, workers: int | None = None) -> None:
        self.scene = scene
        self.settings = settings
        self.workers = workers
        self._buffer = PixelBuffer(settings.width, settings.height)
        self._sample_count = 0
        self._pass_index = 0

    @property
    def width(self) -> int:
        return self.settings.width

    @property
    def height(self) -> int:
        return self.settings.height

    @property
    def buffer(self) -> PixelBuffer:
        return self._buffer

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return self._sample_count

    def reset(self) -> None:
        """Clear the accumulated samples for a fresh render.

        Pass indices restart too, so a reset renderer reproduces its first
        render exactly.
        """
        self._buffer.clear()
        self._sample_count = 0
        self._pass_index = 0

    def _render_batch(self, batch: int) -> None:
        render_pass(
            self.scene,
            self.settings,
            self._buffer,
            samples=batch,
            pass_index=self._pass_index,
            workers=self.workers,
        )
        self._pass_index += 1
        self._sample_count += batch
        logger.debug(f"Accumulated {self._sample_count} spp")

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples progressively with optional progress callback.

        Accumulates the specified number of samples into the existing buffer.
        Can be called multiple times to continue refining the image.

        Args:
            num_samples: Total number of samples to add.
            batch_size: Number of samples per pass (and between callbacks).
            callback: Optional callback called after each batch with
                (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples progressively, yielding progress after each batch.

        Args:
            num_samples: Total number of samples to add.
            batch_size: Number of samples to render before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Example:
            >>> for current, target in renderer.render_progressive(100, batch_size=10):
            ...     print(f"Progress: {current}/{target} samples")
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if num_samples <= 0:
            return

        target_samples = self._sample_count + num_samples
        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            self._render_batch(batch)
            remaining -= batch
            yield (self._sample_count, target_samples)

    def get_image(self) -> npt.NDArray[np.float64]:
        """Get the current mean radiance, shape (height, width, 3), unclamped."""
        return self._buffer.resolve()

    def get_image_numpy(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the rendered image clamped to [0, 1] and optionally gamma corrected.

        Args:
            gamma: Gamma correction value. Default 1.0 (linear).
                Use 2.2 for sRGB display.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32.
        """
        from lumen2d.preview.display import apply_gamma

        return apply_gamma(self.get_image(), gamma)

    def get_image_uint8(self, gamma: float = 2.2) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array, rounded like PNG export."""
        from lumen2d.preview.export import image_to_uint8

        return image_to_uint8(self.get_image(), gamma=gamma)

    def save_image(self, filepath: str, gamma: float = 2.2) -> None:
        """Save the rendered image to a file.

        Args:
            filepath: Path to save the image (e.g., "output.png").
            gamma: Gamma correction value. Default 2.2 for sRGB.
        """
        from PIL import Image as PILImage

        pil_image = PILImage.fromarray(self.get_image_uint8(gamma=gamma))
        pil_image.save(filepath)
        logger.info(f"Saved {self.width}x{self.height} image to {filepath}")

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
