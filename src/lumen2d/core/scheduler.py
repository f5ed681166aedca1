"""Parallel tile scheduler.

A render pass splits the image into disjoint tiles and submits one task per
tile to a thread pool. Each task owns its random generator and returns the
radiance sums of its tile; the scene is shared read-only. Waiting on every
future is the barrier: sums are merged into the PixelBuffer only after every
task has succeeded, so a failed pass leaves the buffer untouched.

Seeding is deterministic per tile: the generator of tile ``k`` in pass ``p``
is derived from ``SeedSequence(settings.seed, spawn_key=(p, k))``. Results do
not depend on the number of workers or on completion order, so a render with
one worker is bit-identical to a render with many.

Example:
    >>> from lumen2d.core.scheduler import render
    >>> from lumen2d.core.settings import RenderSettings
    >>> buffer = render(scene, RenderSettings(width=128, height=128), workers=4)
    >>> image = buffer.finalize()
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, wait

import numpy as np
import numpy.typing as npt

from lumen2d.core.buffer import PixelBuffer, Tile
from lumen2d.core.sampler import render_tile
from lumen2d.core.settings import RenderSettings
from lumen2d.scene.scene import Scene

logger = logging.getLogger(__name__)


def default_worker_count() -> int:
    """Get the default pool size (available hardware parallelism)."""
    return os.cpu_count() or 1


def tile_seed_sequence(seed: int, pass_index: int, tile: Tile) -> np.random.SeedSequence:
    """Derive the seed sequence owned by one tile of one pass."""
    return np.random.SeedSequence(seed, spawn_key=(pass_index, tile.index))


def _render_tile_task(
    scene: Scene,
    settings: RenderSettings,
    tile: Tile,
    samples: int,
    pass_index: int,
) -> npt.NDArray[np.float64]:
    rng = np.random.default_rng(tile_seed_sequence(settings.seed, pass_index, tile))
    sums = render_tile(scene, settings, tile, rng, samples)
    logger.debug(f"Pass {pass_index}: tile {tile.index} done ({tile.pixel_count} px)")
    return sums


def render_pass(
    scene: Scene,
    settings: RenderSettings,
    buffer: PixelBuffer,
    samples: int | None = None,
    pass_index: int = 0,
    workers: int | None = None,
) -> None:
    """Add ``samples`` samples to every pixel of the buffer.

    Args:
        scene: The scene to render (shared read-only by all workers).
        settings: Render settings.
        buffer: Destination buffer, sized settings.width x settings.height.
        samples: Samples per pixel for this pass. Defaults to
            settings.samples_per_pixel.
        pass_index: Index of the pass, mixed into every tile seed so that
            successive passes draw independent samples.
        workers: Thread pool size. Defaults to default_worker_count().

    Raises:
        ValueError: If the buffer does not match the settings, or samples or
            workers is not positive.
        RuntimeError: If the buffer is finalized.
        Exception: Any exception raised by a worker is re-raised here, after
            every task has finished. The buffer is then left unchanged.
    """
    if (buffer.width, buffer.height) != (settings.width, settings.height):
        raise ValueError(
            f"Buffer is {buffer.width}x{buffer.height}, settings ask for {settings.width}x{settings.height}"
        )
    if buffer.is_finalized:
        raise RuntimeError("Cannot render into a finalized buffer; call clear() first")
    if samples is None:
        samples = settings.samples_per_pixel
    if samples <= 0:
        raise ValueError(f"samples must be positive, got {samples}")
    if workers is None:
        workers = default_worker_count()
    if workers <= 0:
        raise ValueError(f"workers must be positive, got {workers}")

    tiles = buffer.tiles(settings.tile_size)
    logger.debug(f"Pass {pass_index}: {len(tiles)} tiles, {samples} spp, {workers} workers")

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="lumen2d") as executor:
        futures = [
            executor.submit(_render_tile_task, scene, settings, tile, samples, pass_index)
            for tile in tiles
        ]
        wait(futures)

    # Barrier passed: surface the first worker failure before touching the buffer
    results = [future.result() for future in futures]
    for tile, sums in zip(tiles, results):
        buffer.add_tile(tile, sums, samples)


def render(scene: Scene, settings: RenderSettings, workers: int | None = None) -> PixelBuffer:
    """Render a scene and return the finalized buffer.

    Args:
        scene: The scene to render.
        settings: Render settings.
        workers: Thread pool size. Defaults to default_worker_count().

    Returns:
        A finalized PixelBuffer of settings.width x settings.height.
    """
    logger.info(
        f"Rendering {settings.width}x{settings.height} at {settings.samples_per_pixel} spp "
        f"({len(scene)} objects, {len(scene.lights)} lights)"
    )
    start = time.perf_counter()

    buffer = PixelBuffer(settings.width, settings.height)
    render_pass(scene, settings, buffer, workers=workers)
    buffer.finalize()

    logger.info(f"Render finished in {time.perf_counter() - start:.2f}s")
    return buffer
