#!/usr/bin/env python3
"""Render one of the preset 2D scenes.

Builds a preset scene, renders it progressively with the tile scheduler and
saves a tone-mapped PNG.

Usage:
    python examples/render_scene.py [options]

Options:
    --scene NAME        Preset to render: lens, absorbing, mirror (default: lens)
    --width WIDTH       Image width in pixels (default: 256)
    --height HEIGHT     Image height in pixels (default: 256)
    --samples SAMPLES   Samples per pixel (default: 64)
    --batch-size SIZE   Samples per progress update (default: 16)
    --workers N         Worker threads (default: CPU count)
    --seed SEED         Root random seed (default: 0)
    --output OUTPUT     Output file path (default: <scene>.png)
    --verbose           Log per-pass details

Example:
    python examples/render_scene.py --scene mirror --samples 128
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from lumen2d.core.backend import init_taichi
from lumen2d.core.progressive import ProgressiveRenderer
from lumen2d.core.settings import RenderSettings
from lumen2d.preview.export import save_png
from lumen2d.scene.presets import PRESETS, create_preset

logger = logging.getLogger("render_scene")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a preset 2D scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--scene", choices=sorted(PRESETS), default="lens", help="Preset to render (default: lens)")
    parser.add_argument("--width", type=int, default=256, help="Image width in pixels (default: 256)")
    parser.add_argument("--height", type=int, default=256, help="Image height in pixels (default: 256)")
    parser.add_argument("--samples", type=int, default=64, help="Samples per pixel (default: 64)")
    parser.add_argument("--batch-size", type=int, default=16, help="Samples per progress update (default: 16)")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads (default: CPU count)")
    parser.add_argument("--seed", type=int, default=0, help="Root random seed (default: 0)")
    parser.add_argument("--output", type=str, default=None, help="Output file path (default: <scene>.png)")
    parser.add_argument("--verbose", action="store_true", help="Log per-pass details")
    return parser.parse_args()


def render_scene(
    scene_name: str,
    settings: RenderSettings,
    num_samples: int,
    batch_size: int,
    output_path: Path,
    workers: int | None = None,
) -> Path:
    """Render a preset and save it.

    Returns:
        Path to the saved image file.
    """
    scene = create_preset(scene_name)
    renderer = ProgressiveRenderer(scene, settings, workers=workers)
    start_time = time.perf_counter()

    def progress_callback(current: int, target: int) -> None:
        elapsed = time.perf_counter() - start_time
        rate = current / elapsed if elapsed > 0 else 0.0
        logger.info(f"{current}/{target} spp ({100.0 * current / target:.0f}%), {rate:.1f} spp/s")

    renderer.render(num_samples=num_samples, batch_size=batch_size, callback=progress_callback)
    save_png(renderer, output_path, tone_map="reinhard", gamma=2.2)
    logger.info(f"Saved {output_path.absolute()} in {time.perf_counter() - start_time:.2f}s")
    return output_path


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = RenderSettings(
            width=args.width,
            height=args.height,
            samples_per_pixel=args.samples,
            seed=args.seed,
        )
        init_taichi()
        render_scene(
            args.scene,
            settings,
            num_samples=args.samples,
            batch_size=args.batch_size,
            output_path=Path(args.output or f"{args.scene}.png"),
            workers=args.workers,
        )
        return 0
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
