"""Pixel buffer and tile partitioning.

The PixelBuffer stores, for every pixel, the running sum of sample radiance
and the number of samples taken. The scheduler adds whole tiles of sums at
once after every worker of a pass has finished; tiles never overlap, so each
cell receives exactly one contribution per pass.

Resolving divides sums by counts and sanitises the result (NaN, Inf and
negative values become zero) in a Taichi kernel. Finalizing resolves once and
freezes the buffer: further writes raise RuntimeError.

Example:
    >>> from lumen2d.core.buffer import PixelBuffer
    >>> buffer = PixelBuffer(64, 48)
    >>> for tile in buffer.tiles(16):
    ...     buffer.add_tile(tile, sums_for(tile), samples=8)
    >>> image = buffer.finalize()  # shape (48, 64, 3)
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from lumen2d.core.backend import init_taichi
from lumen2d.core.settings import DEFAULT_TILE_SIZE
from lumen2d.core.spectrum import CHANNELS, Spectrum


@dataclass(frozen=True, slots=True)
class Tile:
    """A rectangular block of pixels, [x0, x1) x [y0, y1).

    Attributes:
        index: Stable position of the tile in row-major tile order.
        x0: First column.
        y0: First row.
        x1: One past the last column.
        y1: One past the last row.
    """

    index: int
    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


def make_tiles(width: int, height: int, tile_size: int = DEFAULT_TILE_SIZE) -> list[Tile]:
    """Partition a width x height image into disjoint tiles covering every pixel.

    Tiles on the right and bottom edges are clipped to the image.

    Raises:
        ValueError: If tile_size is not positive.
    """
    if tile_size <= 0:
        raise ValueError(f"tile_size must be positive, got {tile_size}")
    tiles = []
    for y0 in range(0, height, tile_size):
        for x0 in range(0, width, tile_size):
            tiles.append(
                Tile(
                    index=len(tiles),
                    x0=x0,
                    y0=y0,
                    x1=min(x0 + tile_size, width),
                    y1=min(y0 + tile_size, height),
                )
            )
    return tiles


# =============================================================================
# Resolve Kernel
# =============================================================================


@ti.kernel
def _resolve_kernel(
    sums: ti.types.ndarray(dtype=ti.f64, ndim=3),
    counts: ti.types.ndarray(dtype=ti.i32, ndim=2),
    out: ti.types.ndarray(dtype=ti.f64, ndim=3),
):
    """Average accumulated sums and zero out invalid values.

    Args:
        sums: Per-pixel radiance sums, shape (height, width, 3).
        counts: Per-pixel sample counts, shape (height, width).
        out: Output averages, same shape as sums.
    """
    for i, j in ti.ndrange(counts.shape[0], counts.shape[1]):
        n = counts[i, j]
        for c in ti.static(range(3)):
            value = ti.f64(0.0)
            if n > 0:
                value = sums[i, j, c] / ti.cast(n, ti.f64)

            # Check for NaN/Inf and replace with zero
            if tm.isnan(value) or tm.isinf(value) or value < 0.0:
                value = 0.0
            out[i, j, c] = value


# =============================================================================
# Pixel Buffer
# =============================================================================


class PixelBuffer:
    """Accumulates per-pixel radiance sums and sample counts.

    Cells are indexed by (column, row); the backing arrays are row-major,
    shape (height, width, CHANNELS).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Allocate an empty buffer.

        Raises:
            ValueError: If either dimension is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._sums = np.zeros((height, width, CHANNELS), dtype=np.float64)
        self._counts = np.zeros((height, width), dtype=np.int32)
        self._final: npt.NDArray[np.float64] | None = None

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self._height, self._width, CHANNELS)

    @property
    def is_finalized(self) -> bool:
        return self._final is not None

    @property
    def counts(self) -> npt.NDArray[np.int32]:
        """Get a copy of the per-pixel sample counts, shape (height, width)."""
        return self._counts.copy()

    def tiles(self, tile_size: int = DEFAULT_TILE_SIZE) -> list[Tile]:
        return make_tiles(self._width, self._height, tile_size)

    def _check_writable(self) -> None:
        if self._final is not None:
            raise RuntimeError("PixelBuffer is finalized. Call clear() before adding samples.")

    def add_sample(self, col: int, row: int, value: Spectrum) -> None:
        """Add one sample's radiance to a pixel.

        Raises:
            RuntimeError: If the buffer has been finalized.
            IndexError: If the pixel is outside the buffer.
        """
        self._check_writable()
        if not (0 <= col < self._width and 0 <= row < self._height):
            raise IndexError(f"Pixel ({col}, {row}) outside {self._width}x{self._height} buffer")
        self._sums[row, col] += value
        self._counts[row, col] += 1

    def add_tile(self, tile: Tile, sums: npt.NDArray[np.float64], samples: int) -> None:
        """Add the sample sums of a whole tile.

        Args:
            tile: The tile the sums belong to.
            sums: Radiance sums, shape (tile.height, tile.width, CHANNELS).
            samples: Number of samples summed into every pixel of the tile.

        Raises:
            RuntimeError: If the buffer has been finalized.
            ValueError: If the sums do not match the tile shape.
        """
        self._check_writable()
        expected = (tile.height, tile.width, CHANNELS)
        if sums.shape != expected:
            raise ValueError(f"Tile {tile.index} sums have shape {sums.shape}, expected {expected}")
        self._sums[tile.y0 : tile.y1, tile.x0 : tile.x1] += sums
        self._counts[tile.y0 : tile.y1, tile.x0 : tile.x1] += samples

    def resolve(self) -> npt.NDArray[np.float64]:
        """Compute the per-pixel mean radiance.

        Returns:
            A new array of shape (height, width, CHANNELS). Pixels without
            samples, and invalid values, are zero. Values are not clamped.
        """
        if self._final is not None:
            return self._final.copy()
        init_taichi()
        out = np.zeros_like(self._sums)
        _resolve_kernel(self._sums, self._counts, out)
        return out

    def finalize(self) -> npt.NDArray[np.float64]:
        """Resolve the buffer and freeze it.

        Calling finalize() again returns the same (read-only) array.
        """
        if self._final is None:
            final = self.resolve()
            final.setflags(write=False)
            self._final = final
        return self._final

    def pixel(self, col: int, row: int) -> Spectrum:
        """Get the resolved radiance of one pixel."""
        if not (0 <= col < self._width and 0 <= row < self._height):
            raise IndexError(f"Pixel ({col}, {row}) outside {self._width}x{self._height} buffer")
        image = self._final if self._final is not None else self.resolve()
        return image[row, col].copy()

    def total_energy(self) -> float:
        """Sum the resolved radiance over every pixel and channel."""
        image = self._final if self._final is not None else self.resolve()
        return float(image.sum())

    def clear(self) -> None:
        """Reset every sum and count and unfreeze the buffer."""
        self._sums.fill(0.0)
        self._counts.fill(0)
        self._final = None

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self._width}, height={self._height}, finalized={self.is_finalized})"
