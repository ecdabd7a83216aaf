"""Signature image construction.

The signature image is the small grayscale grid the hash is read from: for a
scale of ``N`` it is ``N + 1`` pixels wide and ``N`` pixels tall. The extra
column supplies the right-hand neighbor for the last column of comparisons.

Resampling is nearest-neighbor with center sampling: destination index ``d``
out of ``dst`` reads source index ``((2 * d + 1) * src) // (2 * dst)``. No
blending happens, so gradient edges stay sharp and the result is exact.
Because no pixels are blended, only the sampled pixels are converted to gray.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from .errors import InvalidImage
from .pixels import Intensity, as_pixel_accessor, luma


logger = logging.getLogger(__name__)

DEFAULT_SCALE = 8


@dataclass(frozen=True)
class GrayscaleGrid:
    """Immutable grid of gray intensities, stored column by column.

    ``grid[i][j]`` is the intensity at column ``i``, row ``j``.
    """

    columns: Tuple[Tuple[Intensity, ...], ...]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Intensity]]) -> "GrayscaleGrid":
        """Build a grid from row-major data (``rows[y][x]``)."""
        return cls(columns=tuple(zip(*rows)))

    @property
    def width(self) -> int:
        return len(self.columns)

    @property
    def height(self) -> int:
        return len(self.columns[0]) if self.columns else 0

    def __getitem__(self, x: int) -> Tuple[Intensity, ...]:
        return self.columns[x]


def check_scale(scale: int) -> int:
    """Validate a signature scale and return it."""
    if isinstance(scale, bool) or not isinstance(scale, int) or scale < 1:
        raise ValueError(f"scale must be a positive integer, got {scale!r}")
    return scale


def nearest_indices(src: int, dst: int) -> List[int]:
    """Source indices picked by nearest-neighbor resampling from *src* to *dst* samples."""
    return [((2 * d + 1) * src) // (2 * dst) for d in range(dst)]


def reduce(image: Any, scale: int = DEFAULT_SCALE) -> GrayscaleGrid:
    """Reduce *image* to a ``(scale + 1) x scale`` grayscale signature grid.

    Parameters
    ----------
    image:
        A pixel accessor or a Pillow image.
    scale:
        Grid height; the width is ``scale + 1``.

    Returns
    -------
    GrayscaleGrid
        A freshly built grid.

    Raises
    ------
    InvalidImage
        If the image has a zero width or height.
    """

    check_scale(scale)
    px = as_pixel_accessor(image)
    if px.width <= 0 or px.height <= 0:
        raise InvalidImage(f"cannot reduce a {px.width}x{px.height} image")

    xs = nearest_indices(px.width, scale + 1)
    ys = nearest_indices(px.height, scale)
    logger.debug("Reducing %dx%d image to %dx%d", px.width, px.height, scale + 1, scale)

    return GrayscaleGrid(
        columns=tuple(tuple(luma(px.get(x, y)) for y in ys) for x in xs)
    )
