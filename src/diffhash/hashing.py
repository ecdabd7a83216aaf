"""Hashing utilities for diffhash.

diffhash uses a perceptual **difference hash** (dHash) to represent an image as
a ``scale * scale``-bit fingerprint (64 bits for the default scale of 8). It is
robust to resizing, aspect ratio changes and brightness/contrast shifts.

Implementation notes
--------------------
The dHash algorithm:

1) Convert to grayscale
2) Resize to (scale+1) x scale pixels, nearest-neighbor
3) Compare adjacent pixels horizontally, column by column:
   for each column i, for each row j, set bit=1 if pixel[i][j] > pixel[i+1][j]
4) Bit k (k = i * scale + j) is ``1 << k``, so column 0 / row 0 is the LSB

The comparison is strict: equal neighbors give 0. Hashes are only comparable
when they were produced with the same scale.

The Hamming distance between two hashes is the number of different bits.
Smaller distance => more visually similar.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .errors import InvalidGridShape
from .signature import DEFAULT_SCALE, GrayscaleGrid, reduce


logger = logging.getLogger(__name__)


def extract(grid: GrayscaleGrid, scale: Optional[int] = None) -> int:
    """Extract the difference hash from a signature grid.

    Parameters
    ----------
    grid:
        A ``(scale + 1) x scale`` grid, as built by :func:`diffhash.signature.reduce`.
    scale:
        Expected scale. Defaults to the grid height.

    Returns
    -------
    int
        Hash with ``scale * scale`` meaningful bits.
    """

    if scale is None:
        scale = grid.height
    if scale < 1 or grid.width != scale + 1 or any(len(c) != scale for c in grid.columns):
        raise InvalidGridShape(
            f"expected a {scale + 1}x{scale} grid, got {grid.width}x{grid.height}"
        )

    h = 0
    bit = 0
    for i in range(scale):
        left = grid[i]
        right = grid[i + 1]
        for j in range(scale):
            if left[j] > right[j]:
                h |= 1 << bit
            bit += 1
    return h


def compute_hash(image: Any, scale: int = DEFAULT_SCALE) -> int:
    """Compute the difference hash of an image.

    *image* is a pixel accessor or a Pillow image. Raises
    :class:`~diffhash.errors.InvalidImage` for images with a zero dimension.
    """

    h = extract(reduce(image, scale), scale)
    logger.debug("dhash (scale=%d): %d", scale, h)
    return h


def hamming_distance(a: int, b: int) -> int:
    """Compute the Hamming distance between two hashes.

    This is the number of different bits in ``a`` and ``b``.

    Parameters
    ----------
    a, b:
        Hashes as integers.

    Returns
    -------
    int
        Number of differing bits.
    """

    return (a ^ b).bit_count()


compare = hamming_distance


def is_similar(a: int, b: int, max_distance: int) -> bool:
    """Return True if two hashes are at most *max_distance* bits apart."""
    return hamming_distance(a, b) <= max_distance
