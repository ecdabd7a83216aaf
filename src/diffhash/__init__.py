"""diffhash package.

This package computes a perceptual dHash (difference hash) of an image and the
Hamming distance between two hashes, to spot near-duplicate images across
resizes and brightness/contrast changes. It also ships a small CLI.
"""

from .errors import DiffHashError, InvalidGridShape, InvalidImage
from .hashing import compare, compute_hash, extract, hamming_distance, is_similar
from .pixels import PilPixelAccessor, PixelAccessor, PixelGrid, luma
from .signature import DEFAULT_SCALE, GrayscaleGrid, reduce

__all__ = [
    "DEFAULT_SCALE",
    "DiffHashError",
    "GrayscaleGrid",
    "InvalidGridShape",
    "InvalidImage",
    "PilPixelAccessor",
    "PixelAccessor",
    "PixelGrid",
    "compare",
    "compute_hash",
    "extract",
    "hamming_distance",
    "is_similar",
    "luma",
    "reduce",
]
__version__ = "0.1.0"
