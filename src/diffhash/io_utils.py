"""I/O helpers for diffhash.

This module handles:
- decoding image files with Pillow and hashing them
- finding image files in folders
- formatting hashes for display
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from PIL import Image

from .hashing import compute_hash
from .signature import DEFAULT_SCALE, check_scale


logger = logging.getLogger(__name__)

# Common extensions in real-world photo pipelines. Add more if you need.
DEFAULT_EXTS = {
    ".jpg",
    ".jpeg",
    ".png",
    ".bmp",
    ".gif",
    ".tiff",
    ".tif",
    ".webp",
    ".jfif",
}

HASH_FORMATS = ("dec", "hex", "bin")


@dataclass(frozen=True)
class ImageHash:
    """A computed dHash for a specific image file path."""

    path: Path
    dhash: int
    scale: int = DEFAULT_SCALE


def iter_images(root: Path, exts: Sequence[str] = tuple(DEFAULT_EXTS)) -> Iterator[Path]:
    """Recursively yield image file paths under *root*.

    Parameters
    ----------
    root:
        Folder to scan.
    exts:
        File extensions to include. Compared case-insensitively.

    Yields
    ------
    Path
        Paths to image files, in sorted order.
    """

    root = root.expanduser().resolve()
    exts_lc = {e.lower() for e in exts}
    for folder, dirs, files in os.walk(root):
        dirs.sort()
        for name in sorted(files):
            if Path(name).suffix.lower() in exts_lc:
                yield Path(folder) / name


def expand_paths(paths: Iterable[Path]) -> List[Path]:
    """Replace folders in *paths* with the image files they contain.

    Files are kept as given, whatever their extension.
    """

    out: List[Path] = []
    for p in paths:
        p = p.expanduser()
        if p.is_dir():
            found = list(iter_images(p))
            logger.info("Found %d image(s) under %s", len(found), p)
            out.extend(found)
        elif p.exists():
            out.append(p)
        else:
            raise FileNotFoundError(f"No such file or folder: {p}")
    return out


def hash_file(path: Path, scale: int = DEFAULT_SCALE) -> ImageHash:
    """Decode an image file with Pillow and compute its dHash.

    Decoding errors (``OSError``, ``PIL.UnidentifiedImageError``) are not
    caught; they reach the caller unchanged.

    Parameters
    ----------
    path:
        Path to an image file.
    scale:
        Signature scale (8 gives a 64-bit hash).

    Returns
    -------
    ImageHash
        The hash together with its source path and scale.
    """

    with Image.open(path) as img:
        h = compute_hash(img, scale)
    logger.debug("Hashed %s", path)
    return ImageHash(path=Path(path), dhash=h, scale=scale)


def format_hash(value: int, fmt: str = "dec", scale: int = DEFAULT_SCALE) -> str:
    """Render a hash as decimal, zero-padded hex or zero-padded binary."""

    bits = check_scale(scale) ** 2
    if fmt == "dec":
        return str(value)
    if fmt == "hex":
        return format(value, f"0{-(-bits // 4)}x")
    if fmt == "bin":
        return format(value, f"0{bits}b")
    raise ValueError(f"Unknown format: {fmt!r}. Use dec|hex|bin.")
