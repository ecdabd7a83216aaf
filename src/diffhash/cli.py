"""diffhash CLI.

This is the entry point used by:
- `python -m diffhash`
- the console script `diffhash` (installed via pyproject.toml)

Example
-------
diffhash photo.jpg
diffhash photo.jpg resized.jpg
diffhash photo.jpg "/data/candidates" --max-distance 5 --progress

The first image is hashed and printed. Every further image (folders are
scanned recursively) is hashed, printed, and compared with the first one.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import UnidentifiedImageError
from tqdm import tqdm

from .hashing import hamming_distance, is_similar
from .io_utils import HASH_FORMATS, ImageHash, expand_paths, format_hash, hash_file
from .signature import DEFAULT_SCALE


logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "DIFFHASH_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return n


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    p = argparse.ArgumentParser(
        prog="diffhash",
        description=(
            "Print the perceptual dHash (difference hash) of an image and, optionally, "
            "its Hamming distance to other images."
        ),
    )
    p.add_argument("input", type=Path, help="Image to hash.")
    p.add_argument(
        "compare",
        nargs="*",
        type=Path,
        help="Images (or folders, scanned recursively) to compare with INPUT.",
    )
    p.add_argument(
        "--scale",
        type=_positive_int,
        default=DEFAULT_SCALE,
        help=f"Signature size; the hash has scale*scale bits (default: {DEFAULT_SCALE}).",
    )
    p.add_argument(
        "--format",
        choices=HASH_FORMATS,
        default="dec",
        help="How to print hashes (default: dec).",
    )
    p.add_argument(
        "--max-distance",
        type=int,
        default=None,
        help="Label each comparison as similar/different using this Hamming distance threshold.",
    )
    p.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while hashing comparison images.",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help=f"More logging (-v info, -vv debug). Defaults to ${LOG_LEVEL_ENV} or WARNING.",
    )
    return p.parse_args(argv)


def _setup_logging(verbose: int) -> None:
    """Configure root logging from -v flags or the environment."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        name = os.environ.get(LOG_LEVEL_ENV, "WARNING")
        level = getattr(logging, name.upper(), logging.WARNING)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _hash_or_exit(path: Path, scale: int) -> ImageHash:
    """Hash one image, turning decode failures into a readable exit message."""
    try:
        return hash_file(path, scale)
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        raise SystemExit(f"Could not hash image {path}: {exc}") from exc


def _describe(h: ImageHash, fmt: str) -> str:
    return f"dhash for {h.path} is `{format_hash(h.dhash, fmt, h.scale)}`"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run diffhash.

    Returns
    -------
    int
        Process exit code (0 success).
    """
    args = _parse_args(argv)
    _setup_logging(args.verbose)

    input_path: Path = args.input.expanduser()
    if not input_path.is_file():
        raise SystemExit(f"INPUT must be an existing image file: {input_path}")

    try:
        compare_paths: List[Path] = expand_paths(args.compare)
    except FileNotFoundError as exc:
        raise SystemExit(str(exc)) from exc

    # Keep the progress bar intact while result lines are printed.
    emit = tqdm.write if args.progress else print

    base = _hash_or_exit(input_path, args.scale)
    emit(_describe(base, args.format))

    for p in tqdm(compare_paths, desc="Hashing", unit="img", disable=not args.progress):
        other = _hash_or_exit(p, args.scale)
        emit(_describe(other, args.format))

        line = f"distance is: {hamming_distance(base.dhash, other.dhash)}"
        if args.max_distance is not None:
            similar = is_similar(base.dhash, other.dhash, args.max_distance)
            line += " (similar)" if similar else " (different)"
        emit(line)

    logger.info("Compared %d image(s) with %s", len(compare_paths), base.path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
