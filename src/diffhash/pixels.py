"""Pixel access for diffhash.

The hashing core never decodes files. It reads pixels through a tiny
capability, the *pixel accessor*:

- ``width`` and ``height`` attributes
- ``get(x, y)`` returning a tuple of channel intensities

Two accessors are provided: :class:`PixelGrid` for in-memory data and
:class:`PilPixelAccessor` for images decoded by Pillow.

Grayscale conversion
--------------------
:func:`luma` uses the ITU-R BT.601 weights (the ones Pillow documents for its
``"L"`` mode)::

    L = 0.299 R + 0.587 G + 0.114 B

Integer channels are kept as integers, so hashes don't depend on float
rounding and adding a constant to every channel shifts the luma by exactly
that constant.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, Tuple, Union, runtime_checkable

from PIL import Image

from .errors import InvalidImage


Intensity = Union[int, float]
Pixel = Tuple[Intensity, ...]

# Pillow modes whose pixels can be read as-is. Everything else (palette,
# CMYK, YCbCr, LAB, HSV, ...) is converted to RGB(A) once up front, except
# premultiplied modes, which Pillow only unpremultiplies to their own layout.
DIRECT_MODES = {"1", "L", "LA", "I", "I;16", "F", "RGB", "RGBA"}
PREMULTIPLIED_MODES = {"La": "LA", "RGBa": "RGBA"}


@runtime_checkable
class PixelAccessor(Protocol):
    """Read-only view over an image's pixels."""

    width: int
    height: int

    def get(self, x: int, y: int) -> Pixel:
        ...


def _as_tuple(px: Any) -> Pixel:
    return px if isinstance(px, tuple) else (px,)


def luma(pixel: Union[Pixel, Intensity]) -> Intensity:
    """Convert one pixel to a single gray intensity.

    Parameters
    ----------
    pixel:
        Channel tuple (``(L,)``, ``(L, A)``, ``(R, G, B)``, ``(R, G, B, A)``...)
        or a bare scalar for single-channel images.

    Returns
    -------
    int | float
        The gray value. Integer channels give an integer (rounded half up).
    """

    px = _as_tuple(pixel)
    if not px:
        raise InvalidImage("pixel has no channels")
    if len(px) < 3:
        # L or LA: alpha doesn't contribute to intensity.
        return px[0]

    r, g, b = px[:3]
    if isinstance(r, int) and isinstance(g, int) and isinstance(b, int):
        return (299 * r + 587 * g + 114 * b + 500) // 1000
    return 0.299 * r + 0.587 * g + 0.114 * b


class PixelGrid:
    """In-memory pixel accessor built from rows of pixels.

    ``rows[y][x]`` is the pixel at ``(x, y)``. Pixels may be scalars or tuples.
    """

    def __init__(self, rows: Sequence[Sequence[Any]]):
        self._rows = [list(r) for r in rows]
        self.height = len(self._rows)
        self.width = len(self._rows[0]) if self._rows else 0
        if any(len(r) != self.width for r in self._rows):
            raise InvalidImage("pixel rows have unequal lengths")

    def get(self, x: int, y: int) -> Pixel:
        return _as_tuple(self._rows[y][x])

    def __repr__(self) -> str:
        return f"PixelGrid(width={self.width}, height={self.height})"


class PilPixelAccessor:
    """Pixel accessor over a decoded :class:`PIL.Image.Image`."""

    def __init__(self, image: Image.Image):
        if image.mode not in DIRECT_MODES:
            target = PREMULTIPLIED_MODES.get(image.mode)
            if target is None:
                target = "RGBA" if "transparency" in image.info else "RGB"
            image = image.convert(target)
        self.image = image
        self.width, self.height = image.size
        self._access = None

    def get(self, x: int, y: int) -> Pixel:
        if self._access is None:
            self._access = self.image.load()
        return _as_tuple(self._access[x, y])

    def __repr__(self) -> str:
        return f"PilPixelAccessor(mode={self.image.mode!r}, size={self.image.size})"


def as_pixel_accessor(image: Any) -> PixelAccessor:
    """Return a pixel accessor for *image*.

    Pillow images are wrapped in :class:`PilPixelAccessor`; objects that
    already provide ``width``, ``height`` and ``get`` are returned unchanged.
    """

    if isinstance(image, Image.Image):
        return PilPixelAccessor(image)
    if isinstance(image, PixelAccessor):
        return image
    raise TypeError(
        f"Unsupported image type: {type(image).__name__}. "
        "Pass a PIL image or an object with width, height and get(x, y)."
    )
