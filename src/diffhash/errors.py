"""Exceptions raised by diffhash."""

from __future__ import annotations


class DiffHashError(Exception):
    """Base class for diffhash errors."""


class InvalidImage(DiffHashError, ValueError):
    """The source image can't be reduced to a signature grid.

    Raised for images with a zero width or height, ragged in-memory pixel
    rows, or pixels that carry no channel at all.
    """


class InvalidGridShape(DiffHashError, AssertionError):
    """The hash extractor was handed a grid that isn't ``(scale + 1) x scale``.

    Grids built by :func:`diffhash.signature.reduce` always have the right
    shape, so this signals a composition bug rather than bad user input.
    """
