"""Exceptions raised by the downlink encode-and-verify chain."""

from __future__ import annotations


class EncodeError(ValueError):
    """Base class for shape and index failures inside the encoding chain."""


class LengthMismatchError(EncodeError):
    """Two operands of an elementwise operation differ in length."""


class ShapeMismatchError(EncodeError):
    """A vector, matrix or pattern disagrees with the shape implied by the parameters."""


class IndexOutOfRangeError(EncodeError, IndexError):
    """A gather pattern references an index outside the source vector."""


class ArityMismatchError(EncodeError):
    """A scatter mask has a different number of active positions than values."""


__all__ = [
    "EncodeError",
    "LengthMismatchError",
    "ShapeMismatchError",
    "IndexOutOfRangeError",
    "ArityMismatchError",
]
