"""GF(2) vector/matrix primitives on fixed-length read-only bit arrays."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from ..errors import (
    ArityMismatchError,
    EncodeError,
    IndexOutOfRangeError,
    LengthMismatchError,
    ShapeMismatchError,
)

BIT_DTYPE = np.int8
INDEX_DTYPE = np.int64


def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


def as_bits(values: Iterable[int], name: str = "bits") -> np.ndarray:
    """Return a read-only 1D int8 copy of `values`, which must be 0/1."""

    arr = np.array(values, dtype=np.int64)
    if arr.ndim != 1:
        raise ShapeMismatchError(f"{name} must be 1D, got shape {arr.shape}")
    if arr.size and (arr.min() < 0 or arr.max() > 1):
        raise EncodeError(f"{name} must contain only 0/1 values")
    return _freeze(arr.astype(BIT_DTYPE))


def as_matrix(values: Iterable[Iterable[int]], name: str = "matrix") -> np.ndarray:
    """Return a read-only 2D int8 copy of a binary matrix."""

    arr = np.array(values, dtype=np.int64)
    if arr.ndim != 2:
        raise ShapeMismatchError(f"{name} must be 2D, got shape {arr.shape}")
    if arr.size and (arr.min() < 0 or arr.max() > 1):
        raise EncodeError(f"{name} must contain only 0/1 values")
    return _freeze(arr.astype(BIT_DTYPE))


def as_pattern(values: Iterable[int], name: str = "pattern") -> np.ndarray:
    """Return a read-only 1D integer index/mask pattern."""

    arr = np.array(values, dtype=INDEX_DTYPE)
    if arr.ndim != 1:
        raise ShapeMismatchError(f"{name} must be 1D, got shape {arr.shape}")
    return _freeze(arr)


def zeros(n: int) -> np.ndarray:
    return _freeze(np.zeros(n, dtype=BIT_DTYPE))


def ones(n: int) -> np.ndarray:
    return _freeze(np.ones(n, dtype=BIT_DTYPE))


def xor(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Elementwise exclusive-or of two equal-length bit vectors."""

    a = np.asarray(a)
    b = np.asarray(b)
    if a.shape != b.shape:
        raise LengthMismatchError(f"xor operands differ in length: {a.size} != {b.size}")
    return _freeze(np.bitwise_xor(a.astype(BIT_DTYPE), b.astype(BIT_DTYPE)))


def dot_mod2(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Mod-2 product of a vector and a matrix (either order).

    ``dot_mod2(v, M)`` needs ``len(v) == rows(M)`` and returns ``cols(M)`` bits;
    ``dot_mod2(M, v)`` needs ``cols(M) == len(v)`` and returns ``rows(M)`` bits.
    Each output bit is the parity of the AND of ``v`` with one matrix column/row.
    """

    a = np.asarray(a)
    b = np.asarray(b)
    if a.ndim == 1 and b.ndim == 2:
        if a.size != b.shape[0]:
            raise ShapeMismatchError(
                f"vector length {a.size} does not match matrix rows {b.shape[0]}"
            )
    elif a.ndim == 2 and b.ndim == 1:
        if a.shape[1] != b.size:
            raise ShapeMismatchError(
                f"matrix columns {a.shape[1]} do not match vector length {b.size}"
            )
    else:
        raise ShapeMismatchError(
            f"dot_mod2 expects one vector and one matrix, got ndim {a.ndim} and {b.ndim}"
        )
    # integer AND-count, parity taken with & 1
    acc = a.astype(np.int64) @ b.astype(np.int64)
    return _freeze((acc & 1).astype(BIT_DTYPE))


def concat(*vectors: np.ndarray) -> np.ndarray:
    """Concatenate bit vectors in argument order."""

    if not vectors:
        return zeros(0)
    parts = []
    for vec in vectors:
        vec = np.asarray(vec)
        if vec.ndim != 1:
            raise ShapeMismatchError(f"concat operands must be 1D, got shape {vec.shape}")
        parts.append(vec.astype(BIT_DTYPE))
    return _freeze(np.concatenate(parts))


def gather(source: np.ndarray, pattern: np.ndarray) -> np.ndarray:
    """Return ``source[pattern[i]]`` for every i; out-of-range indices are errors."""

    source = np.asarray(source)
    pattern = np.asarray(pattern)
    if source.ndim != 1 or pattern.ndim != 1:
        raise ShapeMismatchError("gather expects 1D source and pattern")
    bad = np.flatnonzero((pattern < 0) | (pattern >= source.size))
    if bad.size:
        pos = int(bad[0])
        raise IndexOutOfRangeError(
            f"pattern[{pos}] = {int(pattern[pos])} outside [0, {source.size})"
        )
    return _freeze(source[pattern.astype(INDEX_DTYPE)].astype(BIT_DTYPE))


def scatter(mask: np.ndarray, values: np.ndarray) -> np.ndarray:
    """Place `values` at the positive entries of `mask`, in index order; zeros elsewhere."""

    mask = np.asarray(mask)
    values = np.asarray(values)
    if mask.ndim != 1 or values.ndim != 1:
        raise ShapeMismatchError("scatter expects 1D mask and values")
    active = mask > 0
    count = int(np.count_nonzero(active))
    if count != values.size:
        raise ArityMismatchError(
            f"mask has {count} active positions but {values.size} values were given"
        )
    out = np.zeros(mask.size, dtype=BIT_DTYPE)
    out[active] = values
    return _freeze(out)


def weight(bits: np.ndarray) -> int:
    """Number of ones in a bit vector."""

    return int(np.count_nonzero(np.asarray(bits)))


__all__ = [
    "as_bits",
    "as_matrix",
    "as_pattern",
    "zeros",
    "ones",
    "xor",
    "dot_mod2",
    "concat",
    "gather",
    "scatter",
    "weight",
]
