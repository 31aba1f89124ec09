"""CRC utilities: polynomial-division reference, generator matrix, and the CRC/scramble/attach stages."""

from __future__ import annotations

import functools

import numpy as np

from ..errors import LengthMismatchError, ShapeMismatchError
from .gf2 import as_matrix, concat, dot_mod2, ones, xor, zeros


def _poly_to_bits(poly: str) -> np.ndarray:
    if not poly:
        raise ValueError("CRC polynomial string must be non-empty")
    value = int(poly, 16)
    bit_length = value.bit_length()
    bits = [(value >> i) & 1 for i in reversed(range(bit_length))]
    return np.array(bits, dtype=np.int8)


def crc_degree(poly: str) -> int:
    return _poly_to_bits(poly).size - 1


def _remainder(msg_bits: np.ndarray, poly_bits: np.ndarray) -> np.ndarray:
    degree = poly_bits.size - 1
    buffer = np.concatenate([msg_bits, np.zeros(degree, dtype=np.int8)])
    for i in range(msg_bits.size):
        if buffer[i] == 0:
            continue
        buffer[i : i + degree + 1] ^= poly_bits
    return buffer[-degree:]


def attach_crc(msg_bits: np.ndarray, poly: str) -> np.ndarray:
    """Append CRC parity bits to `msg_bits` using the given hex polynomial (zero initial state)."""

    msg_bits = np.asarray(msg_bits)
    if msg_bits.ndim != 1:
        raise ValueError("msg_bits must be a 1D array")
    msg_bits = msg_bits.astype(np.int8) & 1
    poly_bits = _poly_to_bits(poly)
    if poly_bits.size - 1 <= 0:
        raise ValueError("Polynomial degree must be positive")
    return np.concatenate([msg_bits, _remainder(msg_bits, poly_bits)])


def check_crc(msg_with_crc: np.ndarray, poly: str) -> bool:
    """Return True if `msg_with_crc` satisfies the CRC checksum."""

    msg_with_crc = np.asarray(msg_with_crc)
    if msg_with_crc.ndim != 1:
        raise ValueError("msg_with_crc must be a 1D array")
    msg_with_crc = msg_with_crc.astype(np.int8) & 1
    poly_bits = _poly_to_bits(poly)
    degree = poly_bits.size - 1
    if msg_with_crc.size <= degree:
        raise ValueError("Message too short for the provided CRC polynomial")

    buffer = msg_with_crc.copy()
    for i in range(msg_with_crc.size - degree):
        if buffer[i] == 0:
            continue
        buffer[i : i + degree + 1] ^= poly_bits
    return not buffer[-degree:].any()


@functools.lru_cache(maxsize=None)
def _generator_rows(poly: str, K: int) -> tuple:
    poly_bits = _poly_to_bits(poly)
    rows = []
    for i in range(K):
        unit = np.zeros(K, dtype=np.int8)
        unit[i] = 1
        rows.append(tuple(_remainder(unit, poly_bits)))
    return tuple(rows)


def crc_generator_matrix(poly: str, K: int) -> np.ndarray:
    """Return the K x P matrix whose row i is the CRC of the i-th unit vector of length K.

    ``dot_mod2(msg, G)`` then equals the polynomial-division CRC of ``msg``.
    """

    if K <= 0:
        raise ShapeMismatchError("K must be positive")
    return as_matrix(_generator_rows(poly, K), name="crc_gen_matrix")


def rnti_to_bits(rnti: int, width: int = 16) -> np.ndarray:
    """MSB-first binary expansion of an identifier."""

    if rnti < 0 or rnti >= (1 << width):
        raise ValueError(f"rnti {rnti} does not fit in {width} bits")
    bits = [(rnti >> i) & 1 for i in reversed(range(width))]
    return np.array(bits, dtype=np.int8)


def compute_crc(info_bits: np.ndarray, crc_gen_matrix: np.ndarray) -> np.ndarray:
    """CRC of `info_bits` with an all-ones register, via the K x P generator matrix."""

    K, P = crc_gen_matrix.shape
    if K != info_bits.size + P:
        raise ShapeMismatchError(
            f"crc_gen_matrix has {K} rows, expected A + P = {info_bits.size + P}"
        )
    return dot_mod2(concat(ones(P), info_bits), crc_gen_matrix)


def scramble_crc(crc_bits: np.ndarray, rnti_bits: np.ndarray) -> np.ndarray:
    """XOR the trailing CRC bits with the left-zero-padded identifier."""

    P = crc_bits.size
    if rnti_bits.size > P:
        raise LengthMismatchError(f"rnti_bits has {rnti_bits.size} bits, CRC only {P}")
    padded = concat(zeros(P - rnti_bits.size), rnti_bits)
    return xor(crc_bits, padded)


def attach_scrambled_crc(info_bits: np.ndarray, scr_bits: np.ndarray) -> np.ndarray:
    return concat(info_bits, scr_bits)


__all__ = [
    "crc_degree",
    "attach_crc",
    "check_crc",
    "crc_generator_matrix",
    "rnti_to_bits",
    "compute_crc",
    "scramble_crc",
    "attach_scrambled_crc",
]
