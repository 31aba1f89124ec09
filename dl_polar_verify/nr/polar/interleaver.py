"""5G NR interleaver patterns (CRC bit interleaver, sub-block interleaver) and the CRC interleaving stage."""

from __future__ import annotations

import numpy as np

from ...errors import ShapeMismatchError
from ...polar.gf2 import as_pattern, gather

_K_MAX_IL = 164
_SUBBLOCK_COUNT = 32

# TS 38.212 Table 5.3.1.1-1
_CRC_INTERLEAVER_MAX = np.array(
    [
        0, 2, 4, 7, 9, 14, 19, 20, 24, 25, 26, 28, 31, 34, 42, 45, 49, 50, 51, 53, 54, 56, 58, 59,
        61, 62, 65, 66, 67, 69, 70, 71, 72, 76, 77, 81, 82, 83, 87, 88, 89, 91, 93, 95, 98, 101,
        104, 106, 108, 110, 111, 113, 115, 118, 119, 120, 122, 123, 126, 127, 129, 132, 134, 138,
        139, 140, 1, 3, 5, 8, 10, 15, 21, 27, 29, 32, 35, 43, 46, 52, 55, 57, 60, 63, 68, 73, 78,
        84, 90, 92, 94, 96, 99, 102, 105, 107, 109, 112, 114, 116, 121, 124, 128, 130, 133, 135,
        141, 6, 11, 16, 22, 30, 33, 36, 44, 47, 64, 74, 79, 85, 97, 100, 103, 117, 125, 131, 136,
        142, 12, 17, 23, 37, 48, 75, 80, 86, 137, 143, 13, 18, 38, 144, 39, 145, 40, 146, 41,
        147, 148, 149, 150, 151, 152, 153, 154, 155, 156, 157, 158, 159, 160, 161, 162, 163,
    ],
    dtype=np.int64,
)

# TS 38.212 Table 5.4.1.1-1
_SUBBLOCK_INTERLEAVER = np.array(
    [
        0, 1, 2, 4, 3, 5, 6, 7, 8, 16, 9, 17, 10, 18, 11, 19,
        12, 20, 13, 21, 14, 22, 15, 23, 24, 25, 26, 28, 27, 29, 30, 31,
    ],
    dtype=np.int64,
)


def crc_interleaver_pattern(K: int, enabled: bool = True) -> np.ndarray:
    """Gather pattern of length K for the CRC bit interleaver.

    With ``enabled=False`` the identity pattern is returned (no input interleaving).
    """

    if K <= 0:
        raise ShapeMismatchError("K must be positive")
    if not enabled:
        return as_pattern(np.arange(K), name="crc_interleaver_pattern")
    if K > _K_MAX_IL:
        raise ShapeMismatchError(f"CRC interleaver supports K <= {_K_MAX_IL}, got {K}")
    offset = _K_MAX_IL - K
    kept = _CRC_INTERLEAVER_MAX[_CRC_INTERLEAVER_MAX >= offset]
    return as_pattern(kept - offset, name="crc_interleaver_pattern")


def subblock_interleaver_pattern(N: int) -> np.ndarray:
    """Gather pattern of length N for the rate-matching sub-block interleaver."""

    if N < _SUBBLOCK_COUNT or (N & (N - 1)) != 0:
        raise ShapeMismatchError(f"sub-block interleaver needs N >= 32 and a power of two, got {N}")
    block = N // _SUBBLOCK_COUNT
    n = np.arange(N)
    order = _SUBBLOCK_INTERLEAVER[(_SUBBLOCK_COUNT * n) // N] * block + (n % block)
    return as_pattern(order, name="subblock_interleaver_pattern")


def crc_interleave(info_crc_bits: np.ndarray, crc_interleaver_pattern: np.ndarray) -> np.ndarray:
    """Reorder the K info+CRC bits so CRC bits are spread across the block."""

    if crc_interleaver_pattern.size != info_crc_bits.size:
        raise ShapeMismatchError(
            f"crc_interleaver_pattern has {crc_interleaver_pattern.size} entries, expected {info_crc_bits.size}"
        )
    return gather(info_crc_bits, crc_interleaver_pattern)


__all__ = ["crc_interleaver_pattern", "subblock_interleaver_pattern", "crc_interleave"]
