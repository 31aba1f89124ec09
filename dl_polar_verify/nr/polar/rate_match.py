"""NR polar rate matching: gather-pattern construction and the rate-matching stage."""

from __future__ import annotations

import numpy as np

from ...errors import ShapeMismatchError
from ...polar.gf2 import as_pattern, gather
from .interleaver import subblock_interleaver_pattern


def rate_match_mode(N: int, E: int, K: int) -> str:
    if E >= N:
        return "repeat"
    if K / E <= 7 / 16:
        return "puncture"
    return "shorten"


def rate_matching_pattern(N: int, E: int, K: int) -> np.ndarray:
    """Gather pattern of length E selecting encoded bits after sub-block interleaving.

    Repetition cycles through the interleaved block, puncturing drops its first
    N - E bits and shortening drops its last N - E bits.
    """

    if E <= 0:
        raise ShapeMismatchError("E must be positive")
    order = subblock_interleaver_pattern(N)
    mode = rate_match_mode(N, E, K)
    if mode == "repeat":
        selected = order[np.arange(E) % N]
    elif mode == "puncture":
        selected = order[N - E :]
    else:
        selected = order[:E]
    return as_pattern(selected, name="rate_matching_pattern")


def rate_match(enc_bits: np.ndarray, rate_matching_pattern: np.ndarray, E: int | None = None) -> np.ndarray:
    """Select E bits from the encoded block; repeated and omitted indices are allowed."""

    if E is not None and rate_matching_pattern.size != E:
        raise ShapeMismatchError(
            f"rate_matching_pattern has {rate_matching_pattern.size} entries, expected E={E}"
        )
    return gather(enc_bits, rate_matching_pattern)


__all__ = ["rate_match_mode", "rate_matching_pattern", "rate_match"]
