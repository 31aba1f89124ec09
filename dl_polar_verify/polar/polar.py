"""Polar code core: construction, generator matrix, frozen-bit insertion and encoding."""

from __future__ import annotations

import functools
import math

import numpy as np

from ..errors import ShapeMismatchError
from .gf2 import as_bits, as_matrix, as_pattern, dot_mod2, scatter

_KERNEL = np.array([[1, 0], [1, 1]], dtype=np.int8)

# ------------------------------
# Helper functions
# ------------------------------

def _check_power_of_two(n: int) -> None:
    if n <= 0 or (n & (n - 1)) != 0:
        raise ShapeMismatchError("N must be a power of two")


def polar_transform(u: np.ndarray) -> np.ndarray:
    """Apply the Arikan polar transform (non-systematic), equal to ``u @ F^{(x)n} mod 2``."""

    u = np.asarray(u)
    _check_power_of_two(u.size)
    n = int(math.log2(u.size))
    x = u.astype(np.int8).copy()
    for stage in range(n):
        step = 1 << stage
        block = step << 1
        for start in range(0, x.size, block):
            left = slice(start, start + step)
            right = slice(start + step, start + block)
            x[left] ^= x[right]
    return as_bits(x, name="polar_transform")


@functools.lru_cache(maxsize=None)
def _kron_power(N: int) -> tuple:
    G = np.ones((1, 1), dtype=np.int8)
    while G.shape[0] < N:
        G = np.kron(G, _KERNEL)
    return tuple(map(tuple, G))


def polar_generator_matrix(N: int) -> np.ndarray:
    """Return the N x N Kronecker power of the kernel [[1, 0], [1, 1]]."""

    _check_power_of_two(N)
    return as_matrix(_kron_power(N), name="enc_gen_matrix")


def _polarization_weights(N: int) -> np.ndarray:
    n = int(math.log2(N))
    weights = np.zeros(N, dtype=float)
    for idx in range(N):
        w = 0.0
        bits = idx
        for j in range(n):
            if bits & 1:
                w += 2 ** (j / 4.0)
            bits >>= 1
        weights[idx] = w
    return weights


def _phi_inv(x: float) -> float:
    if x > 12.0:
        return 0.9861 * x - 2.3152
    if x > 3.5:
        return x * (0.009005 * x + 0.7694) - 0.9507
    if x > 1.0:
        return x * (0.062883 * x + 0.3678) - 0.1627
    return x * (0.2202 * x + 0.06448)


def _gaussian_pe(N: int, K: int, design_snr_db: float) -> np.ndarray:
    rate = K / N
    snr = 10 ** (design_snr_db / 10.0)
    sigma_sq = 1.0 / (2.0 * rate * snr)

    m = np.zeros(N, dtype=float)
    m[0] = 2.0 / sigma_sq
    stages = int(math.log2(N))
    for level in range(1, stages + 1):
        B = 1 << level
        half = B >> 1
        for j in range(half):
            T = m[j]
            m[j] = _phi_inv(T)
            m[half + j] = 2.0 * T

    # Mean LLR to error probability via Q-function approximation.
    pe = np.zeros_like(m)
    for i in range(N):
        val = max(m[i], 1e-12)
        pe[i] = 0.5 - 0.5 * math.erf(math.sqrt(val) / 2.0)
    return pe


@functools.lru_cache(maxsize=None)
def construct_info_set(N: int, K: int, method: str = "gaussian", design_snr_db: float = 2.5) -> np.ndarray:
    """Return sorted indices of the information set for an (N, K) polar code."""

    _check_power_of_two(N)
    if not (0 < K <= N):
        raise ShapeMismatchError("K must satisfy 0 < K <= N")

    if method == "polarization":
        metric = -_polarization_weights(N)
        order = np.argsort(metric, kind="stable")
    elif method == "gaussian":
        pe = _gaussian_pe(N, K, design_snr_db)
        order = np.argsort(pe, kind="stable")
    else:
        raise ValueError(f"Unsupported construction method: {method}")

    info_idx = np.sort(order[:K])
    return as_pattern(info_idx, name="info_set")


def info_bit_pattern(N: int, K: int, method: str = "gaussian", design_snr_db: float = 2.5) -> np.ndarray:
    """0/1 mask of length N with ones on the K most reliable positions."""

    mask = np.zeros(N, dtype=np.int64)
    mask[construct_info_set(N, K, method, design_snr_db)] = 1
    return as_pattern(mask, name="info_bit_pattern")


# ------------------------------
# Pipeline stages
# ------------------------------

def insert_frozen_bits(intrl_bits: np.ndarray, info_bit_pattern: np.ndarray) -> np.ndarray:
    """Place `intrl_bits` on the positive mask entries; all other positions are frozen to zero."""

    return scatter(info_bit_pattern, intrl_bits)


def polar_encode(frozen_bits: np.ndarray, enc_gen_matrix: np.ndarray) -> np.ndarray:
    rows, cols = enc_gen_matrix.shape
    if rows != cols:
        raise ShapeMismatchError(f"enc_gen_matrix must be square, got {rows}x{cols}")
    return dot_mod2(frozen_bits, enc_gen_matrix)


__all__ = [
    "polar_transform",
    "polar_generator_matrix",
    "construct_info_set",
    "info_bit_pattern",
    "insert_frozen_bits",
    "polar_encode",
]
