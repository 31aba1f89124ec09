"""Downlink polar encode chain (CRC, scramble, attach, interleave, freeze, encode, rate match) and verification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from ...config import ParameterSet
from ...errors import ArityMismatchError, EncodeError, ShapeMismatchError
from ...polar.crc import attach_scrambled_crc, compute_crc, scramble_crc
from ...polar.gf2 import as_bits, as_matrix, as_pattern, weight, xor
from ...polar.polar import insert_frozen_bits, polar_encode
from .interleaver import crc_interleave
from .rate_match import rate_match

StageHook = Callable[[str, np.ndarray], None]

STAGES: Tuple[str, ...] = (
    "crc_bits",
    "scr_bits",
    "info_crc_bits",
    "intrl_bits",
    "frozen_bits",
    "enc_bits",
    "rm_bits",
)


@dataclass(frozen=True)
class DlArtifacts:
    """Inputs of one test case: parameters, static matrices/patterns and optional reference bits."""

    params: ParameterSet
    info_bits: np.ndarray
    crc_gen_matrix: np.ndarray
    rnti_bits: np.ndarray
    crc_interleaver_pattern: np.ndarray
    info_bit_pattern: np.ndarray
    enc_gen_matrix: np.ndarray
    rate_matching_pattern: np.ndarray
    reference: Optional[np.ndarray] = None


@dataclass(frozen=True)
class DlEncodeTrace:
    crc_bits: np.ndarray
    scr_bits: np.ndarray
    info_crc_bits: np.ndarray
    intrl_bits: np.ndarray
    frozen_bits: np.ndarray
    enc_bits: np.ndarray
    rm_bits: np.ndarray


@dataclass(frozen=True)
class VerifyResult:
    params: ParameterSet
    trace: DlEncodeTrace
    reference: np.ndarray
    mismatch_count: int

    @property
    def passed(self) -> bool:
        return self.mismatch_count == 0

    def mismatch_positions(self) -> np.ndarray:
        return np.flatnonzero(xor(self.trace.rm_bits, self.reference))


def _expect_shape(name: str, arr: np.ndarray, shape: Tuple[int, ...]) -> None:
    if arr.shape != shape:
        raise ShapeMismatchError(f"{name} has shape {arr.shape}, expected {shape}")


def validate_inputs(
    params: ParameterSet,
    info_bits,
    crc_gen_matrix,
    rnti_bits,
    crc_interleaver_pattern,
    info_bit_pattern,
    enc_gen_matrix,
    rate_matching_pattern,
) -> Tuple[np.ndarray, ...]:
    """Normalize every input and check it against the shapes implied by `params`.

    Returns the inputs as read-only arrays in argument order (without `params`).
    """

    A, P, K, E, N = params.as_list()
    info_bits = as_bits(info_bits, name="info_bits")
    crc_gen_matrix = as_matrix(crc_gen_matrix, name="crc_gen_matrix")
    rnti_bits = as_bits(rnti_bits, name="rnti_bits")
    crc_interleaver_pattern = as_pattern(crc_interleaver_pattern, name="crc_interleaver_pattern")
    info_bit_pattern = as_pattern(info_bit_pattern, name="info_bit_pattern")
    enc_gen_matrix = as_matrix(enc_gen_matrix, name="enc_gen_matrix")
    rate_matching_pattern = as_pattern(rate_matching_pattern, name="rate_matching_pattern")

    _expect_shape("info_bits", info_bits, (A,))
    _expect_shape("crc_gen_matrix", crc_gen_matrix, (K, P))
    if rnti_bits.size > P:
        raise ShapeMismatchError(f"rnti_bits has {rnti_bits.size} bits, at most P={P} allowed")
    _expect_shape("crc_interleaver_pattern", crc_interleaver_pattern, (K,))
    _expect_shape("info_bit_pattern", info_bit_pattern, (N,))
    active = int(np.count_nonzero(info_bit_pattern > 0))
    if active != K:
        raise ArityMismatchError(f"info_bit_pattern has {active} active positions, expected K={K}")
    _expect_shape("enc_gen_matrix", enc_gen_matrix, (N, N))
    _expect_shape("rate_matching_pattern", rate_matching_pattern, (E,))
    return (
        info_bits,
        crc_gen_matrix,
        rnti_bits,
        crc_interleaver_pattern,
        info_bit_pattern,
        enc_gen_matrix,
        rate_matching_pattern,
    )


def encode_dl_trace(
    params: ParameterSet,
    info_bits,
    crc_gen_matrix,
    rnti_bits,
    crc_interleaver_pattern,
    info_bit_pattern,
    enc_gen_matrix,
    rate_matching_pattern,
    hook: Optional[StageHook] = None,
) -> DlEncodeTrace:
    """Run every stage once and return all intermediate vectors.

    Shapes are validated before the first stage; the first failure aborts the run.
    `hook(stage_name, bits)` is called after each stage.
    """

    (
        info_bits,
        crc_gen_matrix,
        rnti_bits,
        crc_interleaver_pattern,
        info_bit_pattern,
        enc_gen_matrix,
        rate_matching_pattern,
    ) = validate_inputs(
        params,
        info_bits,
        crc_gen_matrix,
        rnti_bits,
        crc_interleaver_pattern,
        info_bit_pattern,
        enc_gen_matrix,
        rate_matching_pattern,
    )

    def emit(name: str, bits: np.ndarray) -> np.ndarray:
        if hook is not None:
            hook(name, bits)
        return bits

    crc_bits = emit("crc_bits", compute_crc(info_bits, crc_gen_matrix))
    scr_bits = emit("scr_bits", scramble_crc(crc_bits, rnti_bits))
    info_crc_bits = emit("info_crc_bits", attach_scrambled_crc(info_bits, scr_bits))
    intrl_bits = emit("intrl_bits", crc_interleave(info_crc_bits, crc_interleaver_pattern))
    frozen_bits = emit("frozen_bits", insert_frozen_bits(intrl_bits, info_bit_pattern))
    enc_bits = emit("enc_bits", polar_encode(frozen_bits, enc_gen_matrix))
    rm_bits = emit("rm_bits", rate_match(enc_bits, rate_matching_pattern, params.E))

    return DlEncodeTrace(
        crc_bits=crc_bits,
        scr_bits=scr_bits,
        info_crc_bits=info_crc_bits,
        intrl_bits=intrl_bits,
        frozen_bits=frozen_bits,
        enc_bits=enc_bits,
        rm_bits=rm_bits,
    )


def encode_dl(
    params: ParameterSet,
    info_bits,
    crc_gen_matrix,
    rnti_bits,
    crc_interleaver_pattern,
    info_bit_pattern,
    enc_gen_matrix,
    rate_matching_pattern,
    hook: Optional[StageHook] = None,
) -> np.ndarray:
    """Return the E rate-matched bits for one info-bit vector."""

    trace = encode_dl_trace(
        params,
        info_bits,
        crc_gen_matrix,
        rnti_bits,
        crc_interleaver_pattern,
        info_bit_pattern,
        enc_gen_matrix,
        rate_matching_pattern,
        hook=hook,
    )
    return trace.rm_bits


def verify(computed, reference) -> int:
    """Number of positions where `computed` and `reference` differ (0 means exact match)."""

    return weight(xor(as_bits(computed, name="computed"), as_bits(reference, name="reference")))


def encode_artifacts(artifacts: DlArtifacts, hook: Optional[StageHook] = None) -> DlEncodeTrace:
    return encode_dl_trace(
        artifacts.params,
        artifacts.info_bits,
        artifacts.crc_gen_matrix,
        artifacts.rnti_bits,
        artifacts.crc_interleaver_pattern,
        artifacts.info_bit_pattern,
        artifacts.enc_gen_matrix,
        artifacts.rate_matching_pattern,
        hook=hook,
    )


def verify_artifacts(artifacts: DlArtifacts, hook: Optional[StageHook] = None) -> VerifyResult:
    """Encode a test case and count mismatches against its reference bits."""

    if artifacts.reference is None:
        raise EncodeError("test case has no reference bits to verify against")
    reference = as_bits(artifacts.reference, name="reference")
    _expect_shape("reference", reference, (artifacts.params.E,))
    trace = encode_artifacts(artifacts, hook=hook)
    return VerifyResult(
        params=artifacts.params,
        trace=trace,
        reference=reference,
        mismatch_count=verify(trace.rm_bits, reference),
    )


def logging_hook(logger: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> StageHook:
    """Build a hook that logs each intermediate vector as one record."""

    log = logger if logger is not None else logging.getLogger(__name__)

    def _hook(name: str, bits: np.ndarray) -> None:
        if log.isEnabledFor(level):
            log.log(level, "[ENCODE] %s=%s", name, "".join(str(int(b)) for b in bits))

    return _hook


__all__ = [
    "STAGES",
    "StageHook",
    "DlArtifacts",
    "DlEncodeTrace",
    "VerifyResult",
    "validate_inputs",
    "encode_dl_trace",
    "encode_dl",
    "verify",
    "encode_artifacts",
    "verify_artifacts",
    "logging_hook",
]
