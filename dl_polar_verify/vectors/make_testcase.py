"""Synthesize downlink polar test-case directories with golden rate-matched bits."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

import numpy as np

from .. import config
from ..config import ParameterSet, select_mother_code_length
from ..polar.crc import crc_degree, crc_generator_matrix, rnti_to_bits
from ..polar.polar import info_bit_pattern, polar_generator_matrix
from ..nr.polar.encdl import DlArtifacts
from ..nr.polar.interleaver import crc_interleaver_pattern
from ..nr.polar.rate_match import rate_matching_pattern
from ..nr.polar.reference import reference_encode
from .testcase import save_testcase


def synthesize_testcase(
    cfg: config.DlConfig,
    info_bits: Optional[np.ndarray] = None,
) -> DlArtifacts:
    """Build every artifact for `cfg`; reference bits come from the independent encoder."""

    P = crc_degree(cfg.crc_poly)
    K = cfg.A + P
    N = select_mother_code_length(K, cfg.E, cfg.n_max)
    params = ParameterSet(A=cfg.A, P=P, K=K, E=cfg.E, N=N)

    if info_bits is None:
        rng = np.random.default_rng(cfg.seed)
        info_bits = rng.integers(0, 2, size=cfg.A, dtype=np.int8)
    info_bits = np.asarray(info_bits, dtype=np.int8)

    rnti_bits = rnti_to_bits(cfg.rnti, cfg.rnti_bits)
    crc_intrl = crc_interleaver_pattern(K, enabled=cfg.crc_interleave)
    info_pattern = info_bit_pattern(N, K, cfg.construction, cfg.design_snr_db)
    rm_pattern = rate_matching_pattern(N, cfg.E, K)
    reference = reference_encode(
        info_bits, cfg.crc_poly, rnti_bits, crc_intrl, info_pattern, rm_pattern
    )

    return DlArtifacts(
        params=params,
        info_bits=info_bits,
        crc_gen_matrix=crc_generator_matrix(cfg.crc_poly, K),
        rnti_bits=rnti_bits,
        crc_interleaver_pattern=crc_intrl,
        info_bit_pattern=info_pattern,
        enc_gen_matrix=polar_generator_matrix(N),
        rate_matching_pattern=rm_pattern,
        reference=reference,
    )


def make_testcase(args: argparse.Namespace) -> Path:
    cfg = config.get_config()
    cfg.A = args.A
    cfg.E = args.E
    cfg.crc_poly = args.crc_poly
    cfg.rnti = args.rnti
    cfg.crc_interleave = not args.no_crc_interleave
    cfg.seed = args.seed

    artifacts = synthesize_testcase(cfg)
    out = save_testcase(args.out, artifacts)
    p = artifacts.params
    print(f"Saved test case A={p.A} P={p.P} K={p.K} E={p.E} N={p.N} to {out}")
    return out


def build_argparser() -> argparse.ArgumentParser:
    defaults = config.DEFAULTS
    parser = argparse.ArgumentParser(description="Synthesize a downlink polar test case")
    parser.add_argument("--out", type=str, required=True, help="Output test-case directory")
    parser.add_argument("--A", type=int, default=defaults.A, help="Info bits")
    parser.add_argument("--E", type=int, default=defaults.E, help="Rate-matched length")
    parser.add_argument("--crc_poly", type=str, default=defaults.crc_poly)
    parser.add_argument("--rnti", type=lambda s: int(s, 0), default=defaults.rnti)
    parser.add_argument("--no_crc_interleave", action="store_true")
    parser.add_argument("--seed", type=int, default=defaults.seed)
    return parser


def main(argv: List[str] | None = None) -> None:
    parser = build_argparser()
    args = parser.parse_args(argv)
    make_testcase(args)


if __name__ == "__main__":
    main()
