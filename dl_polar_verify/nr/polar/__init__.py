"""NR polar helpers (interleavers, rate matching, downlink encode chain)."""

from .interleaver import crc_interleaver_pattern, subblock_interleaver_pattern, crc_interleave
from .rate_match import rate_match_mode, rate_matching_pattern, rate_match
from .encdl import (
    DlArtifacts,
    DlEncodeTrace,
    VerifyResult,
    encode_dl,
    encode_dl_trace,
    encode_artifacts,
    verify,
    verify_artifacts,
    logging_hook,
)
from .reference import reference_encode

__all__ = [
    "crc_interleaver_pattern",
    "subblock_interleaver_pattern",
    "crc_interleave",
    "rate_match_mode",
    "rate_matching_pattern",
    "rate_match",
    "DlArtifacts",
    "DlEncodeTrace",
    "VerifyResult",
    "encode_dl",
    "encode_dl_trace",
    "encode_artifacts",
    "verify",
    "verify_artifacts",
    "logging_hook",
    "reference_encode",
]
