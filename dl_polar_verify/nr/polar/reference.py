"""Reference downlink polar encoder built from polynomial division and the butterfly transform.

It shares no stage code with the matrix pipeline in ``encdl`` and is used to
synthesize golden rate-matched vectors.
"""

from __future__ import annotations

import numpy as np

from ...polar.crc import attach_crc, crc_degree
from ...polar import polar as polar_core


def reference_encode(
    info_bits: np.ndarray,
    crc_poly: str,
    rnti_bits: np.ndarray,
    crc_interleaver_pattern: np.ndarray,
    info_bit_pattern: np.ndarray,
    rate_matching_pattern: np.ndarray,
) -> np.ndarray:
    info_bits = np.asarray(info_bits, dtype=np.int8)
    P = crc_degree(crc_poly)
    # all-ones CRC register == P leading ones in front of the message
    crc = attach_crc(np.concatenate([np.ones(P, dtype=np.int8), info_bits]), crc_poly)[-P:]
    mask = np.zeros(P, dtype=np.int8)
    rnti_bits = np.asarray(rnti_bits, dtype=np.int8)
    mask[P - rnti_bits.size :] = rnti_bits
    msg = np.concatenate([info_bits, crc ^ mask])
    msg = msg[np.asarray(crc_interleaver_pattern)]

    info_bit_pattern = np.asarray(info_bit_pattern)
    u = np.zeros(info_bit_pattern.size, dtype=np.int8)
    u[info_bit_pattern > 0] = msg
    codeword = polar_core.polar_transform(u)
    return codeword[np.asarray(rate_matching_pattern)]


__all__ = ["reference_encode"]
