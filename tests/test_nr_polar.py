import numpy as np
import pytest

from dl_polar_verify.config import select_mother_code_length
from dl_polar_verify.errors import IndexOutOfRangeError, ShapeMismatchError
from dl_polar_verify.nr.polar import (
    crc_interleave,
    crc_interleaver_pattern,
    rate_match,
    rate_match_mode,
    rate_matching_pattern,
    subblock_interleaver_pattern,
)


@pytest.mark.parametrize("K", [12, 30, 64, 140, 164])
def test_crc_interleaver_is_permutation(K):
    pattern = crc_interleaver_pattern(K)
    assert pattern.size == K
    np.testing.assert_array_equal(np.sort(pattern), np.arange(K))


def test_crc_interleaver_full_length_starts_like_table():
    np.testing.assert_array_equal(crc_interleaver_pattern(164)[:8], [0, 2, 4, 7, 9, 14, 19, 20])


def test_crc_interleaver_disabled_is_identity():
    np.testing.assert_array_equal(crc_interleaver_pattern(30, enabled=False), np.arange(30))


def test_crc_interleaver_too_long():
    with pytest.raises(ShapeMismatchError):
        crc_interleaver_pattern(165)


def test_crc_interleave_checks_pattern_length():
    bits = np.array([1, 0, 1, 1, 0, 1, 1], dtype=np.int8)
    np.testing.assert_array_equal(crc_interleave(bits, np.arange(7)), bits)
    with pytest.raises(ShapeMismatchError):
        crc_interleave(bits, np.arange(6))


def test_subblock_interleaver_patterns():
    np.testing.assert_array_equal(
        subblock_interleaver_pattern(32)[:12], [0, 1, 2, 4, 3, 5, 6, 7, 8, 16, 9, 17]
    )
    np.testing.assert_array_equal(subblock_interleaver_pattern(64)[:8], [0, 1, 2, 3, 4, 5, 8, 9])
    for N in (32, 128, 512):
        pattern = subblock_interleaver_pattern(N)
        np.testing.assert_array_equal(np.sort(pattern), np.arange(N))
    with pytest.raises(ShapeMismatchError):
        subblock_interleaver_pattern(16)


@pytest.mark.parametrize(
    "K, E, N",
    [(64, 108, 128), (44, 200, 256), (30, 300, 256)],
)
def test_mother_code_length(K, E, N):
    assert select_mother_code_length(K, E) == N


def test_rate_matching_modes():
    N = 128
    sub = subblock_interleaver_pattern(N)

    assert rate_match_mode(N, 108, 64) == "shorten"
    np.testing.assert_array_equal(rate_matching_pattern(N, 108, 64), sub[:108])

    assert rate_match_mode(N, 100, 20) == "puncture"
    np.testing.assert_array_equal(rate_matching_pattern(N, 100, 20), sub[28:])

    assert rate_match_mode(N, 150, 64) == "repeat"
    rep = rate_matching_pattern(N, 150, 64)
    assert rep.size == 150
    np.testing.assert_array_equal(rep[:N], sub)
    np.testing.assert_array_equal(rep[N:], sub[:22])


def test_rate_match_allows_repetition_but_not_out_of_range():
    enc = np.array([1, 0, 1, 1, 0, 1, 1, 0], dtype=np.int8)
    np.testing.assert_array_equal(rate_match(enc, np.array([0, 1, 2, 3, 4, 5]), 6), [1, 0, 1, 1, 0, 1])
    np.testing.assert_array_equal(rate_match(enc, np.array([7, 7, 0, 0])), [0, 0, 1, 1])
    with pytest.raises(IndexOutOfRangeError):
        rate_match(enc, np.array([0, 8]))
    with pytest.raises(ShapeMismatchError):
        rate_match(enc, np.array([0, 1]), 3)
