import numpy as np
import pytest

from dl_polar_verify.errors import ShapeMismatchError
from dl_polar_verify.polar.gf2 import dot_mod2
from dl_polar_verify.polar.polar import (
    construct_info_set,
    info_bit_pattern,
    polar_encode,
    polar_generator_matrix,
    polar_transform,
)


def test_generator_matrix_small():
    expected = np.array(
        [
            [1, 0, 0, 0],
            [1, 1, 0, 0],
            [1, 0, 1, 0],
            [1, 1, 1, 1],
        ]
    )
    np.testing.assert_array_equal(polar_generator_matrix(4), expected)


def test_matrix_encoding_matches_butterfly():
    rng = np.random.default_rng(0)
    for N in (8, 32, 128):
        G = polar_generator_matrix(N)
        u = rng.integers(0, 2, size=N, dtype=np.int8)
        np.testing.assert_array_equal(polar_encode(u, G), polar_transform(u))


def test_polar_transform_is_involution():
    rng = np.random.default_rng(4)
    u = rng.integers(0, 2, size=64, dtype=np.int8)
    np.testing.assert_array_equal(polar_transform(polar_transform(u)), u)


def test_generator_needs_power_of_two():
    with pytest.raises(ShapeMismatchError):
        polar_generator_matrix(12)


def test_identity_encoder_passes_bits_through():
    u = np.array([1, 0, 1, 1, 0, 1, 1, 0], dtype=np.int8)
    np.testing.assert_array_equal(polar_encode(u, np.eye(8, dtype=np.int8)), u)


def test_polar_encode_rejects_non_square():
    with pytest.raises(ShapeMismatchError):
        polar_encode(np.zeros(4, dtype=np.int8), np.zeros((4, 2), dtype=np.int8))


@pytest.mark.parametrize("method", ["gaussian", "polarization"])
def test_info_bit_pattern_has_k_active_positions(method):
    N, K = 128, 64
    mask = info_bit_pattern(N, K, method)
    assert mask.size == N
    assert int(np.count_nonzero(mask > 0)) == K
    np.testing.assert_array_equal(np.flatnonzero(mask), construct_info_set(N, K, method))
    # the last synthetic channel is always the most reliable one
    assert mask[N - 1] == 1


def test_construct_info_set_bad_method():
    with pytest.raises(ValueError):
        construct_info_set(32, 8, "unknown")


def test_dot_mod2_with_generator_is_linear():
    G = polar_generator_matrix(16)
    a = np.zeros(16, dtype=np.int8)
    a[[1, 5]] = 1
    b = np.zeros(16, dtype=np.int8)
    b[[5, 9]] = 1
    np.testing.assert_array_equal(dot_mod2(a ^ b, G), dot_mod2(a, G) ^ dot_mod2(b, G))
