import numpy as np
import pytest

from dl_polar_verify import config
from dl_polar_verify.errors import ShapeMismatchError
from dl_polar_verify.nr.polar.encdl import verify_artifacts
from dl_polar_verify.vectors.make_testcase import synthesize_testcase
from dl_polar_verify.vectors.testcase import (
    load_params,
    load_testcase,
    read_ints,
    save_testcase,
)


def _write(path, text):
    path.write_text(text)


def _write_small_case(root):
    # crc_gen_m.txt holds the transposed (P x K) matrix, row-major
    root.mkdir(parents=True, exist_ok=True)
    _write(root / "params.txt", "4,3,7,6,8\n")
    _write(root / "info_bits.txt", "1,0,1,1\n")
    _write(root / "crc_gen_m.txt", "0,0,0,0,0,0,0\n1,0,0,0,0,0,0\n0,0,0,0,0,0,0\n")
    _write(root / "rnti_bits.txt", "1\n")
    _write(root / "crc_interleaver_pattern.txt", "0,1,2,3,4,5,6\n")
    _write(root / "info_bit_pattern.txt", "1,1,1,1,1,1,1,0\n")
    eye = "\n".join(",".join("1" if i == j else "0" for j in range(8)) for i in range(8))
    _write(root / "enc_gen_m.txt", eye + "\n")
    _write(root / "rate_matching_pattern.txt", "0,1,2,3,4,5\n")
    _write(root / "rm_bits.txt", "1,0,1,1,0,1\n")


def test_read_ints_accepts_commas_and_whitespace(tmp_path):
    path = tmp_path / "v.txt"
    _write(path, "1, 0,1\n0 1\n")
    np.testing.assert_array_equal(read_ints(path), [1, 0, 1, 0, 1])


def test_load_small_case(tmp_path):
    _write_small_case(tmp_path / "case")
    artifacts = load_testcase(tmp_path / "case")
    assert artifacts.params.as_list() == [4, 3, 7, 6, 8]
    assert artifacts.crc_gen_matrix.shape == (7, 3)
    assert artifacts.crc_gen_matrix[0, 1] == 1
    result = verify_artifacts(artifacts)
    assert result.mismatch_count == 0
    np.testing.assert_array_equal(result.trace.scr_bits, [0, 1, 1])


def test_bad_matrix_size(tmp_path):
    root = tmp_path / "case"
    _write_small_case(root)
    _write(root / "crc_gen_m.txt", "0,0,0,0,0,0\n1,0,0,0,0,0\n0,0,0,0,0,0\n")
    with pytest.raises(ShapeMismatchError):
        load_testcase(root)


def test_missing_reference_is_optional(tmp_path):
    root = tmp_path / "case"
    _write_small_case(root)
    (root / "rm_bits.txt").unlink()
    assert load_testcase(root).reference is None


def test_missing_params_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_params(tmp_path)


def test_save_load_roundtrip(tmp_path):
    artifacts = synthesize_testcase(config.get_config())
    root = save_testcase(tmp_path / "synth", artifacts)
    P, K = artifacts.params.P, artifacts.params.K
    assert len((root / "crc_gen_m.txt").read_text().splitlines()) == P
    loaded = load_testcase(root)
    assert loaded.params == artifacts.params
    for name in (
        "info_bits",
        "crc_gen_matrix",
        "rnti_bits",
        "crc_interleaver_pattern",
        "info_bit_pattern",
        "enc_gen_matrix",
        "rate_matching_pattern",
        "reference",
    ):
        np.testing.assert_array_equal(getattr(loaded, name), getattr(artifacts, name))
    assert loaded.crc_gen_matrix.shape == (K, P)
    assert verify_artifacts(loaded).passed
