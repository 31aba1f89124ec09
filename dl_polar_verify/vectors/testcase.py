"""Read and write test-case directories of flat integer files."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np

from ..config import ParameterSet
from ..errors import ShapeMismatchError
from ..nr.polar.encdl import DlArtifacts

PathLike = Union[str, Path]

PARAMS_FILE = "params.txt"
INFO_BITS_FILE = "info_bits.txt"
CRC_GEN_FILE = "crc_gen_m.txt"
RNTI_BITS_FILE = "rnti_bits.txt"
CRC_INTERLEAVER_FILE = "crc_interleaver_pattern.txt"
INFO_BIT_PATTERN_FILE = "info_bit_pattern.txt"
ENC_GEN_FILE = "enc_gen_m.txt"
RATE_MATCHING_FILE = "rate_matching_pattern.txt"
REFERENCE_FILE = "rm_bits.txt"


def read_ints(path: PathLike) -> np.ndarray:
    """Return the comma/whitespace separated integers of a file as one flat array."""

    text = Path(path).read_text()
    return np.array(text.replace(",", " ").split(), dtype=np.int64)


def write_ints(path: PathLike, values: np.ndarray) -> None:
    values = np.asarray(values)
    rows = values.reshape(1, -1) if values.ndim == 1 else values
    np.savetxt(path, rows, fmt="%d", delimiter=",")


def _read_matrix(path: Path, rows: int, cols: int) -> np.ndarray:
    # stored transposed: `rows` lines of `cols` values describe the cols x rows matrix
    flat = read_ints(path)
    if flat.size != rows * cols:
        raise ShapeMismatchError(f"{path.name} has {flat.size} values, expected {rows} x {cols}")
    return flat.reshape(rows, cols).T


def load_params(path: PathLike) -> ParameterSet:
    """Load ``A, P, K, E, N`` from ``params.txt`` in a test-case directory."""

    return ParameterSet.from_sequence(read_ints(Path(path) / PARAMS_FILE))


def load_testcase(path: PathLike) -> DlArtifacts:
    """Load every artifact of a test-case directory; ``rm_bits.txt`` is optional."""

    root = Path(path)
    params = load_params(root)
    reference_path = root / REFERENCE_FILE
    return DlArtifacts(
        params=params,
        info_bits=read_ints(root / INFO_BITS_FILE),
        crc_gen_matrix=_read_matrix(root / CRC_GEN_FILE, params.P, params.K),
        rnti_bits=read_ints(root / RNTI_BITS_FILE),
        crc_interleaver_pattern=read_ints(root / CRC_INTERLEAVER_FILE),
        info_bit_pattern=read_ints(root / INFO_BIT_PATTERN_FILE),
        enc_gen_matrix=_read_matrix(root / ENC_GEN_FILE, params.N, params.N),
        rate_matching_pattern=read_ints(root / RATE_MATCHING_FILE),
        reference=read_ints(reference_path) if reference_path.exists() else None,
    )


def save_testcase(path: PathLike, artifacts: DlArtifacts) -> Path:
    """Write `artifacts` in the layout read by :func:`load_testcase`."""

    root = Path(path)
    root.mkdir(parents=True, exist_ok=True)
    write_ints(root / PARAMS_FILE, np.array(artifacts.params.as_list()))
    write_ints(root / INFO_BITS_FILE, artifacts.info_bits)
    write_ints(root / CRC_GEN_FILE, np.asarray(artifacts.crc_gen_matrix).T)
    write_ints(root / RNTI_BITS_FILE, artifacts.rnti_bits)
    write_ints(root / CRC_INTERLEAVER_FILE, artifacts.crc_interleaver_pattern)
    write_ints(root / INFO_BIT_PATTERN_FILE, artifacts.info_bit_pattern)
    write_ints(root / ENC_GEN_FILE, np.asarray(artifacts.enc_gen_matrix).T)
    write_ints(root / RATE_MATCHING_FILE, artifacts.rate_matching_pattern)
    if artifacts.reference is not None:
        write_ints(root / REFERENCE_FILE, artifacts.reference)
    return root


__all__ = ["read_ints", "write_ints", "load_params", "load_testcase", "save_testcase"]
