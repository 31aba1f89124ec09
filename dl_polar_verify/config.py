"""Central configuration for dl_polar_verify: code parameters and synthesis defaults."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from .errors import ShapeMismatchError

PARAM_FIELDS = ("A", "P", "K", "E", "N")


@dataclass(frozen=True)
class ParameterSet:
    """Block sizes of one downlink encode run.

    A: info bits, P: CRC bits, K = A + P, E: rate-matched length,
    N: mother code length (N >= K).
    """

    A: int
    P: int
    K: int
    E: int
    N: int

    def __post_init__(self) -> None:
        for name in PARAM_FIELDS:
            value = getattr(self, name)
            if int(value) != value or value <= 0:
                raise ShapeMismatchError(f"{name} must be a positive integer, got {value!r}")
            object.__setattr__(self, name, int(value))
        if self.K != self.A + self.P:
            raise ShapeMismatchError(f"K must equal A + P ({self.A} + {self.P}), got {self.K}")
        if self.N < self.K:
            raise ShapeMismatchError(f"N must satisfy N >= K, got N={self.N}, K={self.K}")

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> "ParameterSet":
        """Build from the flat ``A, P, K, E, N`` ordering used by ``params.txt``."""

        values = list(values)
        if len(values) < len(PARAM_FIELDS):
            raise ShapeMismatchError(
                f"expected {len(PARAM_FIELDS)} parameters (A, P, K, E, N), got {len(values)}"
            )
        return cls(*(int(v) for v in values[: len(PARAM_FIELDS)]))

    def as_list(self) -> list:
        return [self.A, self.P, self.K, self.E, self.N]


@dataclass
class DlConfig:
    A: int = 40
    E: int = 108
    crc_poly: str = "0x1B2B117"  # 5G CRC-24C (DCI/BCH)
    crc_bits: int = 24
    rnti: int = 0xFFFF
    rnti_bits: int = 16
    n_max: int = 9  # downlink
    crc_interleave: bool = True
    construction: str = "gaussian"
    design_snr_db: float = 2.5
    seed: int = 0


DEFAULTS = DlConfig()


def get_config() -> DlConfig:
    """Return a copy of the default configuration."""

    return DlConfig(**DEFAULTS.__dict__)


def select_mother_code_length(K: int, E: int, n_max: int = 9) -> int:
    """Return N = 2**n for a (K, E) pair following TS 38.212 section 5.3.1."""

    if K <= 0 or E <= 0:
        raise ShapeMismatchError("K and E must be positive")
    n_min = 5
    n1 = math.ceil(math.log2(E))
    if E <= (9 / 8) * 2 ** (n1 - 1) and K / E < 9 / 16:
        n1 -= 1
    n2 = math.ceil(math.log2(8 * K))
    n = max(min(n1, n2, n_max), n_min)
    return 1 << n


__all__ = [
    "ParameterSet",
    "DlConfig",
    "DEFAULTS",
    "get_config",
    "select_mother_code_length",
]
