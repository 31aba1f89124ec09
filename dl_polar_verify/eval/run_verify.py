"""Verify downlink polar test-case directories against their reference bits."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from ..nr.polar.encdl import VerifyResult, verify_artifacts
from ..vectors.testcase import load_params, load_testcase


def _print_stage(name: str, bits: np.ndarray) -> None:
    print(f"{name}:")
    print(" ".join(str(int(b)) for b in bits))


def _plot_result(result: VerifyResult, plot_path: Path) -> None:
    computed = result.trace.rm_bits
    positions = result.mismatch_positions()
    idx = np.arange(computed.size)
    plt.figure(figsize=(8, 3))
    plt.step(idx, result.reference + 1.5, where="mid", label="reference")
    plt.step(idx, computed, where="mid", label="computed")
    if positions.size:
        plt.plot(positions, computed[positions], "rx", label="mismatch")
    plt.yticks([0, 1, 1.5, 2.5], ["0", "1", "0", "1"])
    plt.xlabel("Rate-matched bit index")
    plt.title(f"E={result.params.E}, mismatches={result.mismatch_count}")
    plt.legend(loc="upper right")
    plt.tight_layout()
    plt.savefig(plot_path, dpi=150)
    plt.close()


def _param_context(case: Path) -> str:
    try:
        p = load_params(case)
    except (OSError, ValueError):
        return "params unavailable"
    return f"A={p.A} P={p.P} K={p.K} E={p.E} N={p.N}"


def run_verify(args: argparse.Namespace) -> List[Dict[str, object]]:
    """Verify every case in ``args.cases`` and return one summary row per case."""

    hook = _print_stage if args.trace else None
    plot_dir = Path(args.plot_dir) if args.plot_dir else None
    if plot_dir is not None:
        plot_dir.mkdir(parents=True, exist_ok=True)

    rows: List[Dict[str, object]] = []
    for case in map(Path, args.cases):
        try:
            artifacts = load_testcase(case)
            result = verify_artifacts(artifacts, hook=hook)
        except (OSError, ValueError) as exc:
            print(f"{case}: ERROR ({_param_context(case)}): {type(exc).__name__}: {exc}")
            rows.append({"case": str(case), "mismatches": -1, "status": "error"})
            continue

        p = result.params
        status = "pass" if result.passed else "fail"
        print(f"{case}: A={p.A} P={p.P} K={p.K} E={p.E} N={p.N} -> nDiffBits={result.mismatch_count} [{status}]")
        rows.append({"case": str(case), "mismatches": result.mismatch_count, "status": status})

        if plot_dir is not None:
            plot_path = plot_dir / f"{case.name}.png"
            _plot_result(result, plot_path)
            print(f"Saved bit plot to {plot_path}")

    if args.out_dir:
        output_dir = Path(args.out_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        csv_path = output_dir / "verify_summary.csv"
        with csv_path.open("w") as f:
            f.write("case,mismatches,status\n")
            for row in rows:
                f.write(f"{row['case']},{row['mismatches']},{row['status']}\n")
        print(f"Saved verification table to {csv_path}")

    return rows


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Verify downlink polar encoding against reference vectors")
    parser.add_argument("cases", nargs="+", help="Test-case directories")
    parser.add_argument("--out_dir", type=str, default=None, help="Write verify_summary.csv here")
    parser.add_argument("--plot_dir", type=str, default=None, help="Write one bit plot per case here")
    parser.add_argument("--trace", action="store_true", help="Print every intermediate vector")
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_argparser()
    args = parser.parse_args(argv)
    rows = run_verify(args)
    return 0 if all(row["status"] == "pass" for row in rows) else 1


if __name__ == "__main__":
    sys.exit(main())
