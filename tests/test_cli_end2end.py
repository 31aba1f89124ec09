from argparse import Namespace

from dl_polar_verify.eval.run_verify import main as verify_main
from dl_polar_verify.eval.run_verify import run_verify
from dl_polar_verify.vectors.make_testcase import main as make_main
from dl_polar_verify.vectors.testcase import read_ints, write_ints


def test_cli_end2end(tmp_path, capsys):
    good = tmp_path / "cases" / "good"
    make_main(["--out", str(good), "--seed", "1234"])
    assert (good / "rm_bits.txt").exists()

    bad = tmp_path / "cases" / "bad"
    make_main(["--out", str(bad), "--seed", "99", "--A", "20", "--E", "200", "--rnti", "0x1234"])
    ref = read_ints(bad / "rm_bits.txt")
    ref[0] ^= 1
    write_ints(bad / "rm_bits.txt", ref)

    capsys.readouterr()
    assert verify_main([str(good)]) == 0
    out = capsys.readouterr().out
    assert "nDiffBits=0 [pass]" in out

    status = verify_main(
        [
            str(good),
            str(bad),
            str(tmp_path / "cases" / "missing"),
            "--out_dir",
            str(tmp_path / "results"),
            "--plot_dir",
            str(tmp_path / "plots"),
        ]
    )
    assert status == 1
    out = capsys.readouterr().out
    assert "nDiffBits=1 [fail]" in out
    assert "ERROR" in out

    assert (tmp_path / "plots" / "good.png").exists()
    assert (tmp_path / "plots" / "bad.png").exists()

    with (tmp_path / "results" / "verify_summary.csv").open() as f:
        header = f.readline().strip().split(",")
        assert header == ["case", "mismatches", "status"]
        rows = [line.strip().split(",") for line in f]
    assert [row[1:] for row in rows] == [["0", "pass"], ["1", "fail"], ["-1", "error"]]


def test_trace_prints_every_stage(tmp_path, capsys):
    case = tmp_path / "case"
    make_main(["--out", str(case), "--no_crc_interleave"])
    args = Namespace(cases=[str(case)], out_dir=None, plot_dir=None, trace=True)
    rows = run_verify(args)
    assert rows[0]["status"] == "pass"
    out = capsys.readouterr().out
    for stage in ("crc_bits:", "scr_bits:", "intrl_bits:", "frozen_bits:", "enc_bits:", "rm_bits:"):
        assert stage in out
