import subprocess, sys, pathlib

import pandas as pd
import pytest

from boreimpy.cli import main

BORE = """\
# df, db, r [mm]
5, 12.5, 250, leadpipe
12.5, 20, 250, bell
0, 0, 0
"""


@pytest.fixture
def bore_file(tmp_path):
    p = tmp_path / "horn.men"
    p.write_text(BORE, encoding="utf-8")
    return p


def test_import():
    import boreimpy as pkg
    assert hasattr(pkg, "ImpedanceSweepDriver")
    assert hasattr(pkg, "calcimp")


def test_cli_help():
    # Just check the CLI runs and prints usage
    cmd = [sys.executable, "-m", "boreimpy.cli", "--help"]
    cp = subprocess.run(cmd, capture_output=True, text=True)
    assert cp.returncode == 0
    assert "bore" in cp.stdout


def test_cli_csv(bore_file, tmp_path, capsys):
    out = tmp_path / "out"
    rc = main([str(bore_file), "--csv", "--quiet", "--outdir", str(out), "--max-freq", "1000", "--step-freq", "5"])
    assert rc == 0
    assert "Wrote: CSV" in capsys.readouterr().out
    path = out / "IMPEDANCE.csv"
    text = path.read_text(encoding="utf-8")
    assert text.startswith("# Program: BoreImPy")
    frame = pd.read_csv(path, comment="#")
    assert list(frame.columns) == ["freq", "real", "imag", "mag"]
    assert len(frame) == 201
    assert frame["freq"].iloc[-1] == pytest.approx(1000.0)
    assert frame["mag"].iloc[0] == 0.0


def test_cli_prefix_and_modes(bore_file, tmp_path):
    rc = main([str(bore_file), "--csv", "--quiet", "--outdir", str(tmp_path), "--prefix", "run1",
               "--radiation", "baffle", "--damping", "none", "--section-variation", "--max-freq", "100", "--step-freq", "10"])
    assert rc == 0
    text = (tmp_path / "run1_IMPEDANCE.csv").read_text(encoding="utf-8")
    assert "# Radiation: BAFFLE, damping: NONE, section variation: ON" in text


def test_cli_print_men(bore_file, tmp_path, capsys):
    rc = main([str(bore_file), "--print-men", "--csv", "--outdir", str(tmp_path)])
    assert rc == 0
    out = capsys.readouterr().out
    assert "leadpipe" in out and "bell" in out
    frame = pd.read_csv(tmp_path / "BORE.csv", comment="#")
    assert list(frame.columns) == ["df", "db", "r", "comment"]
    assert frame["r"].tolist() == pytest.approx([250.0, 250.0])


def test_cli_needs_output_format(bore_file, tmp_path):
    with pytest.raises(SystemExit) as ei:
        main([str(bore_file), "--outdir", str(tmp_path)])
    assert ei.value.code == 2


def test_cli_bad_input(tmp_path):
    with pytest.raises(SystemExit):
        main([str(tmp_path / "missing.men"), "--csv", "--outdir", str(tmp_path)])
    with pytest.raises(SystemExit):
        main([str(tmp_path / "missing.men"), "--csv", "--step-freq", "0"])
