"""Tests for the mc-lsm command-line interface."""

import pytest

from mc_lsm.cli import main, parse_args

BASE = ["--S0", "36", "--K", "40", "--r", "0.06", "--sigma", "0.2", "--T", "1.0"]


def test_parse_defaults():
    args = parse_args(BASE)
    assert args.option_type == "call"
    assert args.style == "european"
    assert args.samples is None
    assert args.tolerance is None
    assert args.rng == "pseudo"
    assert args.seed == 42


def test_samples_and_tolerance_are_exclusive():
    with pytest.raises(SystemExit):
        parse_args(BASE + ["--samples", "1000", "--tolerance", "0.01"])


def test_american_put(capsys):
    code = main(
        BASE + ["--option_type", "put", "--style", "american", "--samples", "5000",
                "--time_steps", "25", "--bs"]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert "Option Price:" in out
    assert "95% Confidence Interval" in out
    assert "Early Exercise Premium" in out
    assert "Exercise Dates:         25" in out


def test_bermudan(capsys):
    code = main(
        BASE + ["--option_type", "put", "--style", "bermudan", "--exercise_times",
                "0.5", "1.0", "--samples", "2000", "--time_steps", "10"]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert "Exercise Dates:         2" in out


def test_bermudan_requires_times(capsys):
    code = main(BASE + ["--style", "bermudan"])
    assert code == 1
    assert "--exercise_times is required" in capsys.readouterr().out


def test_sobol(capsys):
    code = main(BASE + ["--rng", "sobol", "--samples", "1024", "--time_steps", "4"])
    out = capsys.readouterr().out
    assert code == 0
    assert "n/a (quasi-random sequence)" in out


def test_sobol_with_tolerance_fails(capsys):
    code = main(BASE + ["--rng", "sobol", "--tolerance", "0.05"])
    assert code == 1
    assert "does not allow an error estimate" in capsys.readouterr().out


def test_invalid_spot(capsys):
    code = main(["--S0", "-1", "--K", "40", "--r", "0.06", "--sigma", "0.2", "--T", "1.0"])
    assert code == 1
    assert "Error:" in capsys.readouterr().out


def test_budget_exhausted(capsys):
    code = main(
        BASE + ["--tolerance", "0.0001", "--max_samples", "2000", "--time_steps", "5"]
    )
    assert code == 1
    assert "max number of samples" in capsys.readouterr().out


def test_budget_below_seeding_floor(capsys):
    code = main(BASE + ["--tolerance", "0.01", "--max_samples", "500", "--time_steps", "5"])
    out = capsys.readouterr().out
    assert code == 1
    assert "below the seeding floor" in out
    assert out.startswith("Error:")
