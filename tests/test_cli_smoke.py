from __future__ import annotations

import json
from pathlib import Path

import pytest

pytest.importorskip("typer")

from typer.testing import CliRunner

from conftest import make_days, make_events
from flights_daily.cli.main import app

runner = CliRunner()


def test_cli_analyze(tmp_path: Path) -> None:
    dataset_path = tmp_path / "flights.csv"
    make_events(make_days(periods=60)).to_csv(dataset_path, index=False)
    spec_path = tmp_path / "spec.json"
    spec_path.write_text(
        json.dumps(
            {
                "data": {"dataset_path": str(dataset_path)},
                "model": {"family": "ols"},
            }
        )
    )

    result = runner.invoke(app, ["analyze", "--spec", str(spec_path)])

    assert result.exit_code == 0, result.output
    summary = json.loads(result.output.strip().splitlines()[-1])
    assert summary["days"] == 60
    assert summary["formula"] == "n ~ wday"


def test_cli_analyze_reports_analysis_errors(tmp_path: Path) -> None:
    dataset_path = tmp_path / "flights.csv"
    dataset_path.write_text("time_hour,carrier\nnot-a-date,UA\n")
    spec_path = tmp_path / "spec.json"
    spec_path.write_text(json.dumps({"data": {"dataset_path": str(dataset_path)}}))

    result = runner.invoke(app, ["analyze", "--spec", str(spec_path)])

    assert result.exit_code == 1
    assert "Analysis failed" in result.output


def test_cli_terms() -> None:
    result = runner.invoke(app, ["terms", "--start", "2013-06-03", "--end", "2013-06-06"])

    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines == [
        "2013-06-03 | Mon | spring",
        "2013-06-04 | Tue | spring",
        "2013-06-05 | Wed | summer",
        "2013-06-06 | Thu | summer",
    ]


def test_cli_terms_out_of_range() -> None:
    result = runner.invoke(app, ["terms", "--start", "2013-12-31", "--end", "2014-01-01"])
    assert result.exit_code == 1
    assert "outside the configured terms" in result.output


def test_cli_analyze_reports_missing_dataset(tmp_path: Path) -> None:
    spec_path = tmp_path / "spec.json"
    spec_path.write_text(json.dumps({"data": {"dataset_path": str(tmp_path / "absent.csv")}}))

    result = runner.invoke(app, ["analyze", "--spec", str(spec_path)])

    assert result.exit_code == 1
    assert "dataset not found" in result.output
