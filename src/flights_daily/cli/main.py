"""Command line interface entry points."""
from __future__ import annotations

import json
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

import typer

from ..config import get_settings
from ..errors import AnalysisError

app = typer.Typer()


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, get_settings().log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


@app.command("analyze")
def analyze(
    spec: Path = typer.Option(..., "--spec", exists=True, file_okay=True, dir_okay=False),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", help="Override artifacts.out_dir"),
) -> None:
    """Run one analysis step from a JSON specification and print the summary."""

    from ..api.schemas import AnalysisSpec  # local import to keep startup light
    from ..runner import run

    _configure_logging()
    sp = AnalysisSpec.model_validate_json(spec.read_text())
    if out_dir is not None:
        sp.artifacts.out_dir = str(out_dir)
    try:
        summary = run(sp)
    except AnalysisError as e:
        typer.echo(f"Analysis failed: {e}")
        raise typer.Exit(1)
    typer.echo(json.dumps(summary, separators=(",", ":"), default=str))


@app.command("terms")
def terms(
    start: str = typer.Option(..., "--start"),
    end: str = typer.Option(..., "--end"),
    spec: Optional[Path] = typer.Option(
        None, "--spec", exists=True, file_okay=True, dir_okay=False,
        help="Read term boundaries from this analysis specification",
    ),
) -> None:
    """Print the weekday and term of every day in an inclusive window."""

    from ..api.schemas import AnalysisSpec, TermsSpec
    from ..daily.calendar import day_of_week, term
    import pandas as pd

    terms_spec = (
        AnalysisSpec.model_validate_json(spec.read_text()).terms if spec is not None else TermsSpec()
    )
    boundaries = terms_spec.to_boundaries()
    first, last = pd.Timestamp(start), pd.Timestamp(end)
    if last < first:
        typer.echo("--end must not be before --start")
        raise typer.Exit(1)
    day = first
    try:
        while day <= last:
            typer.echo(f"{day.date().isoformat()} | {day_of_week(day)} | {term(day, boundaries)}")
            day += timedelta(days=1)
    except AnalysisError as e:
        typer.echo(str(e))
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
