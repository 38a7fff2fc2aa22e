"""Shared fixtures for run_weekly tests."""

import datetime as dt
import json

import pytest

from run_weekly.chart import ChartParams


@pytest.fixture
def today() -> dt.date:
    # a Thursday
    return dt.date(2025, 4, 10)


@pytest.fixture
def chart_params() -> ChartParams:
    return ChartParams()


@pytest.fixture
def make_run():
    def _make(day: str, meters: float, **extra) -> dict:
        run = {"start_date_local": f"{day}T07:30:00Z", "distance": meters}
        run.update(extra)
        return run
    return _make


@pytest.fixture
def runs_file(tmp_path):
    """Write a list of activities to a JSON file and return its path."""
    def _write(data, name: str = "runs.json") -> str:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)
    return _write
