"""Tests for heatmap colors, grades and cells."""

import pytest

from run_weekly.heatmap import distance_to_grade, heatmap_cells, percentage, pick_color
from run_weekly.weekly_stats import build_dates_hierarchy


COLOR_FROM = [0, 70, 6]
COLOR_TO = [255, 255, 55]


class TestHelpers:
    """Tests for percentage, pick_color and distance_to_grade."""

    def test_percentage_clamped(self):
        assert percentage(0, 200, 50) == 25.0
        assert percentage(0, 200, 400) == 100.0
        assert percentage(100, 200, 50) == 0.0

    def test_percentage_flat_range(self):
        assert percentage(5, 5, 5) == 100.0
        assert percentage(5, 5, 0) == 0.0

    def test_pick_color_ends(self):
        assert pick_color(COLOR_TO, COLOR_FROM, 1.0) == COLOR_TO
        assert pick_color(COLOR_TO, COLOR_FROM, 0.0) == COLOR_FROM

    @pytest.mark.parametrize("meters, grade", [
        (0, "just"),
        (4999, "just"),
        (5000, "ok"),
        (13_999, "good"),
        (18_000, "long-s"),
        (27_999, "long-m"),
        (40_999, "long-l"),
        (42_195, "marathon"),
    ])
    def test_grades(self, meters, grade):
        assert distance_to_grade(meters) == grade


class TestCells:
    """Tests for heatmap_cells."""

    def test_one_cell_per_day(self, make_run):
        dates = build_dates_hierarchy([make_run("2025-01-01", 2500), make_run("2025-01-03", 10000)])
        cells = heatmap_cells(dates, COLOR_FROM, COLOR_TO)

        assert len(cells) == 365
        assert cells[0]["date"] == "2025-01-01"
        assert cells[-1]["date"] == "2025-12-31"
        assert [c["date"] for c in cells] == sorted(c["date"] for c in cells)

    def test_run_days(self, make_run):
        dates = build_dates_hierarchy([make_run("2025-01-01", 2500), make_run("2025-01-03", 10000)])
        cells = {c["date"]: c for c in heatmap_cells(dates, COLOR_FROM, COLOR_TO)}

        longest = cells["2025-01-03"]
        assert longest["color"] == "rgb(255,255,55)"
        assert longest["grade"] == "good"
        assert longest["week_start"] == "2024-12-30"
        assert longest["week_key"] == "2025-01"

        short = cells["2025-01-01"]
        assert short["color"] == "rgb(64,116,18)"
        assert short["grade"] == "just"

    def test_empty_day(self, make_run):
        dates = build_dates_hierarchy([make_run("2025-01-01", 2500)])
        cells = {c["date"]: c for c in heatmap_cells(dates, COLOR_FROM, COLOR_TO)}

        assert cells["2025-06-01"] == {
            "date": "2025-06-01",
            "week_start": "2025-05-26",
            "week_key": "2025-22",
            "distance": 0,
            "runs": 0,
            "grade": None,
            "color": None,
        }

    def test_empty_hierarchy(self):
        assert heatmap_cells({}, COLOR_FROM, COLOR_TO) == []
