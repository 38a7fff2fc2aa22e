"""Tests for the run-weekly command."""

import json
from unittest.mock import patch

from run_weekly.cli import main
from run_weekly.gnuplot import RenderingUnavailable


RUNS = [
    {"id": 2, "distance": 7000, "start_date_local": "2025-04-10T07:00:00Z"},
    {"id": 1, "distance": 5000, "start_date_local": "2025-04-07T07:00:00Z"},
]


def _argv(runs_path, tmp_path, *extra):
    return [runs_path, "--config", str(tmp_path / "none.yaml"), "--as-of", "2025-04-10", *extra]


class TestCli:
    """Tests for cli.main."""

    def test_dry_run(self, runs_file, tmp_path, capsys):
        code = main(_argv(runs_file(RUNS), tmp_path, "--weeks", "1", "--dry-run"))

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["labels"] == ["2025-04-07"]
        assert out["values"] == [12.0]
        assert out["current_week_km"] == 12.0
        assert "dates" not in out

    def test_writes_outputs(self, runs_file, tmp_path):
        outdir = tmp_path / "out"
        with patch("run_weekly.cli.generate_svg", return_value="<svg></svg>") as gen:
            code = main(_argv(runs_file(RUNS), tmp_path, "--weeks", "4", "--outdir", str(outdir)))

        assert code == 0
        labels, values, avg, params = gen.call_args[0]
        assert labels[-1] == "2025-04-07"
        assert values[-1] == 12.0
        assert gen.call_args[1]["workdir"] == str(outdir)
        assert (outdir / "weekly.svg").read_text(encoding="utf-8") == "<svg></svg>"
        stats = json.loads((outdir / "stats.json").read_text(encoding="utf-8"))
        assert stats["max_week_start"] == "2025-03-17"
        cells = json.loads((outdir / "heatmap.json").read_text(encoding="utf-8"))
        assert len(cells) == 365

    def test_rendering_failure(self, runs_file, tmp_path, capsys):
        with patch("run_weekly.cli.generate_svg", side_effect=RenderingUnavailable("gnuplot not found")):
            code = main(_argv(runs_file(RUNS), tmp_path, "--outdir", str(tmp_path / "out")))

        assert code == 1
        assert "gnuplot not found" in capsys.readouterr().err

    def test_zero_weeks_cannot_be_charted(self, runs_file, tmp_path, capsys):
        code = main(_argv(runs_file(RUNS), tmp_path, "--weeks", "0", "--outdir", str(tmp_path / "out")))
        assert code == 2
        assert "without data points" in capsys.readouterr().err

    def test_missing_runs_file(self, tmp_path, capsys):
        code = main(_argv(str(tmp_path / "nope.json"), tmp_path, "--dry-run"))
        assert code == 2
        assert capsys.readouterr().err.startswith("ERROR:")

    def test_bad_config(self, runs_file, tmp_path, capsys):
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("weeks: [1, 2\n", encoding="utf-8")
        code = main([runs_file(RUNS), "--config", str(cfg), "--dry-run"])

        assert code == 2
        assert "invalid YAML" in capsys.readouterr().err
