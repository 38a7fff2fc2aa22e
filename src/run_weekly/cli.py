from __future__ import annotations
import argparse
import datetime as dt
import json
import logging
import os
import sys
from typing import Any, Dict

from .chart import EmptySeriesError
from .config import DEFAULT_CONFIG_PATH, load_config
from .gnuplot import RenderingUnavailable, generate_svg
from .heatmap import heatmap_cells
from .runs import load_runs_from_file
from .weekly_stats import weekly_stats

log = logging.getLogger(__name__)


def summary_json(stats: Dict[str, Any]) -> Dict[str, Any]:
    """Stats without the heatmap hierarchy, with dates as ISO strings."""
    out = {k: v for k, v in stats.items() if k != "dates"}
    if out["max_week_start"] is not None:
        out["max_week_start"] = out["max_week_start"].isoformat()
    return out


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Weekly running distance chart and heatmap data")
    parser.add_argument("runs", nargs="?", default=os.environ.get("RUNS_FILE", "runs.json"),
                        help="Path to cached runs JSON. Defaults to RUNS_FILE or runs.json")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="YAML config file")
    parser.add_argument("--weeks", type=int, help="Number of weeks in the chart, current week included")
    parser.add_argument("--as-of", help="YYYY-MM-DD; last day of the series (default: today)")
    parser.add_argument("--outdir", default=os.environ.get("RUN_WEEKLY_OUTDIR", "out"), help="Directory for outputs")
    parser.add_argument("--gnuplot", help="gnuplot executable")
    parser.add_argument("--timeout", type=int, help="gnuplot timeout seconds")
    parser.add_argument("--dry-run", action="store_true", help="Print weekly stats and exit without rendering")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    try:
        cfg = load_config(args.config)
        runs = load_runs_from_file(args.runs)
        today = dt.date.fromisoformat(args.as_of) if args.as_of else dt.date.today()
        weeks = args.weeks if args.weeks is not None else cfg["weeks"]
        stats = weekly_stats(runs, weeks, today)
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    summary = summary_json(stats)
    if args.dry_run:
        print(json.dumps(summary, indent=2, ensure_ascii=False))
        return 0

    outdir = os.path.abspath(args.outdir)
    os.makedirs(outdir, exist_ok=True)

    try:
        svg = generate_svg(
            stats["labels"],
            stats["values"],
            stats["average"],
            cfg["chart"],
            workdir=outdir,
            binary=args.gnuplot or cfg["gnuplot"]["binary"],
            timeout=args.timeout or cfg["gnuplot"]["timeout"],
        )
    except EmptySeriesError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except RenderingUnavailable as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    svg_path = os.path.join(outdir, "weekly.svg")
    with open(svg_path, "w", encoding="utf-8") as f:
        f.write(svg)

    stats_path = os.path.join(outdir, "stats.json")
    with open(stats_path, "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2, ensure_ascii=False)

    heatmap_path = os.path.join(outdir, "heatmap.json")
    cells = heatmap_cells(stats["dates"], cfg["heatmap"]["color_from"], cfg["heatmap"]["color_to"])
    with open(heatmap_path, "w", encoding="utf-8") as f:
        json.dump(cells, f, indent=2)

    log.info("Current week: %.1f km, average %.1f km, best week %s (%.1f km)",
             stats["current_week_km"], stats["average"], stats["max_week_label"] or "-", stats["maximum"])
    print(f"Wrote {svg_path}, {stats_path}, {heatmap_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
