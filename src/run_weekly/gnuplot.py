"""
Weekly chart rendering through gnuplot.

generate_svg() writes the two-column data file, builds a PlotScript from the
chart geometry, pipes its text into gnuplot and returns the produced SVG with
gnuplot's own <title> elements removed and one hover point per week added.

Raises RenderingUnavailable if gnuplot is missing, fails, times out, or its
output cannot be read.
"""
from __future__ import annotations
import dataclasses as dc
import logging
import os
import subprocess
from typing import List, Tuple

from .chart import ChartGeometry, ChartParams
from .svg import append_points, clean_svg

log = logging.getLogger(__name__)

GNUPLOT_BINARY = "gnuplot"
DAT_FILE = "weekly.dat"
SERIES_TITLE = "Км за неделю"
AVG_TITLE = "Сред. километраж"


class RenderingUnavailable(RuntimeError):
    """gnuplot could not produce the chart."""


@dc.dataclass
class PlotScript:
    out_svg: str
    dat_file: str
    xtics: List[Tuple[str, str]]
    y_max: float
    y_step: int
    stats_max: float
    avg: float
    params: ChartParams

    def render(self) -> str:
        p = self.params
        xtics = ", ".join(f'"{label}" "{pos}"' for label, pos in self.xtics)
        lines = [
            f"stats '{self.dat_file}' using 2 nooutput",
            "unset title",
            "",
            f"set terminal svg size {p.img_w},{p.img_h} enhanced font '{p.font}'",
            f"set output '{self.out_svg}'",
            "",
            "set xdata time",
            "set timefmt '%Y-%m-%d'",
            "set format x ''",
            "",
            "unset border",
            f"set border 3 front lc rgb '{p.axis_color}' lw {p.axis_width}",
            "",
            f"set tics textcolor rgb '{p.axis_color}'",
            "",
            f"set xtics font '{p.font}' offset 0,0.4 nomirror",
            f"set xtics ({xtics})",
            "",
            f"set yrange [0:{self.y_max}]",
            f"set ytics font '{p.font}' 0,{self.y_step},{self.stats_max} nomirror",
            f"set ytics add ({self.stats_max})",
            "set format y '%.0f км'",
            "",
            f"set style line 2 lc rgb '{p.avg_line_color}' lw {p.avg_line_width} dt (15,30)",
            "",
            f"set grid ytics lt 0 lw {p.grid_width} lc rgb '{p.grid_color}' dt 2",
            f"set grid xtics lt 0 lw {p.grid_width} lc rgb '{p.grid_color}' dt 2",
            "",
            f"set style line 1 lc rgb '{p.line_color}' lw {p.line_width} pt 7 ps 1",
            f"set style fill transparent solid {p.fill_opacity} border -1",
            "",
            "set lmargin 6",
            "",
            f"plot '{self.dat_file}' using 1:2 with filledcurves y1=0 ls 1 title \"\", \\",
            f"    '' using 1:2 with linespoints ls 1 title \"{SERIES_TITLE}\", \\",
            f"    '' using 1:({self.avg}) with lines ls 2 title \"{AVG_TITLE}\"",
        ]
        return "\n".join(lines) + "\n"


def build_script(geometry: ChartGeometry, avg: float, out_svg: str, dat_file: str = DAT_FILE) -> PlotScript:
    return PlotScript(
        out_svg=out_svg,
        dat_file=dat_file,
        xtics=geometry.xtics(),
        y_max=geometry.padded_max,
        y_step=geometry.step,
        stats_max=geometry.max,
        avg=avg,
        params=geometry.params,
    )


def write_dat(path: str, labels: List[str], values: List[float]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(f"{d} {v}" for d, v in zip(labels, values)))


def run_gnuplot(script: str, binary: str = GNUPLOT_BINARY, cwd: str | None = None, timeout: int = 30) -> None:
    """Feed script to gnuplot on stdin and wait for it to exit."""
    log.debug("Running %s in %s", binary, cwd or os.getcwd())
    try:
        proc = subprocess.run(
            [binary],
            input=script,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise RenderingUnavailable(f"gnuplot not found: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise RenderingUnavailable(f"gnuplot did not finish within {timeout}s") from e

    if proc.stderr:
        log.debug("gnuplot stderr: %s", proc.stderr.strip())
    if proc.returncode != 0:
        raise RenderingUnavailable(f"gnuplot exited with {proc.returncode}: {proc.stderr.strip()}")


def generate_svg(
    labels: List[str],
    values: List[float],
    avg: float,
    params: ChartParams,
    workdir: str = ".",
    out_svg: str = "weekly.svg",
    binary: str = GNUPLOT_BINARY,
    timeout: int = 30,
) -> str:
    """
    Render the weekly chart and return the cleaned SVG markup.
    weekly.dat and out_svg are (over)written inside workdir.
    """
    geometry = ChartGeometry(labels, values, params)

    os.makedirs(workdir, exist_ok=True)
    write_dat(os.path.join(workdir, DAT_FILE), geometry.labels, values)

    script = build_script(geometry, avg, out_svg)
    run_gnuplot(script.render(), binary=binary, cwd=workdir, timeout=timeout)

    try:
        with open(os.path.join(workdir, out_svg), "r", encoding="utf-8") as f:
            raw_svg = f.read()
    except OSError as e:
        raise RenderingUnavailable(f"cannot read gnuplot output {out_svg}: {e}") from e

    try:
        return append_points(clean_svg(raw_svg), geometry.points())
    except ValueError as e:
        raise RenderingUnavailable(str(e)) from e
