from __future__ import annotations
import dataclasses as dc
import datetime as dt
import math
from typing import List, Tuple

from .calendar_week import week_start


HEADROOM = 1.15
Y_TICKS = 6

# Month abbreviations for the x axis, Jan..Dec
MONTH_NAMES = ["янв", "фев", "мар", "апр", "май", "июн", "июл", "авг", "сен", "окт", "ноя", "дек"]


class EmptySeriesError(ValueError):
    """Raised when chart geometry is requested for a series without points."""


@dc.dataclass
class ChartParams:
    # Canvas, in px
    img_w: int = 700
    img_h: int = 400
    left_margin: int = 42
    right_margin: int = 21
    top_margin: int = 15
    bottom_margin: int = 30
    # Passed to gnuplot as-is
    font: str = "Sans,10"
    axis_color: str = "#777777"
    axis_width: float = 0.5
    grid_color: str = "#dddddd"
    grid_width: float = 1.0
    line_color: str = "#FF8C00"
    line_width: float = 2.0
    fill_opacity: float = 0.2
    avg_line_color: str = "#333333"
    avg_line_width: float = 0.3

    @property
    def plot_w(self) -> int:
        return self.img_w - self.left_margin - self.right_margin

    @property
    def plot_h(self) -> int:
        return self.img_h - self.top_margin - self.bottom_margin


def month_starts_between(start_date: dt.date, end_date: dt.date) -> List[dt.date]:
    """First day of every month from start_date's month up to end_date."""
    months = []
    d = dt.date(start_date.year, start_date.month, 1)
    while d <= end_date:
        months.append(d)
        d = dt.date(d.year + 1, 1, 1) if d.month == 12 else dt.date(d.year, d.month + 1, 1)
    return months


def xtics(labels: List[str]) -> List[Tuple[str, str]]:
    """
    (month name, ISO Monday) pairs, one per month covered by labels.
    A month's tick sits on the Monday of the week containing its 1st.
    """
    if not labels:
        return []
    first = dt.date.fromisoformat(labels[0])
    last = dt.date.fromisoformat(labels[-1])
    return [
        (MONTH_NAMES[d.month - 1], week_start(d).isoformat())
        for d in month_starts_between(first, last)
    ]


class ChartGeometry:
    """
    Pixel geometry of the weekly chart.

    Both the gnuplot script (y range, y step, x ticks) and the SVG overlay
    points (px/py) are derived from one instance, so the overlay circles land
    on the plotted line.
    """

    def __init__(self, labels: List[str], values: List[float], params: ChartParams):
        if not values:
            raise EmptySeriesError("cannot lay out a chart without data points")
        if len(labels) != len(values):
            raise ValueError(f"got {len(labels)} labels for {len(values)} values")
        self.labels = list(labels)
        self.values = [float(v) for v in values]
        self.params = params

    @property
    def max(self) -> float:
        return max(self.values)

    @property
    def padded_max(self) -> float:
        # a flat zero series still needs a non-empty y range
        return self.max * HEADROOM if self.max > 0 else 1.0

    @property
    def step(self) -> int:
        return max(math.ceil(self.max / Y_TICKS), 1)

    @property
    def weeks(self) -> int:
        return len(self.values)

    def xtics(self) -> List[Tuple[str, str]]:
        return xtics(self.labels)

    def px(self, index: int) -> int:
        p = self.params
        if self.weeks == 1:
            return round(p.left_margin + p.plot_w / 2)
        return round(p.left_margin + p.plot_w * (index / (self.weeks - 1)))

    def py(self, index: int) -> int:
        p = self.params
        return round(p.top_margin + p.plot_h * (1 - self.values[index] / self.padded_max))

    def points(self) -> List[Tuple[int, int, str]]:
        """(x, y, tooltip) per data point, oldest first."""
        return [
            (self.px(i), self.py(i), f"{round(v, 1)} км ({label})")
            for i, (label, v) in enumerate(zip(self.labels, self.values))
        ]
