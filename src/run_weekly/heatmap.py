from __future__ import annotations
import datetime as dt
from typing import Any, Dict, List, Sequence

from .calendar_week import year_week_key
from .weekly_stats import DateHierarchy, record_distance

# (upper bound in meters, grade); anything longer is a marathon
GRADES = [
    (5_000, "just"),
    (10_000, "ok"),
    (14_000, "good"),
    (18_000, "perfect"),
    (23_000, "long-s"),
    (28_000, "long-m"),
    (41_000, "long-l"),
]


def percentage(lo: float, hi: float, x: float) -> float:
    """Position of x between lo and hi in percent, clamped to [0, 100]."""
    if hi == lo:
        return 100.0 if x >= hi else 0.0
    pct = (x - lo) / (hi - lo) * 100
    return min(max(pct, 0.0), 100.0)


def pick_color(c1: Sequence[int], c2: Sequence[int], t: float) -> List[int]:
    """Blend two RGB triples, t=1 gives c1 and t=0 gives c2."""
    return [round(a * t + b * (1 - t)) for a, b in zip(c1, c2)]


def distance_to_grade(distance: float) -> str:
    for limit, label in GRADES:
        if distance < limit:
            return label
    return "marathon"


def heatmap_cells(
    dates: DateHierarchy,
    color_from: Sequence[int],
    color_to: Sequence[int],
) -> List[Dict[str, Any]]:
    """
    Flatten the year/week/day hierarchy into one cell per day, in calendar order.

    Days with runs get a grade and a color scaled against the longest day of
    the whole span; empty days have distance 0 and no grade or color.
    """
    days = []
    for year in sorted(dates):
        for monday in sorted(dates[year]):
            for iso in sorted(dates[year][monday]):
                runs = dates[year][monday][iso]
                days.append((iso, monday, sum(record_distance(r) for r in runs), len(runs)))

    longest = max((d for _, _, d, _ in days), default=0.0)

    cells = []
    for iso, monday, distance, count in days:
        cell: Dict[str, Any] = {
            "date": iso,
            "week_start": monday.isoformat(),
            "week_key": year_week_key(dt.date.fromisoformat(iso)),
            "distance": distance,
            "runs": count,
            "grade": None,
            "color": None,
        }
        if count:
            t = percentage(0.0, longest, distance) / 100
            cell["grade"] = distance_to_grade(distance)
            cell["color"] = "rgb({},{},{})".format(*pick_color(color_to, color_from, t))
        cells.append(cell)
    return cells
