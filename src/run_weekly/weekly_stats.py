"""
Weekly running statistics.

weekly_stats() takes run records (mappings with a local start date-time and a
distance in meters) and returns both the weekly series and summary numbers:

    {
        "labels": ["2025-02-17", ..., "2025-04-07"],   # Mondays, oldest first
        "values": [21.4, ..., 12.0],                     # km per week
        "dates": {2025: {date(2025, 4, 7): {"2025-04-07": [run, ...]}}},
        "current_week_km": 12.0,
        "total": 85.6,
        "average": 10.7,
        "maximum": 21.4,
        "max_index": 0,
        "max_week_start": date(2025, 2, 17),
        "max_week_label": "17.02.2025",
    }

The last week of the series is the current, usually partial, week. It is shown
in the series but left out of total/average/maximum.
"""
from __future__ import annotations
import datetime as dt
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .calendar_week import week_start


DateHierarchy = Dict[int, Dict[dt.date, Dict[str, List[Mapping[str, Any]]]]]


# ---------------------------
# Record accessors
# ---------------------------

def _local_start_iso(obj: Mapping[str, Any]) -> Optional[str]:
    for k in ("start_date_local", "start_date"):
        v = obj.get(k)
        if isinstance(v, str) and len(v) >= 10:
            return v
    return None


def _parse_dt(s: Optional[str]) -> Optional[dt.datetime]:
    if not s:
        return None
    s2 = s.replace("Z", "")
    try:
        return dt.datetime.fromisoformat(s2)
    except ValueError:
        try:
            return dt.datetime.strptime(s2[:10], "%Y-%m-%d")
        except ValueError:
            return None


def record_date(obj: Mapping[str, Any]) -> Optional[dt.date]:
    """Local calendar date of a run, or None when it has no usable start."""
    for k in ("start_date_local", "start_date"):
        v = obj.get(k)
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, dt.date):
            return v
    parsed = _parse_dt(_local_start_iso(obj))
    return parsed.date() if parsed else None


def record_distance(obj: Mapping[str, Any]) -> float:
    v = obj.get("distance")
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, str):
        try:
            return float(v)
        except ValueError:
            pass
    return 0.0


# ---------------------------
# Series
# ---------------------------

def build_week_map(
    runs: Iterable[Mapping[str, Any]],
    start_date: dt.date,
    end_date: dt.date,
) -> Dict[dt.date, float]:
    """Sum km per Monday for runs dated within [start_date, end_date]."""
    week_map: Dict[dt.date, float] = defaultdict(float)
    for r in runs:
        d = record_date(r)
        if d is None or not (start_date <= d <= end_date):
            continue
        week_map[week_start(d)] += record_distance(r) / 1000.0
    return week_map


def build_labels(week0: dt.date, weeks: int) -> List[str]:
    return [(week0 - dt.timedelta(days=7 * (weeks - 1 - i))).isoformat() for i in range(weeks)]


def build_values(labels: List[str], week_map: Mapping[dt.date, float]) -> List[float]:
    return [round(week_map.get(dt.date.fromisoformat(d), 0.0), 1) for d in labels]


def compute_stats(
    labels: List[str],
    values: List[float],
) -> Tuple[float, float, float, int, Optional[dt.date], str]:
    """
    Return (total, average, maximum, max_index, max_week_start, max_week_label).
    Ties on the maximum go to the earliest week. An empty series yields zeros
    and no max week.
    """
    if not values:
        return 0.0, 0.0, 0.0, 0, None, ""

    total = float(sum(values))
    avg = total / len(values)
    max_km = float(max(values))
    max_idx = values.index(max_km)
    max_date = dt.date.fromisoformat(labels[max_idx])
    return total, avg, max_km, max_idx, max_date, max_date.strftime("%d.%m.%Y")


# ---------------------------
# Heatmap hierarchy
# ---------------------------

def build_dates_hierarchy(runs: List[Mapping[str, Any]]) -> DateHierarchy:
    """
    year -> Monday -> ISO day -> [runs].

    Every day from Jan 1 of the earliest run's year to Dec 31 of the latest
    run's year gets a (possibly empty) bucket. Runs are appended in input order.
    """
    dated = [(record_date(r), r) for r in runs]
    dated = [(d, r) for d, r in dated if d is not None]
    if not dated:
        return {}

    first = min(d for d, _ in dated)
    last = max(d for d, _ in dated)
    day = dt.date(first.year, 1, 1)
    span_end = dt.date(last.year, 12, 31)

    dates: DateHierarchy = {}
    while day <= span_end:
        dates.setdefault(day.year, {}).setdefault(week_start(day), {})[day.isoformat()] = []
        day += dt.timedelta(days=1)

    for d, r in dated:
        dates[d.year][week_start(d)][d.isoformat()].append(r)

    return dates


# ---------------------------
# Entry point
# ---------------------------

def weekly_stats(runs: List[Mapping[str, Any]], weeks: int, today: dt.date) -> Dict[str, Any]:
    """
    Weekly km series for the `weeks` weeks ending with the week of `today`,
    plus summary stats and the heatmap date hierarchy.
    """
    if weeks < 0:
        raise ValueError(f"weeks must be >= 0, got {weeks}")

    # the current week always counts from its Monday, even for a 1-week series
    start_date = min(today - dt.timedelta(days=7 * (weeks - 1)), week_start(today))

    week_map = build_week_map(runs, start_date, today)
    labels = build_labels(week_start(today), weeks)
    values = build_values(labels, week_map)
    dates = build_dates_hierarchy(runs)

    total, avg, max_km, max_idx, max_date, max_label = compute_stats(labels[:-1], values[:-1])

    return {
        "labels": labels,
        "values": values,
        "dates": dates,
        "current_week_km": values[-1] if values else 0.0,
        "total": total,
        "average": avg,
        "maximum": max_km,
        "max_index": max_idx,
        "max_week_start": max_date,
        "max_week_label": max_label,
    }
