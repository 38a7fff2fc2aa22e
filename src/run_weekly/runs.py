from __future__ import annotations
import json
import logging
from typing import Any, Dict, List

from .weekly_stats import record_date

log = logging.getLogger(__name__)

RUN_FIELDS = ("id", "name", "distance", "moving_time", "start_date_local")


def _strip_trailing_z(value: str | None) -> str | None:
    if not value:
        return value
    s = str(value)
    return s[:-1] if s.endswith("Z") else s


def normalize_run(run: Dict[str, Any]) -> Dict[str, Any]:
    """
    Ensure the fields the weekly stats rely on:
    - start_date_local: ISO without Z
    - distance: float meters (0.0 if missing)
    """
    out = dict(run)
    if "start_date_local" in out:
        out["start_date_local"] = _strip_trailing_z(out["start_date_local"])
    try:
        out["distance"] = float(out.get("distance") or 0.0)
    except (TypeError, ValueError):
        out["distance"] = 0.0
    return out


def filter_runs(activities: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep running activities, trimmed to the fields the charts use."""
    return [
        {k: a[k] for k in RUN_FIELDS if k in a}
        for a in activities
        if a.get("sport_type", a.get("type")) == "Run"
    ]


def load_runs_from_file(path: str) -> List[Dict[str, Any]]:
    """
    Read cached activities from a JSON file: either a list, or an object with
    an 'activities' array. Non-runs are dropped when the file still carries
    sport types, runs without a parsable start date are skipped with a warning.
    Result is sorted newest first.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and "activities" in data:
        activities = data["activities"]
    elif isinstance(data, list):
        activities = data
    else:
        raise ValueError("Runs file must be a list of activities or an object with an 'activities' array")

    if any("sport_type" in a or "type" in a for a in activities):
        activities = filter_runs(activities)

    runs = []
    for a in activities:
        run = normalize_run(a)
        if record_date(run) is None:
            log.warning("Skipping run %s without a valid start date", run.get("id", "?"))
            continue
        runs.append(run)

    runs.sort(key=lambda r: str(r.get("start_date_local") or r.get("start_date")), reverse=True)
    log.info("Loaded %d run(s) from %s", len(runs), path)
    return runs
