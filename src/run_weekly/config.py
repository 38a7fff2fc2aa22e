from __future__ import annotations
import dataclasses as dc
import os

import yaml

from .chart import ChartParams

DEFAULT_CONFIG_PATH = ".runweekly.yaml"

DEFAULTS = {
    "weeks": 52,
    "heatmap": {"color_from": [0, 70, 6], "color_to": [255, 255, 55]},
    "gnuplot": {"binary": "gnuplot", "timeout": 30},
}


def _chart_params(section: dict) -> ChartParams:
    known = {f.name: f for f in dc.fields(ChartParams)}
    unknown = sorted(set(section) - set(known))
    if unknown:
        raise ValueError(f"Unknown chart option(s): {', '.join(unknown)}")
    kwargs = {}
    for name, value in section.items():
        default = known[name].default
        kwargs[name] = type(default)(value) if isinstance(default, (int, float)) else str(value)
    return ChartParams(**kwargs)


def _section(data: dict, name: str, path: str) -> dict:
    # "chart:" with nothing under it loads as None
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{path}: {name} must be a mapping")
    return section


def load_config(path: str = DEFAULT_CONFIG_PATH) -> dict:
    """
    Read the YAML config, falling back to defaults for a missing file or keys.

    Returns {"weeks": int, "chart": ChartParams, "heatmap": {...}, "gnuplot": {...}}.
    """
    data = {}
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"{path}: invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")

    h = _section(data, "heatmap", path)
    g = _section(data, "gnuplot", path)
    try:
        weeks = int(data.get("weeks", DEFAULTS["weeks"]))
    except (TypeError, ValueError) as e:
        raise ValueError(f"{path}: weeks must be an integer") from e
    return {
        "weeks": weeks,
        "chart": _chart_params(_section(data, "chart", path)),
        "heatmap": {
            "color_from": [int(c) for c in h.get("color_from", DEFAULTS["heatmap"]["color_from"])],
            "color_to": [int(c) for c in h.get("color_to", DEFAULTS["heatmap"]["color_to"])],
        },
        "gnuplot": {
            "binary": str(g.get("binary", DEFAULTS["gnuplot"]["binary"])),
            "timeout": int(g.get("timeout", DEFAULTS["gnuplot"]["timeout"])),
        },
    }
