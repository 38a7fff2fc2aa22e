from __future__ import annotations
import re
import xml.etree.ElementTree as ET
from typing import List, Tuple

# Titles gnuplot adds on its own; they show up as hover text in browsers
TITLE_PATTERNS = [
    re.compile(r"<title>gnuplot_plot_\d+</title>"),
    re.compile(r"<title>Gnuplot</title>"),
]


def clean_svg(svg: str) -> str:
    for pattern in TITLE_PATTERNS:
        svg = pattern.sub("", svg)
    return svg


def point_svg(px: int, py: int, title: str) -> str:
    """
    One hoverable point:
      <g class="point" transform="translate(px,py)">
        <circle r="6" class="chart-circle"><title>...</title></circle>
        <text y="-20" class="chart-tooltip">...</text>
      </g>
    """
    g = ET.Element("g", {"class": "point", "transform": f"translate({px},{py})"})
    circle = ET.SubElement(g, "circle", {"r": "6", "class": "chart-circle"})
    ET.SubElement(circle, "title").text = title
    ET.SubElement(g, "text", {"y": "-20", "class": "chart-tooltip"}).text = title
    return ET.tostring(g, encoding="unicode")


def points_svg(points: List[Tuple[int, int, str]]) -> str:
    return "\n".join(point_svg(px, py, title) for px, py, title in points)


def append_points(svg: str, points: List[Tuple[int, int, str]]) -> str:
    """Insert the point overlays right before the closing </svg>."""
    head, sep, tail = svg.rpartition("</svg>")
    if not sep:
        raise ValueError("SVG markup has no closing </svg> tag")
    return f"{head}{points_svg(points)}\n{sep}{tail}"
