"""Abstract per-floor geometry document consumed by the graph builder."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

DEFAULT_WALL_MARKER = "#ff0000"

_COLOR_ALIASES = {
    "red": "#ff0000",
    "#f00": "#ff0000",
    "rgb(255,0,0)": "#ff0000",
}


@dataclass(slots=True)
class Segment:
    """Straight drawn line between two points."""

    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str | None = None


@dataclass(slots=True)
class Curve:
    """Free-form path record kept as raw path data."""

    path_data: str
    stroke: str | None = None


@dataclass(slots=True)
class Label:
    """Positioned text annotation."""

    x: float
    y: float
    text: str
    fill: str | None = None


@dataclass(slots=True)
class GeometryDocument:
    """Line, curve and label geometry of one floor drawing."""

    segments: list[Segment] = field(default_factory=list)
    curves: list[Curve] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)


def normalize_marker(marker: str | None) -> str | None:
    """Lower-case a colour marker and fold common spellings of the same colour."""
    if marker is None:
        return None
    value = re.sub(r"\s+", "", marker).lower()
    if not value:
        return None
    return _COLOR_ALIASES.get(value, value)


def is_wall_marker(marker: str | None, wall_marker: str = DEFAULT_WALL_MARKER) -> bool:
    """Return True when marker denotes wall/annotation geometry."""
    value = normalize_marker(marker)
    return value is not None and value == normalize_marker(wall_marker)
