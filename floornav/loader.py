"""Sequential all-or-nothing loading of a building from per-floor SVG files.

Floors are read and registered one at a time in the given order. Any failure
(unreadable file, bad markup, stair mismatch, missing start node) aborts the
whole load, so callers never receive a partially registered building.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from floornav.building import BuildingGraph
from floornav.config import Settings
from floornav.document import GeometryDocument
from floornav.svg_reader import read_svg_document, read_svg_file

logger = logging.getLogger(__name__)


class FloorLoadError(RuntimeError):
    """Loading or registering one floor failed; the building load is aborted."""

    def __init__(self, floor_id: str, source: str, cause: Exception) -> None:
        self.floor_id = floor_id
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to load floor {floor_id!r} from {source}: {cause}")


@dataclass(frozen=True)
class FloorSource:
    """One floor to load: either an SVG path on disk or SVG markup in memory."""

    floor_id: str
    path: Path | None = None
    svg_text: str | None = None

    def describe(self) -> str:
        return str(self.path) if self.path is not None else "<memory>"

    def read(self) -> GeometryDocument:
        if self.svg_text is not None:
            return read_svg_document(self.svg_text)
        if self.path is None:
            raise ValueError(f"Floor {self.floor_id!r} has neither a path nor SVG markup")
        return read_svg_file(self.path)


def new_building(settings: Settings | None = None) -> BuildingGraph:
    """Create an empty BuildingGraph configured from settings."""
    settings = settings or Settings()
    return BuildingGraph(
        tolerance=settings.tolerance,
        label_radius=settings.label_radius,
        wall_marker=settings.wall_marker,
        stair_prefix=settings.stair_prefix,
        start_marker=settings.start_marker,
    )


def load_building(sources: Iterable[FloorSource], settings: Settings | None = None) -> BuildingGraph:
    """Build a fresh BuildingGraph from floor sources.

    Raises:
        ValueError: If no sources are given.
        FloorLoadError: If any floor fails to read or register.
        MissingStartNodeError: If no floor defines the start node.
    """
    ordered = list(sources)
    if not ordered:
        raise ValueError("At least one floor source is required")

    building = new_building(settings)
    for source in ordered:
        try:
            building.add_floor(source.floor_id, source.read())
        except (OSError, ValueError) as exc:
            raise FloorLoadError(source.floor_id, source.describe(), exc) from exc

    start = building.require_start_node()
    logger.info("Loaded %d floor(s); start node %s on floor %s", len(building.floors), start[1], start[0])
    return building


def discover_floor_sources(directory: str | Path) -> list[FloorSource]:
    """List `*.svg` files of a directory, sorted by name, floor id = file stem."""
    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(f"Floors directory not found: {root}")
    return [FloorSource(floor_id=p.stem, path=p) for p in sorted(root.glob("*.svg")) if p.is_file()]


def load_building_from_dir(directory: str | Path, settings: Settings | None = None) -> BuildingGraph:
    return load_building(discover_floor_sources(directory), settings=settings)
