"""FastAPI routes for loading SVG floors and querying multi-floor routes.

Flow:
- `/load-building` (or `/reload` from the configured floors directory)
  compiles every floor and swaps in the new building only on full success.
- `/floors`, `/floors/{floor_id}/graph`, `/nodes`, `/start-node` expose
  graph data for renderers and destination pickers.
- `/find-path` runs the stairway-aware BFS.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fastapi import FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, model_validator

from floornav.building import BuildingGraph, MissingStartNodeError
from floornav.config import Settings
from floornav.geometry_validation import validate_building, validate_floor_graph
from floornav.loader import FloorLoadError, FloorSource, load_building, load_building_from_dir
from floornav.pathfinding import find_path as find_multi_floor_path
from floornav.utils import floor_summary, serialize_floor, serialize_node, serialize_path_result

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@dataclass
class ServiceState:
    """Latest successfully loaded building and the settings it was built with."""

    building: BuildingGraph | None = None
    settings: Settings = field(default_factory=Settings)


STATE = ServiceState()


class FindPathRequest(BaseModel):
    """Request payload for a multi-floor route.

    Start defaults to the building's designated start node when both
    start fields are omitted.
    """

    end_floor: str = Field(..., min_length=1)
    end_node: str = Field(..., min_length=1)
    start_floor: str | None = None
    start_node: str | None = None

    @model_validator(mode="after")
    def validate_start(self) -> "FindPathRequest":
        """Require start_floor and start_node together."""
        if (self.start_floor is None) != (self.start_node is None):
            raise ValueError("Provide both start_floor and start_node, or neither")
        return self


class RouteStep(BaseModel):
    floor: str
    node: str
    x: float
    y: float
    name: str | None = None


class FindPathResponse(BaseModel):
    """Response payload for multi-floor route requests."""

    path: list[RouteStep]
    stairs_used: list[str]
    stairs: list[str]
    floors: list[str]
    hops: int


def _parse_floor_ids(raw: str | None, filenames: list[str]) -> list[str]:
    """Parse floor id mapping aligned with uploaded files (default: file stems)."""
    if not filenames:
        raise ValueError("At least one file is required")

    if not raw:
        values = [Path(name).stem for name in filenames]
    else:
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError('floor_ids must be valid JSON (e.g. ["Floor 1","Floor 2"])') from exc
        if not isinstance(parsed, list):
            raise ValueError("floor_ids must be a JSON list")
        values = [str(v).strip() for v in parsed]
        if len(values) != len(filenames):
            raise ValueError("floor_ids length must match uploaded files count")

    if any(not v for v in values):
        raise ValueError("floor_ids must be non-empty")
    if len(set(values)) != len(values):
        raise ValueError("floor_ids must be unique")
    return values


def _latest_building_or_400() -> BuildingGraph:
    """Get latest loaded building or raise 400."""
    if STATE.building is None:
        raise HTTPException(status_code=400, detail="No building loaded yet")
    return STATE.building


def _swap_building(building: BuildingGraph) -> dict[str, Any]:
    STATE.building = building
    start_floor, start_node = building.require_start_node()
    return {
        "message": "Building loaded successfully",
        "floor_count": len(building.floors),
        "floors": [floor_summary(building, f) for f in building.floor_ids],
        "start": {"floor": start_floor, "node": start_node},
        "validation_report": validate_building(building),
    }


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is not None:
        STATE.settings = settings

    app = FastAPI(title="floornav API", version=API_VERSION)

    cors_origins = STATE.settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, Any]:
        """Health endpoint with loaded floor count."""
        return {
            "status": "ok",
            "version": app.version,
            "floors": 0 if STATE.building is None else len(STATE.building.floors),
        }

    @app.post("/load-building")
    async def load_building_endpoint(
        files: list[UploadFile] = File(..., description="SVG floor drawings, one per floor"),
        floor_ids: str | None = Form(
            default=None,
            description='JSON array of floor ids aligned with files, e.g. ["Floor 1","Floor 2"]',
        ),
    ) -> dict[str, Any]:
        """Compile uploaded SVG floors in order and replace the current building."""
        if not files:
            raise HTTPException(status_code=400, detail="At least one SVG file is required")

        try:
            names = []
            for idx, upload in enumerate(files):
                if not upload.filename:
                    raise ValueError(f"File at index {idx} has no filename")
                names.append(upload.filename)
            parsed_ids = _parse_floor_ids(floor_ids, names)

            sources = []
            for floor_id, upload in zip(parsed_ids, files):
                raw = await upload.read()
                try:
                    text = raw.decode("utf-8")
                except UnicodeDecodeError as exc:
                    raise ValueError(f"File {upload.filename} is not UTF-8 text") from exc
                sources.append(FloorSource(floor_id=floor_id, svg_text=text))

            building = load_building(sources, settings=STATE.settings)
        except (ValueError, FloorLoadError, MissingStartNodeError) as exc:
            logger.warning("Building load rejected: %s", exc)
            raise HTTPException(status_code=400, detail=f"Building load failed: {exc}") from exc

        return _swap_building(building)

    @app.post("/reload")
    def reload_building() -> dict[str, Any]:
        """Reload every floor from the configured floors directory."""
        floors_dir = STATE.settings.floors_dir
        if floors_dir is None:
            raise HTTPException(status_code=400, detail="FLOORNAV_FLOORS_DIR is not configured")

        try:
            building = load_building_from_dir(floors_dir, settings=STATE.settings)
        except (OSError, ValueError, FloorLoadError, MissingStartNodeError) as exc:
            logger.warning("Reload from %s rejected: %s", floors_dir, exc)
            raise HTTPException(status_code=400, detail=f"Building load failed: {exc}") from exc

        return _swap_building(building)

    @app.get("/floors")
    def get_floors() -> dict[str, Any]:
        """Return loaded floors with graph sizes and stairways."""
        building = _latest_building_or_400()
        return {"floors": [floor_summary(building, f) for f in building.floor_ids]}

    @app.get("/floors/{floor_id}/graph")
    def get_floor_graph(floor_id: str) -> dict[str, Any]:
        """Return render payload and quality report for one floor."""
        building = _latest_building_or_400()
        try:
            graph = building.floor(floor_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Floor '{floor_id}' was not found") from exc

        payload = serialize_floor(graph)
        payload["validation_report"] = validate_floor_graph(graph)
        return payload

    @app.get("/nodes")
    def get_nodes(query: str = Query(default="")) -> dict[str, Any]:
        """Return selectable destinations, filtered by name substring."""
        building = _latest_building_or_400()
        return {"nodes": [serialize_node(node, floor_id) for floor_id, node in building.destinations(query)]}

    @app.get("/start-node")
    def get_start_node() -> dict[str, Any]:
        """Return the designated start node."""
        building = _latest_building_or_400()
        start = building.get_start_node()
        if start is None:
            raise HTTPException(status_code=404, detail="Start node was not found")
        floor_id, node_id = start
        return serialize_node(building.floor(floor_id).node(node_id), floor_id)

    @app.post("/find-path", response_model=FindPathResponse)
    def find_path(payload: FindPathRequest) -> FindPathResponse:
        """Compute the fewest-hop route, crossing floors through stairways."""
        building = _latest_building_or_400()

        if payload.start_floor is not None and payload.start_node is not None:
            start_floor, start_node = payload.start_floor, payload.start_node
        else:
            start = building.get_start_node()
            if start is None:
                raise HTTPException(status_code=400, detail="Start node was not found")
            start_floor, start_node = start

        result = find_multi_floor_path(building, start_floor, start_node, payload.end_floor, payload.end_node)
        if result is None:
            raise HTTPException(status_code=404, detail="No path found")

        return FindPathResponse(**serialize_path_result(building, result))

    return app
