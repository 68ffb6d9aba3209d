"""Serialization helpers shared by the API and CLI-style callers.

Purpose:
- Convert graph model objects into JSON-friendly dictionaries.
- Attach drawing coordinates to path steps for renderers.
"""

from __future__ import annotations

from typing import Any, Iterable

from floornav.building import BuildingGraph
from floornav.floor_graph import FloorGraph, Node
from floornav.pathfinding import PathResult, PathStep


def serialize_node(node: Node, floor_id: str | None = None) -> dict[str, Any]:
    """Convert a Node into a dictionary, optionally tagged with its floor."""
    payload: dict[str, Any] = {
        "id": node.id,
        "x": node.x,
        "y": node.y,
        "name": node.name,
        "role": node.role.value,
        "degree": node.degree,
    }
    if floor_id is not None:
        payload["floor"] = floor_id
    return payload


def serialize_floor(graph: FloorGraph) -> dict[str, Any]:
    """Full render payload of one floor: nodes, edges, walls and labels."""
    return {
        "floor_id": graph.floor_id,
        "nodes": [serialize_node(n) for n in graph.nodes.values()],
        "edges": [{"source": e.source, "target": e.target} for e in graph.edges],
        "walls": [w.as_dict() for w in graph.walls],
        "labels": [{"x": lb.x, "y": lb.y, "text": lb.text} for lb in graph.labels],
    }


def floor_summary(building: BuildingGraph, floor_id: str) -> dict[str, Any]:
    graph = building.floor(floor_id)
    stairs = sorted(name for name, floors in building.stair_connections.items() if floor_id in floors)
    return {
        "floor_id": floor_id,
        "node_count": len(graph.nodes),
        "edge_count": len(graph.edges),
        "wall_count": len(graph.walls),
        "stairs": stairs,
    }


def to_serializable_path(building: BuildingGraph, path: Iterable[PathStep]) -> list[dict[str, Any]]:
    """Convert path steps to dictionaries carrying node position and name."""
    out: list[dict[str, Any]] = []
    for step in path:
        node = building.floor(step.floor).node(step.node)
        out.append({"floor": step.floor, "node": step.node, "x": node.x, "y": node.y, "name": node.name})
    return out


def serialize_path_result(building: BuildingGraph, result: PathResult) -> dict[str, Any]:
    return {
        "path": to_serializable_path(building, result.path),
        "stairs_used": list(result.stairs_used),
        "stairs": result.unique_stairs(),
        "floors": result.floors_visited(),
        "hops": result.hops,
    }
