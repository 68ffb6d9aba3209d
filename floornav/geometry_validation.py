"""Quality checks for built floor graphs and the assembled building."""

from __future__ import annotations

from collections import Counter
from typing import Any

from shapely.geometry import LineString, Point

from floornav.building import BuildingGraph
from floornav.floor_graph import FloorGraph, NodeRole, WallLine


def _edge_line(graph: FloorGraph, source: str, target: str) -> LineString:
    a = graph.node(source)
    b = graph.node(target)
    return LineString([(a.x, a.y), (b.x, b.y)])


def _wall_lines(graph: FloorGraph) -> list[LineString]:
    return [
        LineString([(w.x1, w.y1), (w.x2, w.y2)])
        for w in graph.walls
        if isinstance(w, WallLine) and (w.x1, w.y1) != (w.x2, w.y2)
    ]


def _floor_issues(graph: FloorGraph, wall_touch_gap: float) -> tuple[list[dict[str, Any]], int]:
    issues: list[dict[str, Any]] = []
    floor = graph.floor_id

    for node in graph.nodes.values():
        if node.degree == 0:
            issues.append(
                {
                    "kind": "isolated_node",
                    "severity": "warning",
                    "floor": floor,
                    "node_id": node.id,
                    "message": "Node has no edges (segment shorter than merge tolerance)",
                }
            )
        elif node.is_leaf and not node.name:
            issues.append(
                {
                    "kind": "unnamed_leaf",
                    "severity": "info",
                    "floor": floor,
                    "node_id": node.id,
                    "message": "Dead-end node has no label",
                }
            )

    seen = Counter(tuple(sorted((e.source, e.target))) for e in graph.edges)
    for (a, b), count in seen.items():
        if count > 1:
            issues.append(
                {
                    "kind": "duplicate_edge",
                    "severity": "info",
                    "floor": floor,
                    "edge": [a, b],
                    "message": f"Edge drawn {count} times",
                }
            )

    # Walkable edges crossing walls away from either endpoint.
    walls = _wall_lines(graph)
    wall_checks = 0
    for edge in graph.edges:
        line = _edge_line(graph, edge.source, edge.target)
        ends = [Point(line.coords[0]), Point(line.coords[-1])]
        for wall in walls:
            wall_checks += 1
            if not line.intersects(wall):
                continue
            inter = line.intersection(wall)
            if inter.is_empty:
                continue
            if inter.geom_type == "Point" and any(p.distance(inter) <= wall_touch_gap for p in ends):
                continue
            issues.append(
                {
                    "kind": "edge_crosses_wall",
                    "severity": "warning",
                    "floor": floor,
                    "edge": [edge.source, edge.target],
                    "message": "Walkable edge crosses wall geometry",
                }
            )
            break

    return issues, wall_checks


def validate_floor_graph(graph: FloorGraph, wall_touch_gap: float = 0.5) -> dict[str, Any]:
    """Report topology and wall-crossing issues of one floor."""
    issues, wall_checks = _floor_issues(graph, wall_touch_gap)
    return _report(issues, {"floors": 1, "wall_checks": wall_checks})


def validate_building(building: BuildingGraph, wall_touch_gap: float = 0.5) -> dict[str, Any]:
    """Report per-floor issues plus cross-floor stair and start-node issues."""
    issues: list[dict[str, Any]] = []
    wall_checks = 0
    for graph in building.floors.values():
        floor_issues, checks = _floor_issues(graph, wall_touch_gap)
        issues.extend(floor_issues)
        wall_checks += checks

    for name, floors in building.stair_connections.items():
        if len(floors) < 2:
            issues.append(
                {
                    "kind": "stair_single_floor",
                    "severity": "warning",
                    "stair": name,
                    "floors": list(floors.keys()),
                    "message": "Stairway appears on one floor only",
                }
            )

    starts = [(f, n.id) for f, n in building.get_all_nodes() if n.role is NodeRole.START]
    if not starts:
        issues.append({"kind": "missing_start", "severity": "error", "message": "No start node defined"})
    elif len(starts) > 1:
        issues.append(
            {
                "kind": "duplicate_start",
                "severity": "warning",
                "nodes": [{"floor": f, "node_id": n} for f, n in starts],
                "message": "Several start nodes defined; the first one is used",
            }
        )

    return _report(issues, {"floors": len(building.floors), "wall_checks": wall_checks})


def _report(issues: list[dict[str, Any]], summary: dict[str, Any]) -> dict[str, Any]:
    error_count = sum(1 for issue in issues if issue.get("severity") == "error")
    warning_count = sum(1 for issue in issues if issue.get("severity") == "warning")
    return {
        "ok": error_count == 0,
        "summary": {**summary, "errors": error_count, "warnings": warning_count},
        "issues": issues,
    }
