"""Floor graph model and the geometry-to-graph builder.

Purpose:
- Turn one floor's walkable line segments into an undirected node/edge graph.
- Keep wall-marked lines and paths aside as render-only geometry.
- Attach label text to nearby leaf nodes as waypoint names.

Usage example:
    >>> from floornav.document import GeometryDocument, Label, Segment
    >>> from floornav.floor_graph import build_floor_graph
    >>> doc = GeometryDocument(
    ...     segments=[Segment(0, 0, 10, 0)],
    ...     labels=[Label(11, 1, "L1")],
    ... )
    >>> graph = build_floor_graph("F1", doc)
    >>> graph.node("N2").name
    'L1'
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from floornav.document import DEFAULT_WALL_MARKER, GeometryDocument, Label, is_wall_marker
from floornav.geometry_index import DEFAULT_TOLERANCE, GeometryIndex

logger = logging.getLogger(__name__)

DEFAULT_LABEL_RADIUS = 10.0
DEFAULT_STAIR_PREFIX = "L"
DEFAULT_START_MARKER = "0"


class NodeRole(str, Enum):
    """Routing role derived from a node's name."""

    PLAIN = "plain"
    STAIR = "stair"
    START = "start"


def classify_name(
    name: str | None,
    stair_prefix: str = DEFAULT_STAIR_PREFIX,
    start_marker: str = DEFAULT_START_MARKER,
) -> NodeRole:
    """Map a waypoint name to its routing role."""
    if not name:
        return NodeRole.PLAIN
    if name == start_marker:
        return NodeRole.START
    if stair_prefix and name.startswith(stair_prefix):
        return NodeRole.STAIR
    return NodeRole.PLAIN


@dataclass(slots=True)
class Node:
    """Walkable position on one floor."""

    id: str
    x: float
    y: float
    name: str | None = None
    role: NodeRole = NodeRole.PLAIN
    neighbors: list[str] = field(default_factory=list)

    @property
    def degree(self) -> int:
        return len(self.neighbors)

    @property
    def is_leaf(self) -> bool:
        return len(self.neighbors) == 1

    @property
    def is_stair(self) -> bool:
        return self.role is NodeRole.STAIR

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y

    def assign_name(
        self,
        name: str,
        stair_prefix: str = DEFAULT_STAIR_PREFIX,
        start_marker: str = DEFAULT_START_MARKER,
    ) -> None:
        """Set name and recompute role."""
        self.name = name
        self.role = classify_name(name, stair_prefix=stair_prefix, start_marker=start_marker)


@dataclass(frozen=True, slots=True)
class Edge:
    """Undirected connection between two nodes of the same floor."""

    source: str
    target: str


@dataclass(frozen=True, slots=True)
class WallLine:
    x1: float
    y1: float
    x2: float
    y2: float
    kind: Literal["line"] = "line"

    def as_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2}


@dataclass(frozen=True, slots=True)
class WallPath:
    d: str
    kind: Literal["path"] = "path"

    def as_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "d": self.d}


WallGeometry = WallLine | WallPath


@dataclass
class FloorGraph:
    """Nodes, edges and render-only geometry of one building level."""

    floor_id: str
    nodes: dict[str, Node] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
    walls: list[WallGeometry] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)

    def add_node(self, node_id: str, x: float, y: float) -> Node:
        node = Node(id=node_id, x=float(x), y=float(y))
        self.nodes[node_id] = node
        return node

    def add_edge(self, a: str, b: str) -> bool:
        """Connect a and b; self-loops are skipped and reported as False."""
        if a == b:
            return False
        if a not in self.nodes or b not in self.nodes:
            raise KeyError(f"Edge endpoints must exist on floor {self.floor_id}: {a}, {b}")
        self.edges.append(Edge(source=a, target=b))
        self.nodes[a].neighbors.append(b)
        self.nodes[b].neighbors.append(a)
        return True

    def node(self, node_id: str) -> Node:
        return self.nodes[node_id]

    def get(self, node_id: str) -> Node | None:
        return self.nodes.get(node_id)

    def leaves(self) -> list[Node]:
        return [n for n in self.nodes.values() if n.is_leaf]

    def named_nodes(self) -> list[Node]:
        return [n for n in self.nodes.values() if n.name]

    def nearest_leaf(self, x: float, y: float, radius: float) -> Node | None:
        """Return the closest leaf strictly within radius, earliest node on ties."""
        best: Node | None = None
        best_dist = math.inf
        for node in self.leaves():
            d = math.hypot(node.x - x, node.y - y)
            if d < radius and d < best_dist:
                best = node
                best_dist = d
        return best


def build_floor_graph(
    floor_id: str,
    document: GeometryDocument,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
    label_radius: float = DEFAULT_LABEL_RADIUS,
    wall_marker: str = DEFAULT_WALL_MARKER,
    stair_prefix: str = DEFAULT_STAIR_PREFIX,
    start_marker: str = DEFAULT_START_MARKER,
) -> FloorGraph:
    """Compile one floor's raw geometry into a FloorGraph.

    All segments are processed before any label so leaf status reflects the
    finished topology. Wall-marked labels never name nodes and are not kept
    in `FloorGraph.labels`.

    Args:
        floor_id: Caller-supplied floor identifier.
        document: Raw segments, curves and labels of the floor.
        tolerance: Point merge radius.
        label_radius: Max distance (exclusive) from a label to its leaf node.
        wall_marker: Colour reserved for wall geometry and annotations.
        stair_prefix: Name prefix that marks stairway nodes.
        start_marker: Name of the designated start node.

    Returns:
        The built FloorGraph, walls included.
    """
    graph = FloorGraph(floor_id=floor_id)
    index = GeometryIndex(tolerance=tolerance)

    pairs: list[tuple[str, str]] = []
    for seg in document.segments:
        if is_wall_marker(seg.stroke, wall_marker):
            graph.walls.append(WallLine(float(seg.x1), float(seg.y1), float(seg.x2), float(seg.y2)))
            continue
        pairs.append((index.register((seg.x1, seg.y1)), index.register((seg.x2, seg.y2))))

    for node_id, (x, y) in index.positions().items():
        graph.add_node(node_id, x, y)
    for a, b in pairs:
        graph.add_edge(a, b)

    for curve in document.curves:
        if is_wall_marker(curve.stroke, wall_marker) and curve.path_data.strip():
            graph.walls.append(WallPath(curve.path_data))

    named = 0
    for label in document.labels:
        if is_wall_marker(label.fill, wall_marker):
            continue
        graph.labels.append(label)

        text = label.text.strip()
        if not text:
            continue
        target = graph.nearest_leaf(label.x, label.y, label_radius)
        if target is None:
            logger.debug("Floor %s: label %r at (%.1f, %.1f) has no leaf in range", floor_id, text, label.x, label.y)
            continue
        target.assign_name(text, stair_prefix=stair_prefix, start_marker=start_marker)
        named += 1

    logger.info(
        "Built floor %s: %d nodes, %d edges, %d walls, %d labels applied",
        floor_id,
        len(graph.nodes),
        len(graph.edges),
        len(graph.walls),
        named,
    )
    return graph
