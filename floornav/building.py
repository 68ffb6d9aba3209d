"""Multi-floor building graph: floor registry plus stairway connectivity.

A BuildingGraph is built once per load cycle by adding floors one at a time
and is then only read by path searches. Reloading means constructing a new
instance; floors are never updated in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from floornav.document import DEFAULT_WALL_MARKER, GeometryDocument
from floornav.floor_graph import (
    DEFAULT_LABEL_RADIUS,
    DEFAULT_STAIR_PREFIX,
    DEFAULT_START_MARKER,
    FloorGraph,
    Node,
    NodeRole,
    build_floor_graph,
)
from floornav.geometry_index import DEFAULT_TOLERANCE
from floornav.stairs import StairMismatchError, StairRegistry, extract_stairs

logger = logging.getLogger(__name__)


class MissingStartNodeError(LookupError):
    """No floor carries a node named with the start marker."""


@dataclass
class BuildingGraph:
    """Aggregate root owning every FloorGraph and the stairway index."""

    tolerance: float = DEFAULT_TOLERANCE
    label_radius: float = DEFAULT_LABEL_RADIUS
    wall_marker: str = DEFAULT_WALL_MARKER
    stair_prefix: str = DEFAULT_STAIR_PREFIX
    start_marker: str = DEFAULT_START_MARKER
    floors: dict[str, FloorGraph] = field(default_factory=dict)
    # stair name -> floor id -> node id
    stair_connections: dict[str, dict[str, str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.stair_registry = StairRegistry(tolerance=self.tolerance)

    @property
    def floor_ids(self) -> list[str]:
        return list(self.floors.keys())

    def floor(self, floor_id: str) -> FloorGraph:
        try:
            return self.floors[floor_id]
        except KeyError as exc:
            raise KeyError(f"Floor {floor_id!r} is not registered") from exc

    def add_floor(self, floor_id: str, document: GeometryDocument) -> FloorGraph:
        """Build, validate and register one floor.

        Args:
            floor_id: Opaque floor identifier.
            document: Raw floor geometry.

        Returns:
            The registered FloorGraph.

        Raises:
            ValueError: If floor_id is already registered.
            StairMismatchError: If a stairway disagrees with its canonical
                position; the building is left unchanged.
        """
        if floor_id in self.floors:
            raise ValueError(f"Floor {floor_id!r} is already registered")

        graph = build_floor_graph(
            floor_id,
            document,
            tolerance=self.tolerance,
            label_radius=self.label_radius,
            wall_marker=self.wall_marker,
            stair_prefix=self.stair_prefix,
            start_marker=self.start_marker,
        )
        stairs = extract_stairs(graph)

        try:
            self.stair_registry.validate(floor_id, stairs)
        except StairMismatchError as exc:
            logger.warning("Rejecting floor %s: %s", floor_id, exc)
            raise

        self.floors[floor_id] = graph
        self.stair_registry.commit(stairs)
        for stair in stairs:
            self.stair_connections.setdefault(str(stair.name), {})[floor_id] = stair.id

        logger.info("Registered floor %s with %d stair node(s)", floor_id, len(stairs))
        return graph

    def get_all_nodes(self) -> list[tuple[str, Node]]:
        """Return every node tagged with its floor, floors in registration order."""
        return [(floor_id, node) for floor_id, graph in self.floors.items() for node in graph.nodes.values()]

    def get_start_node(self) -> tuple[str, str] | None:
        """Return `(floor_id, node_id)` of the first start-marked node, if any."""
        for floor_id, node in self.get_all_nodes():
            if node.role is NodeRole.START:
                return floor_id, node.id
        return None

    def require_start_node(self) -> tuple[str, str]:
        start = self.get_start_node()
        if start is None:
            raise MissingStartNodeError(f"No node named {self.start_marker!r} was found on any floor")
        return start

    def destinations(self, query: str = "") -> list[tuple[str, Node]]:
        """Named leaf nodes other than the start node, filtered by name substring."""
        needle = query.strip().lower()
        out: list[tuple[str, Node]] = []
        for floor_id, node in self.get_all_nodes():
            if not node.name or not node.is_leaf or node.role is NodeRole.START:
                continue
            if needle and needle not in node.name.lower():
                continue
            out.append((floor_id, node))
        return out

    def stair_links(self, floor_id: str, node: Node) -> list[tuple[str, str]]:
        """Same-named stair nodes on every other floor, as `(floor_id, node_id)`."""
        if not node.is_stair:
            return []
        connected = self.stair_connections.get(str(node.name), {})
        return [(other, node_id) for other, node_id in connected.items() if other != floor_id]
