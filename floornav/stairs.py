"""Stairway extraction and cross-floor coordinate consistency checks."""

from __future__ import annotations

import math
from dataclasses import dataclass

from floornav.floor_graph import FloorGraph, Node
from floornav.geometry_index import DEFAULT_TOLERANCE, Position


class StairMismatchError(ValueError):
    """A stairway is drawn at a different position than on an earlier floor."""

    def __init__(self, stair_name: str, floor_id: str, expected: Position, actual: Position, distance: float) -> None:
        self.stair_name = stair_name
        self.floor_id = floor_id
        self.expected = expected
        self.actual = actual
        self.distance = distance
        super().__init__(
            f"Stair {stair_name!r} on floor {floor_id!r} is at ({actual[0]:.2f}, {actual[1]:.2f}), "
            f"expected ({expected[0]:.2f}, {expected[1]:.2f}) (off by {distance:.2f})"
        )


def extract_stairs(graph: FloorGraph) -> list[Node]:
    """Return stairway nodes of a floor in node order."""
    return [node for node in graph.nodes.values() if node.is_stair]


@dataclass
class StairRegistry:
    """Canonical position per stairway name, set by the first floor declaring it."""

    tolerance: float = DEFAULT_TOLERANCE

    def __post_init__(self) -> None:
        self._canonical: dict[str, Position] = {}

    def canonical_position(self, stair_name: str) -> Position | None:
        return self._canonical.get(stair_name)

    def validate(self, floor_id: str, stairs: list[Node]) -> None:
        """Check every stair against known positions without recording anything.

        Names first seen inside this batch are checked against their first
        occurrence in the batch.

        Raises:
            StairMismatchError: On the first stair farther than tolerance from
                its canonical position.
        """
        pending: dict[str, Position] = {}
        for stair in stairs:
            name = str(stair.name)
            expected = self._canonical.get(name) or pending.get(name)
            if expected is None:
                pending[name] = stair.position
                continue
            distance = math.hypot(expected[0] - stair.x, expected[1] - stair.y)
            if distance > self.tolerance:
                raise StairMismatchError(name, floor_id, expected, stair.position, distance)

    def commit(self, stairs: list[Node]) -> None:
        """Record positions of stair names not seen before."""
        for stair in stairs:
            self._canonical.setdefault(str(stair.name), stair.position)
