"""Breadth-first route search across floors linked by stairways.

Search states are `(floor_id, node_id)` pairs. From a state the search may
step along any edge of the current floor, or, when the node is a stairway,
jump to the same-named stairway on every other floor. Every step costs one
hop, so BFS returns a route with the fewest hops.

Usage example:
    >>> from floornav.pathfinding import find_path
    >>> result = find_path(building, "F1", "N1", "F2", "N1")
    >>> result.stairs_used
    ['L1']
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import NamedTuple

from floornav.building import BuildingGraph


class PathStep(NamedTuple):
    floor: str
    node: str


@dataclass(slots=True)
class PathResult:
    """Winning route and the stairways taken, in travel order."""

    path: list[PathStep]
    stairs_used: list[str]

    @property
    def hops(self) -> int:
        return max(0, len(self.path) - 1)

    def floors_visited(self) -> list[str]:
        """Floor sequence along the route without consecutive repeats."""
        out: list[str] = []
        for step in self.path:
            if not out or out[-1] != step.floor:
                out.append(step.floor)
        return out

    def unique_stairs(self) -> list[str]:
        """Stair names for display, duplicates removed, first use order kept."""
        return list(dict.fromkeys(self.stairs_used))

    def next_floor_after(self, floor_id: str) -> str | None:
        """Floor the route moves to when it first leaves floor_id."""
        for current, nxt in zip(self.path, self.path[1:]):
            if current.floor == floor_id and nxt.floor != floor_id:
                return nxt.floor
        return None


def _neighbors(building: BuildingGraph, state: PathStep) -> list[tuple[PathStep, str | None]]:
    """Enumerate successor states with the stair name used to reach them."""
    graph = building.floors.get(state.floor)
    if graph is None:
        return []
    node = graph.get(state.node)
    if node is None:
        return []

    out: list[tuple[PathStep, str | None]] = [(PathStep(state.floor, nbr), None) for nbr in node.neighbors]
    for other_floor, other_node in building.stair_links(state.floor, node):
        out.append((PathStep(other_floor, other_node), node.name))
    return out


def _has_node(building: BuildingGraph, floor_id: str, node_id: str) -> bool:
    graph = building.floors.get(floor_id)
    return graph is not None and node_id in graph.nodes


def find_path(
    building: BuildingGraph,
    start_floor: str,
    start_node: str,
    end_floor: str,
    end_node: str,
) -> PathResult | None:
    """Compute the fewest-hop route between two floor nodes.

    Args:
        building: Registered floors and stairway index.
        start_floor: Floor id of the origin.
        start_node: Node id of the origin on start_floor.
        end_floor: Floor id of the destination.
        end_node: Node id of the destination on end_floor.

    Returns:
        PathResult, or None when either endpoint is unknown or unreachable.
    """
    if not _has_node(building, start_floor, start_node) or not _has_node(building, end_floor, end_node):
        return None

    start = PathStep(start_floor, start_node)
    goal = PathStep(end_floor, end_node)

    # state -> (previous state, stair name used for the transition)
    parent: dict[PathStep, tuple[PathStep, str | None] | None] = {start: None}
    q: deque[PathStep] = deque([start])

    while q:
        current = q.popleft()
        if current == goal:
            return _reconstruct(parent, goal)

        for nxt, stair in _neighbors(building, current):
            if nxt in parent:
                continue
            parent[nxt] = (current, stair)
            q.append(nxt)

    return None


def _reconstruct(
    parent: dict[PathStep, tuple[PathStep, str | None] | None],
    goal: PathStep,
) -> PathResult:
    path = [goal]
    stairs: list[str] = []
    link = parent[goal]
    while link is not None:
        prev, stair = link
        if stair is not None:
            stairs.append(stair)
        path.append(prev)
        link = parent[prev]
    path.reverse()
    stairs.reverse()
    return PathResult(path=path, stairs_used=stairs)
