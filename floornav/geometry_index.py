"""Tolerance-based point deduplication for one floor.

Purpose:
- Map approximate drawing positions to stable node ids.
- Merge points lying within a tolerance radius of an earlier point.

The scan is linear over every registered point (no spatial index). The first
registered point within tolerance wins, so input order decides which
representative position survives.

Usage example:
    >>> from floornav.geometry_index import GeometryIndex
    >>> index = GeometryIndex(tolerance=5.0)
    >>> index.register((0.0, 0.0))
    'N1'
    >>> index.register((3.0, 4.0))
    'N1'
"""

from __future__ import annotations

import math

import numpy as np

Position = tuple[float, float]

DEFAULT_TOLERANCE = 5.0


def _validate_position(position: Position) -> Position:
    """Coerce position to a float pair and reject non-finite coordinates."""
    if len(position) != 2:
        raise ValueError("Position must be an (x, y) pair")
    x, y = float(position[0]), float(position[1])
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Position must be finite, got ({x}, {y})")
    return x, y


class GeometryIndex:
    """Per-floor registry of deduplicated positions."""

    _INITIAL_CAPACITY = 64

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE, id_prefix: str = "N") -> None:
        if tolerance < 0:
            raise ValueError("tolerance must be >= 0")
        self.tolerance = float(tolerance)
        self.id_prefix = id_prefix
        self._ids: list[str] = []
        # rows [0, len(self._ids)) hold registered coordinates; capacity doubles when full
        self._coords = np.empty((self._INITIAL_CAPACITY, 2), dtype=np.float64)

    def __len__(self) -> int:
        return len(self._ids)

    def _first_match(self, x: float, y: float) -> int | None:
        if not self._ids:
            return None
        used = self._coords[: len(self._ids)]
        dist = np.hypot(used[:, 0] - x, used[:, 1] - y)
        hits = np.flatnonzero(dist <= self.tolerance)
        if hits.size == 0:
            return None
        return int(hits[0])

    def _append(self, x: float, y: float) -> None:
        count = len(self._ids)
        if count == self._coords.shape[0]:
            grown = np.empty((count * 2, 2), dtype=np.float64)
            grown[:count] = self._coords
            self._coords = grown
        self._coords[count] = (x, y)

    def lookup(self, position: Position) -> str | None:
        """Return the id of the first registered point within tolerance, if any."""
        x, y = _validate_position(position)
        idx = self._first_match(x, y)
        return None if idx is None else self._ids[idx]

    def register(self, position: Position) -> str:
        """Resolve position to an existing node id or create a new one.

        Args:
            position: Drawing-space `(x, y)`.

        Returns:
            Id of the node representing this position.

        Raises:
            ValueError: If the position is not a finite pair.
        """
        x, y = _validate_position(position)
        idx = self._first_match(x, y)
        if idx is not None:
            return self._ids[idx]

        node_id = f"{self.id_prefix}{len(self._ids) + 1}"
        self._append(x, y)
        self._ids.append(node_id)
        return node_id

    def positions(self) -> dict[str, Position]:
        """Return all registered ids mapped to their representative positions, in registration order."""
        return {
            node_id: (float(self._coords[i, 0]), float(self._coords[i, 1]))
            for i, node_id in enumerate(self._ids)
        }
