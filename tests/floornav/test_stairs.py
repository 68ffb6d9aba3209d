"""Unit tests for floornav.stairs."""

from __future__ import annotations

import pytest

from floornav.document import GeometryDocument, Label, Segment
from floornav.floor_graph import Node, NodeRole, build_floor_graph
from floornav.stairs import StairMismatchError, StairRegistry, extract_stairs


def _stair(name: str, x: float, y: float, node_id: str = "N1") -> Node:
    return Node(id=node_id, x=x, y=y, name=name, role=NodeRole.STAIR)


def test_extract_stairs_returns_prefixed_nodes_only() -> None:
    doc = GeometryDocument(
        segments=[Segment(0, 0, 30, 0), Segment(30, 0, 60, 0)],
        labels=[Label(0, 1, "L1"), Label(60, 1, "Room 3")],
    )
    graph = build_floor_graph("F1", doc)

    stairs = extract_stairs(graph)
    assert [s.name for s in stairs] == ["L1"]


def test_validate_accepts_unknown_and_matching_stairs() -> None:
    registry = StairRegistry(tolerance=5.0)
    registry.commit([_stair("L1", 10, 0)])

    registry.validate("F2", [_stair("L1", 13, 4), _stair("L2", 100, 100, "N2")])
    assert registry.canonical_position("L2") is None


def test_validate_rejects_mismatch_without_recording() -> None:
    registry = StairRegistry(tolerance=5.0)
    registry.commit([_stair("L1", 10, 0)])

    with pytest.raises(StairMismatchError) as excinfo:
        registry.validate("F2", [_stair("L9", 0, 0), _stair("L1", 50, 0, "N2")])

    err = excinfo.value
    assert err.stair_name == "L1"
    assert err.floor_id == "F2"
    assert err.expected == (10.0, 0.0)
    assert err.distance == pytest.approx(40.0)
    assert registry.canonical_position("L9") is None


def test_validate_checks_repeated_name_within_one_floor() -> None:
    registry = StairRegistry(tolerance=5.0)
    with pytest.raises(StairMismatchError):
        registry.validate("F1", [_stair("L1", 0, 0), _stair("L1", 40, 0, "N2")])


def test_commit_keeps_first_canonical_position() -> None:
    registry = StairRegistry()
    registry.commit([_stair("L1", 10, 0)])
    registry.commit([_stair("L1", 12, 0)])

    assert registry.canonical_position("L1") == (10.0, 0.0)


def test_stair_mismatch_is_a_value_error() -> None:
    assert issubclass(StairMismatchError, ValueError)
