"""Unit tests for floornav.building."""

from __future__ import annotations

import pytest

from floornav.building import BuildingGraph, MissingStartNodeError
from floornav.document import GeometryDocument, Label, Segment
from floornav.stairs import StairMismatchError


def test_add_floor_registers_stair_connections(corridor_document) -> None:
    building = BuildingGraph()
    building.add_floor("A", corridor_document(start_label="0"))
    building.add_floor("B", corridor_document(start_label="Room 201"))

    assert building.floor_ids == ["A", "B"]
    assert building.stair_connections == {"L1": {"A": "N2", "B": "N2"}}


def test_add_floor_mismatch_leaves_building_untouched(corridor_document) -> None:
    building = BuildingGraph()
    building.add_floor("A", corridor_document())

    with pytest.raises(StairMismatchError):
        building.add_floor("B", corridor_document(length=50.0))

    assert building.floor_ids == ["A"]
    assert building.stair_connections == {"L1": {"A": "N2"}}
    assert building.stair_registry.canonical_position("L1") == (10.0, 0.0)


def test_add_floor_after_rejection_still_works(corridor_document) -> None:
    building = BuildingGraph()
    building.add_floor("A", corridor_document())
    with pytest.raises(StairMismatchError):
        building.add_floor("B", corridor_document(length=50.0))

    building.add_floor("B", corridor_document(length=12.0))
    assert building.stair_connections["L1"] == {"A": "N2", "B": "N2"}


def test_add_floor_twice_raises(corridor_document) -> None:
    building = BuildingGraph()
    building.add_floor("A", corridor_document())
    with pytest.raises(ValueError, match="already registered"):
        building.add_floor("A", corridor_document())


def test_get_all_nodes_tags_floors(corridor_document) -> None:
    building = BuildingGraph()
    building.add_floor("A", corridor_document())
    building.add_floor("B", corridor_document())

    tagged = [(floor, node.id) for floor, node in building.get_all_nodes()]
    assert tagged == [("A", "N1"), ("A", "N2"), ("B", "N1"), ("B", "N2")]


def test_get_start_node_first_found(corridor_document) -> None:
    building = BuildingGraph()
    building.add_floor("A", corridor_document())
    building.add_floor("B", corridor_document(start_label="0"))
    building.add_floor("C", corridor_document(start_label="0"))

    assert building.get_start_node() == ("B", "N1")


def test_missing_start_node(corridor_document) -> None:
    building = BuildingGraph()
    building.add_floor("A", corridor_document())

    assert building.get_start_node() is None
    with pytest.raises(MissingStartNodeError):
        building.require_start_node()


def test_destinations_filters_named_leaves() -> None:
    doc = GeometryDocument(
        segments=[Segment(0, 0, 30, 0), Segment(30, 0, 60, 0), Segment(30, 0, 30, 30)],
        labels=[Label(0, 1, "0"), Label(60, 1, "Room 101"), Label(30, 31, "Library"), Label(30, 1, "Hall")],
    )
    building = BuildingGraph()
    building.add_floor("A", doc)

    assert [n.name for _, n in building.destinations()] == ["Room 101", "Library"]
    assert [n.name for _, n in building.destinations(" room ")] == ["Room 101"]


def test_stair_links_skip_own_floor(corridor_document) -> None:
    building = BuildingGraph()
    building.add_floor("A", corridor_document())
    building.add_floor("B", corridor_document())
    building.add_floor("C", corridor_document())

    node = building.floor("B").node("N2")
    assert building.stair_links("B", node) == [("A", "N2"), ("C", "N2")]
    assert building.stair_links("B", building.floor("B").node("N1")) == []


def test_unknown_floor_raises_key_error() -> None:
    with pytest.raises(KeyError):
        BuildingGraph().floor("nope")
