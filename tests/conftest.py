"""Pytest global fixtures and test isolation hooks."""

from __future__ import annotations

from typing import Callable

import pytest

from floornav.api import STATE, ServiceState
from floornav.document import GeometryDocument, Label, Segment


@pytest.fixture(autouse=True)
def reset_service_state() -> None:
    """Reset in-memory API state before each test."""
    fresh = ServiceState()
    STATE.building = fresh.building
    STATE.settings = fresh.settings


@pytest.fixture()
def corridor_document() -> Callable[..., GeometryDocument]:
    """Factory for a single corridor from (0, 0) to (length, 0).

    `start_label` names the west end, `stair_label` the east end.
    """

    def make(length: float = 10.0, stair_label: str | None = "L1", start_label: str | None = None) -> GeometryDocument:
        labels: list[Label] = []
        if start_label is not None:
            labels.append(Label(0.0, 2.0, start_label))
        if stair_label is not None:
            labels.append(Label(length, 2.0, stair_label))
        return GeometryDocument(segments=[Segment(0.0, 0.0, length, 0.0)], labels=labels)

    return make


@pytest.fixture()
def svg_floor() -> Callable[..., str]:
    """Factory for SVG markup with one corridor, stair at the east end."""

    def make(
        stair_x: float = 10.0,
        stair_label: str = "L1",
        west_label: str = "0",
        extra: str = "",
    ) -> str:
        return (
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">'
            f'<line x1="0" y1="0" x2="{stair_x}" y2="0" stroke="#000000"/>'
            '<line x1="0" y1="40" x2="60" y2="40" stroke="red"/>'
            '<path d="M 0 50 L 60 50" stroke="#FF0000"/>'
            f'<text fill="#000000"><tspan x="0" y="2">{west_label}</tspan></text>'
            f'<text fill="#000000"><tspan x="{stair_x}" y="2">{stair_label}</tspan></text>'
            '<text fill="red"><tspan x="30" y="45">Annotation</tspan></text>'
            f"{extra}"
            "</svg>"
        )

    return make
