"""Unit tests for floornav.svg_reader."""

from __future__ import annotations

from pathlib import Path

import pytest

from floornav.svg_reader import read_svg_document, read_svg_file


def test_read_svg_document_extracts_lines_paths_and_labels(svg_floor) -> None:
    doc = read_svg_document(svg_floor())

    assert len(doc.segments) == 2
    assert doc.segments[0].x2 == 10.0
    assert doc.segments[1].stroke == "red"
    assert [c.path_data for c in doc.curves] == ["M 0 50 L 60 50"]
    assert doc.curves[0].stroke == "#ff0000"
    assert [(lb.text, lb.fill) for lb in doc.labels] == [
        ("0", "#000000"),
        ("L1", "#000000"),
        ("Annotation", "red"),
    ]


def test_read_svg_document_skips_text_without_tspan() -> None:
    svg = '<svg><text x="1" y="1">bare</text><text><tspan x="2" y="3"> Hall </tspan></text></svg>'
    doc = read_svg_document(svg)

    assert len(doc.labels) == 1
    assert (doc.labels[0].x, doc.labels[0].y, doc.labels[0].text) == (2.0, 3.0, "Hall")


def test_read_svg_document_malformed_coordinates_default_to_zero() -> None:
    doc = read_svg_document('<svg><line x1="abc" y1="" x2="5" y2="NaN"/></svg>')

    seg = doc.segments[0]
    assert (seg.x1, seg.y1, seg.x2, seg.y2) == (0.0, 0.0, 5.0, 0.0)
    assert seg.stroke is None


def test_read_svg_document_takes_leading_number_of_attributes() -> None:
    """Unit suffixes and coordinate lists keep their first number."""
    svg = (
        '<svg><line x1="10px" y1=" -2.5e1" x2="40px" y2=".5"/>'
        '<text><tspan x="40.5 46.1" y="3">Room</tspan></text></svg>'
    )
    doc = read_svg_document(svg)

    seg = doc.segments[0]
    assert (seg.x1, seg.x2) == (10.0, 40.0)
    assert (seg.y1, seg.y2) == (-25.0, 0.5)
    assert (doc.labels[0].x, doc.labels[0].y) == (40.5, 3.0)


def test_read_svg_document_rejects_non_svg() -> None:
    with pytest.raises(ValueError, match="Invalid SVG"):
        read_svg_document("<svg><line></svg>")
    with pytest.raises(ValueError, match="root"):
        read_svg_document("<html></html>")


def test_read_svg_file(tmp_path: Path, svg_floor) -> None:
    path = tmp_path / "floor1.svg"
    path.write_text(svg_floor(), encoding="utf-8")

    doc = read_svg_file(path)
    assert len(doc.segments) == 2


def test_read_svg_file_rejects_non_svg_text(tmp_path: Path) -> None:
    path = tmp_path / "notes.svg"
    path.write_text("just text", encoding="utf-8")

    with pytest.raises(ValueError, match="not a valid SVG"):
        read_svg_file(path)
