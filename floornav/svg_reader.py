"""Read SVG floor drawings into GeometryDocument records.

Only the elements the graph builder consumes are read:
- `<line>` as segments (x1, y1, x2, y2, stroke)
- `<path>` as curves (d, stroke)
- `<text>` as labels, positioned and worded by their first `<tspan>`

Usage:
    >>> from floornav.svg_reader import read_svg_file
    >>> doc = read_svg_file("floors/floor1.svg")
"""

from __future__ import annotations

import math
import re
import xml.etree.ElementTree as ET
from pathlib import Path

from floornav.document import Curve, GeometryDocument, Label, Segment


def _tag_name(elem: ET.Element) -> str:
    """Return local tag name without namespace."""
    tag = elem.tag
    if not isinstance(tag, str):
        return ""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


# leading decimal number of an attribute; units and trailing list values are ignored
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _float_attr(elem: ET.Element, name: str) -> float:
    """Parse the leading number of an attribute ("10px" -> 10, "40.5 46.1" -> 40.5).

    Missing, non-numeric or overflowing values read as 0.
    """
    match = _LEADING_FLOAT.match(elem.attrib.get(name) or "")
    if match is None:
        return 0.0
    value = float(match.group(0))
    return value if math.isfinite(value) else 0.0


def _marker(elem: ET.Element, name: str) -> str | None:
    value = elem.attrib.get(name)
    return value.strip().lower() if value else None


def _first_tspan(text_elem: ET.Element) -> ET.Element | None:
    for child in text_elem.iter():
        if child is not text_elem and _tag_name(child) == "tspan":
            return child
    return None


def read_svg_document(svg_text: str) -> GeometryDocument:
    """Parse SVG markup into a GeometryDocument.

    Raises:
        ValueError: If the markup is not XML or the root is not `<svg>`.
    """
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as exc:
        raise ValueError(f"Invalid SVG markup: {exc}") from exc

    if _tag_name(root) != "svg":
        raise ValueError("Document root must be an <svg> element")

    doc = GeometryDocument()
    for elem in root.iter():
        tag = _tag_name(elem)
        if tag == "line":
            doc.segments.append(
                Segment(
                    x1=_float_attr(elem, "x1"),
                    y1=_float_attr(elem, "y1"),
                    x2=_float_attr(elem, "x2"),
                    y2=_float_attr(elem, "y2"),
                    stroke=_marker(elem, "stroke"),
                )
            )
        elif tag == "path":
            doc.curves.append(Curve(path_data=elem.attrib.get("d", ""), stroke=_marker(elem, "stroke")))
        elif tag == "text":
            tspan = _first_tspan(elem)
            if tspan is None:
                continue
            doc.labels.append(
                Label(
                    x=_float_attr(tspan, "x"),
                    y=_float_attr(tspan, "y"),
                    text="".join(tspan.itertext()).strip(),
                    fill=_marker(elem, "fill"),
                )
            )
    return doc


def read_svg_file(path: str | Path) -> GeometryDocument:
    """Read and parse one SVG floor drawing from disk."""
    text = Path(path).read_text(encoding="utf-8")
    if "<svg" not in text:
        raise ValueError(f"File {path} is not a valid SVG document")
    return read_svg_document(text)
