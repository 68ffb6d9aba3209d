"""Runtime settings read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from floornav.document import DEFAULT_WALL_MARKER
from floornav.floor_graph import DEFAULT_LABEL_RADIUS, DEFAULT_STAIR_PREFIX, DEFAULT_START_MARKER
from floornav.geometry_index import DEFAULT_TOLERANCE


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ValueError(f"{name} must be >= 0")
    return value


def _env_str(name: str, default: str) -> str:
    return os.getenv(name, "").strip() or default


@dataclass(frozen=True)
class Settings:
    """Graph-building conventions and service options."""

    tolerance: float = DEFAULT_TOLERANCE
    label_radius: float = DEFAULT_LABEL_RADIUS
    wall_marker: str = DEFAULT_WALL_MARKER
    stair_prefix: str = DEFAULT_STAIR_PREFIX
    start_marker: str = DEFAULT_START_MARKER
    floors_dir: Path | None = None
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        raw_dir = os.getenv("FLOORNAV_FLOORS_DIR", "").strip()
        raw_origins = os.getenv("FLOORNAV_CORS_ORIGINS", "").strip() or "*"
        if raw_origins == "*":
            origins = ["*"]
        else:
            origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

        return cls(
            tolerance=_env_float("FLOORNAV_TOLERANCE", DEFAULT_TOLERANCE),
            label_radius=_env_float("FLOORNAV_LABEL_RADIUS", DEFAULT_LABEL_RADIUS),
            wall_marker=_env_str("FLOORNAV_WALL_MARKER", DEFAULT_WALL_MARKER),
            stair_prefix=_env_str("FLOORNAV_STAIR_PREFIX", DEFAULT_STAIR_PREFIX),
            start_marker=_env_str("FLOORNAV_START_MARKER", DEFAULT_START_MARKER),
            floors_dir=Path(raw_dir) if raw_dir else None,
            cors_origins=origins,
        )
