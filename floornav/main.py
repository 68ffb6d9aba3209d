"""Application entry point for the floornav service.

Run locally:
    uvicorn floornav.main:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import uvicorn

from floornav.api import STATE, create_app
from floornav.config import Settings
from floornav.loader import FloorLoadError, load_building_from_dir

logger = logging.getLogger("floornav")


def _load_local_env() -> None:
    """Load key=value pairs from local .env files if present.

    Priority (first existing file wins per key if env var was unset):
    1) floornav/.env
    2) .env
    """
    candidates = [Path("floornav/.env"), Path(".env")]

    for env_path in candidates:
        if not env_path.exists():
            continue

        for raw in env_path.read_text(encoding="utf-8").splitlines():
            line = raw.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            if not key or key in os.environ:
                continue
            os.environ[key] = value.strip().strip("'").strip('"')


def _configure_logging() -> None:
    level = os.getenv("FLOORNAV_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _preload(settings: Settings) -> None:
    """Load floors from FLOORNAV_FLOORS_DIR at startup, if configured."""
    if settings.floors_dir is None:
        return
    try:
        STATE.building = load_building_from_dir(settings.floors_dir, settings=settings)
    except (OSError, ValueError, FloorLoadError, LookupError) as exc:
        logger.error("Initial floor load from %s failed: %s", settings.floors_dir, exc)


_load_local_env()
_configure_logging()
settings = Settings.from_env()
app = create_app(settings)
_preload(settings)


if __name__ == "__main__":
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload_enabled = os.getenv("API_RELOAD", "true").lower() == "true"
    uvicorn.run("floornav.main:app", host=host, port=port, reload=reload_enabled)
