"""Settings loaded from an optional `geotagger_settings.json` beside the package."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict
import json
import logging

_CONFIG_PATH = Path(__file__).with_name("geotagger_settings.json")


def _default_settings() -> Dict[str, Any]:
    return {
        "user_agent": "photo_geotagger_app",
        "search_limit": 5,
        "min_query_length": 3,
        "thumbnail_size": (300, 300),
    }


def _positive_int(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return None


def parse_settings(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Merge `raw` over the defaults, ignoring values of the wrong shape."""
    base = _default_settings()

    agent = raw.get("user_agent")
    if isinstance(agent, str) and agent.strip():
        base["user_agent"] = agent.strip()

    for key in ("search_limit", "min_query_length"):
        value = _positive_int(raw.get(key))
        if value is not None:
            base[key] = value

    size = raw.get("thumbnail_size")
    if isinstance(size, (list, tuple)) and len(size) == 2 and all(_positive_int(v) for v in size):
        base["thumbnail_size"] = (size[0], size[1])

    return base


@lru_cache(maxsize=1)
def load_settings() -> Dict[str, Any]:
    if not _CONFIG_PATH.exists():
        return _default_settings()
    try:
        raw = json.loads(_CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        logging.exception("Failed to read %s, using defaults", _CONFIG_PATH)
        return _default_settings()
    if not isinstance(raw, dict):
        return _default_settings()
    return parse_settings(raw)
