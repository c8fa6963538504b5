"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

_DEFAULT_TEXT_MODE = "instant"
_DEFAULT_THEME_ID = "steampunk"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "RealityReigns"
        return Path.home() / "RealityReigns"
    return Path.home() / ".config" / "reality_reigns"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def debug_enabled() -> bool:
    """Return True only when REIGNS_DEBUG is explicitly set to '1'."""
    return os.getenv("REIGNS_DEBUG") == "1"


def configure_logging() -> None:
    level = logging.DEBUG if debug_enabled() else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _normalize_text_mode(value: object) -> str:
    return "step" if value == "step" else _DEFAULT_TEXT_MODE


def _normalize_theme_id(value: object) -> str:
    return value if isinstance(value, str) and value else _DEFAULT_THEME_ID


def default_config() -> Dict[str, str]:
    return {"text_display_mode": _DEFAULT_TEXT_MODE, "default_theme_id": _DEFAULT_THEME_ID}


def load_config(path: Path | None = None) -> Dict[str, str]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return {
        "text_display_mode": _normalize_text_mode(raw.get("text_display_mode")),
        "default_theme_id": _normalize_theme_id(raw.get("default_theme_id")),
    }


def save_config(config: Dict[str, str], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "text_display_mode": _normalize_text_mode(config.get("text_display_mode")),
        "default_theme_id": _normalize_theme_id(config.get("default_theme_id")),
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
