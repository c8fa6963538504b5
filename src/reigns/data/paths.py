"""Helpers for resolving data file locations."""
from __future__ import annotations

import os
from pathlib import Path

DEFINITIONS_ENV = "REIGNS_DEFINITIONS_DIR"


def get_repo_root() -> Path:
    """Return the checkout root (the directory holding ``src/`` and ``data/``)."""
    return Path(__file__).resolve().parents[3]


def get_definitions_path(base_path: Path | str | None = None) -> Path:
    """Return the directory with theme definitions.

    Precedence: explicit ``base_path``, then ``$REIGNS_DEFINITIONS_DIR``, then
    ``data/definitions`` in the checkout.
    """
    if base_path is not None:
        return Path(base_path)
    override = os.environ.get(DEFINITIONS_ENV)
    if override:
        return Path(override)
    return get_repo_root() / "data" / "definitions"
