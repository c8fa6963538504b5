"""Data layer utilities for loading JSON definitions and deck files."""

from .errors import DataError, DataLoadError, DataValidationError
from .paths import get_definitions_path, get_repo_root

__all__ = [
    "DataError",
    "DataLoadError",
    "DataValidationError",
    "get_definitions_path",
    "get_repo_root",
]
