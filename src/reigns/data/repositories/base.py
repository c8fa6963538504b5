"""Base repository for JSON definition files keyed by id."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Generic, Iterator, Mapping, TypeVar

from reigns.data import paths
from reigns.data.errors import DataValidationError
from reigns.data.json_loader import load_json

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Loads one definitions file lazily and caches the parsed entries.

    The file must hold a top-level object mapping ids to entry objects.
    Subclasses turn each entry into a typed definition in ``_parse_entry``.
    """

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definitions: Dict[str, T] | None = None

    @property
    def file_path(self) -> Path:
        return paths.get_definitions_path(self._base_path) / self._filename

    def _parse_entry(self, def_id: str, payload: Mapping[str, object]) -> T:
        raise NotImplementedError

    def _loaded(self) -> Dict[str, T]:
        if self._definitions is None:
            raw = load_json(self.file_path)
            if not isinstance(raw, dict):
                raise DataValidationError(f"Expected top-level object in {self.file_path}")
            definitions: Dict[str, T] = {}
            for def_id, payload in raw.items():
                if not isinstance(payload, dict):
                    raise DataValidationError(f"{self._filename} entry '{def_id}' must be an object/dict.")
                definitions[def_id] = self._parse_entry(def_id, payload)
            self._definitions = definitions
        return self._definitions

    def reload(self) -> None:
        """Drop the cache so the next access re-reads the file."""
        self._definitions = None

    def get(self, def_id: str) -> T:
        """Return a definition by id; unknown ids raise KeyError."""
        definitions = self._loaded()
        if def_id not in definitions:
            raise KeyError(def_id)
        return definitions[def_id]

    def ids(self) -> list[str]:
        return sorted(self._loaded())

    def all(self) -> list[T]:
        """Return all definitions ordered by id."""
        definitions = self._loaded()
        return [definitions[def_id] for def_id in sorted(definitions)]

    def __contains__(self, def_id: object) -> bool:
        return def_id in self._loaded()

    def __iter__(self) -> Iterator[T]:
        return iter(self.all())
