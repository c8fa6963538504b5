"""Repository exports."""

from .themes_repo import ThemesRepository

__all__ = ["ThemesRepository"]
