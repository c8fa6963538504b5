"""Service-layer exceptions."""
from __future__ import annotations


class EnginePreconditionError(Exception):
    """Raised when the engine is invoked outside its contract.

    Examples are an empty deck, a current index outside the deck, or an unknown
    choice side. Callers are expected never to reach this; it is not a
    recoverable runtime condition.
    """


class PlaythroughOverError(Exception):
    """Raised when a choice is made after a terminal verdict."""


class DeckGenerationError(Exception):
    """Raised when the deck generator fails or returns an unusable deck."""


class CatalogError(Exception):
    """Raised when the remote catalog cannot be reached."""


class DeckLoadError(Exception):
    """Raised when no playable deck could be acquired for a session."""

    def __init__(self, message: str, *, can_retry_with_generator: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.can_retry_with_generator = can_retry_with_generator
