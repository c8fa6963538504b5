"""Service layer exports."""

from .errors import (
    CatalogError,
    DeckGenerationError,
    DeckLoadError,
    EnginePreconditionError,
    PlaythroughOverError,
)
from .graph_sync import (
    DeckGraph,
    GraphEdge,
    GraphNode,
    apply_graph,
    connect,
    disconnect,
    hidden_targets,
    project_to_graph,
)
from .traversal_service import (
    ChoiceOutcome,
    Playthrough,
    Verdict,
    apply_choice,
    describe_outcome,
    start_playthrough,
)

__all__ = [
    "CatalogError",
    "ChoiceOutcome",
    "DeckGenerationError",
    "DeckGraph",
    "DeckLoadError",
    "EnginePreconditionError",
    "GraphEdge",
    "GraphNode",
    "Playthrough",
    "PlaythroughOverError",
    "Verdict",
    "apply_choice",
    "apply_graph",
    "connect",
    "describe_outcome",
    "disconnect",
    "hidden_targets",
    "project_to_graph",
    "start_playthrough",
]
