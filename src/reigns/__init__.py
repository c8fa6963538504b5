"""Reality Reigns: a branching card-deck interactive fiction engine."""

__version__ = "0.1.0"
