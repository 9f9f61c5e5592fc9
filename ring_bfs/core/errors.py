"""Exception hierarchy for graph and traversal failures."""

from __future__ import annotations


class GraphError(Exception):
    """Base class for every error raised by the core."""


class InvalidLabel(GraphError, ValueError):
    """A node label is empty or already taken."""

    def __init__(self, label: str, reason: str) -> None:
        super().__init__(f"Invalid label {label!r}: {reason}")
        self.label = label
        self.reason = reason


class NotFound(GraphError, KeyError):
    """An operation referenced a node that is not in the graph."""

    def __init__(self, label: str) -> None:
        super().__init__(label)
        self.label = label

    def __str__(self) -> str:
        return f"Node {self.label!r} not found"


class InvalidStart(NotFound):
    def __str__(self) -> str:
        return f"Start node {self.label!r} not found"


class InvalidEnd(NotFound):
    def __str__(self) -> str:
        return f"End node {self.label!r} not found"


class NoPath(GraphError):
    """Path reconstruction was requested but the end node was never reached."""

    def __init__(self, start: str, end: str) -> None:
        super().__init__(f"No path from {start!r} to {end!r}")
        self.start = start
        self.end = end
