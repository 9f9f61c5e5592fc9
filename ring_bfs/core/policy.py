"""Auto-connect policies applied when a node is added.

A policy is a callable ``(graph, label) -> iterable of labels`` returning
extra nodes the freshly added *label* should be connected to.  The default
graph uses :func:`ring_anchor`, which wires every new node to ``"A"`` so the
ring stays closed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable

from ..config import ANCHOR_LABEL

if TYPE_CHECKING:
    from .graph import GraphModel

AutoConnectPolicy = Callable[["GraphModel", str], Iterable[str]]


def ring_anchor(anchor: str = ANCHOR_LABEL) -> AutoConnectPolicy:
    """Policy factory: connect new nodes to *anchor* unless already linked."""
    def policy(graph: GraphModel, label: str) -> list[str]:
        if label == anchor or not graph.has_node(anchor):
            return []
        if anchor in graph.neighbors(label):
            return []
        return [anchor]
    return policy


def no_auto_connect(graph: GraphModel, label: str) -> list[str]:
    return []
