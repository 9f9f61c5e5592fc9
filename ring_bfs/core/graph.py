"""Undirected graph model.

Keeps an adjacency list per node label.  Neighbour order is the order in
which edges were inserted, which BFS uses to break ties.  Every edge is
stored in both endpoints' lists, and removing a node strips it from all of
its neighbours before the node itself is dropped.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Iterator, Mapping, Sequence

from ..config import DEFAULT_RING_LABELS
from .errors import InvalidLabel, NotFound
from .policy import AutoConnectPolicy, ring_anchor

logger = logging.getLogger(__name__)


def edges_of(adjacency: Mapping[str, Sequence[str]]) -> list[tuple[str, str]]:
    """Each undirected edge once, as ``(u, v)`` with ``u < v``."""
    return [
        (a, b)
        for a, nbrs in adjacency.items()
        for b in nbrs
        if a < b
    ]


class GraphModel:
    """Mutable undirected graph keyed by string labels.

    Mutators never raise on bad input unless ``strict=True``; they return
    ``True`` when the graph actually changed.

    A reentrant lock guards every mutator and query, so a reader never
    sees a half-applied mutation.  ``version`` increases on every change.
    """

    def __init__(self, auto_connect: AutoConnectPolicy | None = None) -> None:
        self._adjacency: dict[str, list[str]] = {}
        self._lock = threading.RLock()
        self.auto_connect = auto_connect if auto_connect is not None else ring_anchor()
        self.version = 0

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def add_node(
        self,
        label: str,
        connect_to: str | None = None,
        strict: bool = False,
    ) -> bool:
        """Add *label*, optionally wired to *connect_to*.

        After the explicit connection the auto-connect policy runs, so with
        the default policy a new node also ends up linked to ``"A"``.
        """
        with self._lock:
            if not label:
                if strict:
                    raise InvalidLabel(label, "label is empty")
                return False
            if label in self._adjacency:
                if strict:
                    raise InvalidLabel(label, "label already present")
                return False

            self._adjacency[label] = []
            self.version += 1

            if connect_to is not None and connect_to in self._adjacency:
                if self.connect(label, connect_to):
                    logger.info("Connected %s to %s", label, connect_to)

            for extra in list(self.auto_connect(self, label)):
                if self.connect(label, extra):
                    logger.info("Also connected %s to %s to complete the circle", label, extra)

        logger.info("Node %s added", label)
        return True

    def remove_node(self, label: str) -> bool:
        """Remove *label* and every edge touching it."""
        with self._lock:
            if label not in self._adjacency:
                return False
            for other, nbrs in self._adjacency.items():
                if other != label and label in nbrs:
                    nbrs.remove(label)
            del self._adjacency[label]
            self.version += 1
        logger.info("Node %s removed", label)
        return True

    def connect(self, a: str, b: str, strict: bool = False) -> bool:
        """Insert the undirected edge ``a-b`` into both adjacency lists."""
        with self._lock:
            for label in (a, b):
                if label not in self._adjacency:
                    if strict:
                        raise NotFound(label)
                    return False
            if a == b or b in self._adjacency[a]:
                return False
            self._adjacency[a].append(b)
            self._adjacency[b].append(a)
            self.version += 1
        logger.debug("Edge %s-%s added", a, b)
        return True

    def reset(self) -> None:
        """Drop everything and rebuild the default ring."""
        with self._lock:
            self._adjacency = {}
            self._build_ring(DEFAULT_RING_LABELS)
            self.version += 1
        logger.info("Graph reset")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def neighbors(self, label: str) -> tuple[str, ...]:
        with self._lock:
            try:
                return tuple(self._adjacency[label])
            except KeyError:
                raise NotFound(label) from None

    def degree(self, label: str) -> int:
        return len(self.neighbors(label))

    def has_node(self, label: str) -> bool:
        with self._lock:
            return label in self._adjacency

    def labels(self) -> list[str]:
        """All current labels in insertion order."""
        with self._lock:
            return list(self._adjacency)

    def edges(self) -> list[tuple[str, str]]:
        with self._lock:
            return edges_of(self._adjacency)

    def snapshot(self) -> dict[str, tuple[str, ...]]:
        """Copy of the adjacency, safe to traverse while the model changes."""
        return self.versioned_snapshot()[1]

    def versioned_snapshot(self) -> tuple[int, dict[str, tuple[str, ...]]]:
        """``(version, snapshot)`` taken under one lock acquisition."""
        with self._lock:
            return self.version, {
                label: tuple(nbrs) for label, nbrs in self._adjacency.items()
            }

    def __contains__(self, label: object) -> bool:
        with self._lock:
            return label in self._adjacency

    def __len__(self) -> int:
        with self._lock:
            return len(self._adjacency)

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels())

    def __repr__(self) -> str:
        return f"GraphModel(nodes={len(self)}, edges={len(self.edges())})"

    # ── Factory helpers ──────────────────────────────────────────────

    def _build_ring(self, labels: Sequence[str]) -> None:
        for label in labels:
            self._adjacency.setdefault(label, [])
        n = len(labels)
        if n < 2:
            return
        for i, label in enumerate(labels):
            self.connect(label, labels[(i + 1) % n])

    @classmethod
    def ring(
        cls,
        labels: Iterable[str],
        auto_connect: AutoConnectPolicy | None = None,
    ) -> GraphModel:
        """Create a ring connecting ``labels[i]`` to ``labels[i + 1]`` cyclically.

        The auto-connect policy only applies to later :meth:`add_node` calls.
        """
        graph = cls(auto_connect=auto_connect)
        graph._build_ring(list(labels))
        return graph

    @classmethod
    def default(cls) -> GraphModel:
        """The 7-node ring A-B-C-D-E-F-G-A."""
        return cls.ring(DEFAULT_RING_LABELS)
