"""Breadth-first search producing a replayable trace.

A run emits a ``start`` event for the start node, a ``queued`` event each
time an unvisited neighbour is discovered, and ends with either ``found``
(the end node was dequeued) or ``unreachable`` (the queue ran dry).  The
trace is generated lazily and never sleeps; animation timing belongs to
whoever consumes it.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Sequence, Union

from ..core.errors import InvalidEnd, InvalidStart, NoPath
from ..core.graph import GraphModel

logger = logging.getLogger(__name__)

GraphLike = Union[GraphModel, Mapping[str, Sequence[str]]]


class EventKind(str, enum.Enum):
    START = "start"
    QUEUED = "queued"
    FOUND = "found"
    UNREACHABLE = "unreachable"


class RunState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    FOUND = "found"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class TraceEvent:
    """One step of a BFS run.

    ``parent`` is the node that discovered ``label`` (``None`` for the start
    node and for ``unreachable``).  ``order`` is the event's index in the
    trace.
    """

    kind: EventKind
    label: str
    parent: str | None
    order: int

    @property
    def terminal(self) -> bool:
        return self.kind in (EventKind.FOUND, EventKind.UNREACHABLE)


def _adjacency_of(graph: GraphLike) -> dict[str, tuple[str, ...]]:
    if isinstance(graph, GraphModel):
        return graph.snapshot()
    return {label: tuple(nbrs) for label, nbrs in graph.items()}


def reconstruct_path(
    parent: Mapping[str, str],
    start: str,
    end: str,
) -> list[tuple[str, str]]:
    """Walk parent links back from *end* and return the edges start→end.

    Returns an empty list when ``start == end``.
    """
    if end == start:
        return []
    if end not in parent:
        raise NoPath(start, end)
    edges: list[tuple[str, str]] = []
    current = end
    while current != start:
        prev = parent.get(current)
        if prev is None:
            raise NoPath(start, end)
        edges.append((prev, current))
        current = prev
    edges.reverse()
    return edges


class Traversal:
    """A restartable BFS run over a fixed adjacency snapshot.

    Every iterator keeps its own queue, parent map and visited list, so
    iterating twice (even interleaved) yields two identical, independent
    traces.  ``state``, ``parent`` and ``visited`` are published together
    by whichever iterator most recently reached a terminal event.
    """

    def __init__(
        self,
        adjacency: Mapping[str, Sequence[str]],
        start: str,
        end: str,
    ) -> None:
        self._adjacency = adjacency
        self.start = start
        self.end = end
        self.state = RunState.IDLE
        self.parent: dict[str, str] = {}
        self.visited: list[str] = []

    def __iter__(self) -> Iterator[TraceEvent]:
        return self._run()

    def _run(self) -> Iterator[TraceEvent]:
        parent: dict[str, str] = {}
        visited: list[str] = [self.start]
        seen = {self.start}
        queue: deque[str] = deque([self.start])
        if self.state is RunState.IDLE:
            self.state = RunState.RUNNING
        order = 0

        logger.info("Starting BFS from: %s", self.start)
        yield TraceEvent(EventKind.START, self.start, None, order)

        while queue:
            current = queue.popleft()
            logger.debug("Visiting: %s", current)

            if current == self.end:
                self._publish(RunState.FOUND, parent, visited)
                order += 1
                logger.info("Destination %s found", self.end)
                yield TraceEvent(EventKind.FOUND, current, parent.get(current), order)
                return

            for neighbor in self._adjacency.get(current, ()):
                if neighbor in seen:
                    continue
                parent[neighbor] = current
                seen.add(neighbor)
                visited.append(neighbor)
                queue.append(neighbor)
                order += 1
                logger.debug("Queueing: %s from: %s", neighbor, current)
                yield TraceEvent(EventKind.QUEUED, neighbor, current, order)

        self._publish(RunState.UNREACHABLE, parent, visited)
        order += 1
        logger.info("Destination %s not reachable", self.end)
        yield TraceEvent(EventKind.UNREACHABLE, self.end, None, order)

    def _publish(
        self,
        state: RunState,
        parent: dict[str, str],
        visited: list[str],
    ) -> None:
        self.parent = dict(parent)
        self.visited = list(visited)
        self.state = state

    def path(self) -> list[tuple[str, str]]:
        """Edges of the shortest path found by the last completed iteration."""
        if self.state is not RunState.FOUND:
            raise NoPath(self.start, self.end)
        return reconstruct_path(self.parent, self.start, self.end)


@dataclass
class BFSResult:
    """A fully consumed traversal."""

    start: str
    end: str
    events: list[TraceEvent]
    state: RunState
    parent: dict[str, str] = field(default_factory=dict)
    visited: list[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.state is RunState.FOUND

    @property
    def path(self) -> list[tuple[str, str]]:
        """Shortest-path edges; raises :class:`NoPath` when unreachable."""
        if not self.found:
            raise NoPath(self.start, self.end)
        return reconstruct_path(self.parent, self.start, self.end)

    @property
    def path_nodes(self) -> list[str]:
        edges = self.path
        return [self.start] + [b for _a, b in edges]


class BFSEngine:
    """Stateless BFS runner.

    Both entry points validate the endpoints immediately and work on a
    snapshot of the graph, so later graph mutations never affect a trace
    that was already requested.
    """

    def trace(self, graph: GraphLike, start: str, end: str) -> Traversal:
        adjacency = _adjacency_of(graph)
        if start not in adjacency:
            raise InvalidStart(start)
        if end not in adjacency:
            raise InvalidEnd(end)
        return Traversal(adjacency, start, end)

    def run(self, graph: GraphLike, start: str, end: str) -> BFSResult:
        traversal = self.trace(graph, start, end)
        events = list(traversal)
        return BFSResult(
            start=start,
            end=end,
            events=events,
            state=traversal.state,
            parent=dict(traversal.parent),
            visited=list(traversal.visited),
        )
