"""Consumer-side replay of BFS traces.

The search itself never waits.  Everything time-related (delays between
highlight steps, early cancellation) lives here, on the presentation side.
"""

from __future__ import annotations

import threading
from typing import Callable, Iterable, Sequence

from ..config import (
    EDGE_COLOR, NODE_COLOR, PATH_COLOR, QUEUED_COLOR, START_COLOR, STEP_DELAY_MS,
)
from ..search.bfs import EventKind, TraceEvent

EVENT_COLORS = {
    EventKind.START: START_COLOR,
    EventKind.QUEUED: QUEUED_COLOR,
}


def edge_key(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a < b else (b, a)


def frames(
    labels: Iterable[str],
    events: Sequence[TraceEvent],
) -> list[dict[str, str]]:
    """Cumulative node colours after each event.

    ``frames(...)[i]`` is the colouring once ``events[i]`` has been shown.
    Terminal events leave the colours unchanged.
    """
    colors = {label: NODE_COLOR for label in labels}
    out: list[dict[str, str]] = []
    for ev in events:
        color = EVENT_COLORS.get(ev.kind)
        if color is not None and ev.label in colors:
            colors[ev.label] = color
        out.append(dict(colors))
    return out


def edge_colors(
    edges: Iterable[tuple[str, str]],
    path: Iterable[tuple[str, str]] = (),
) -> dict[tuple[str, str], str]:
    """Map every edge (normalised to ``u < v``) to its display colour."""
    on_path = {edge_key(a, b) for a, b in path}
    colors = {}
    for a, b in edges:
        key = edge_key(a, b)
        colors[key] = PATH_COLOR if key in on_path else EDGE_COLOR
    return colors


def replay(
    events: Iterable[TraceEvent],
    on_event: Callable[[TraceEvent], None],
    delay_ms: float = STEP_DELAY_MS,
    stop: threading.Event | None = None,
) -> int:
    """Feed *events* to *on_event*, pausing *delay_ms* after each queued one.

    Setting *stop* cancels the replay between events.  Returns the number
    of events delivered.
    """
    stop = stop or threading.Event()
    delivered = 0
    for ev in events:
        if stop.is_set():
            break
        on_event(ev)
        delivered += 1
        if ev.kind is EventKind.QUEUED and delay_ms > 0:
            if stop.wait(delay_ms / 1000.0):
                break
    return delivered
