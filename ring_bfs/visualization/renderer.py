"""Matplotlib-based 2D visualization for the BFS ring graph."""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from ..config import BACKGROUND_COLOR, NODE_BORDER_COLOR, NODE_COLOR, STEP_DELAY_MS
from ..core.graph import GraphModel
from ..layout.circle import LayoutAssigner
from ..search.bfs import BFSResult, EventKind, TraceEvent
from .playback import edge_colors, frames


class GraphRenderer:
    """Renders a snapshot or a trace replay of a :class:`GraphModel`."""

    def __init__(self, graph: GraphModel, layout: LayoutAssigner | None = None) -> None:
        self.graph = graph
        self.layout = layout or LayoutAssigner()

    def _node_positions(self) -> tuple[np.ndarray, np.ndarray, list[str]]:
        coords = self.layout.assign(self.graph.labels())
        labels = sorted(coords)
        xs = np.array([coords[label][0] for label in labels])
        ys = np.array([coords[label][1] for label in labels])
        return xs, ys, labels

    def _setup_axes(self, ax: Any) -> None:
        ax.set_facecolor(BACKGROUND_COLOR)
        ax.set_xlim(0, self.layout.width)
        # Screen coordinates: y grows downward
        ax.set_ylim(self.layout.height, 0)
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])

    def _draw_edges(self, ax: Any, path: Sequence[tuple[str, str]] = ()) -> list[Any]:
        coords = self.layout.assign(self.graph.labels())
        lines = []
        for (a, b), color in edge_colors(self.graph.edges(), path).items():
            (line,) = ax.plot(
                [coords[a][0], coords[b][0]],
                [coords[a][1], coords[b][1]],
                color=color, linewidth=2, zorder=1,
            )
            lines.append(line)
        return lines

    def render(
        self,
        *,
        colors: dict[str, str] | None = None,
        path: Sequence[tuple[str, str]] = (),
        title: str = "BFS Routing Visualizer (Ring Topology)",
        ax: Any = None,
    ) -> Any:
        """Draw nodes (optionally recoloured) and edges, highlighting *path*."""
        if ax is None:
            _fig, ax = plt.subplots(1, 1, figsize=(10, 7))
        self._setup_axes(ax)

        xs, ys, labels = self._node_positions()
        fills = [(colors or {}).get(label, NODE_COLOR) for label in labels]

        self._draw_edges(ax, path)
        ax.scatter(xs, ys, c=fills, s=600, edgecolors=NODE_BORDER_COLOR,
                   linewidths=2, zorder=2)
        for x, y, label in zip(xs, ys, labels):
            ax.annotate(label, (x, y), ha="center", va="center",
                        color="white", fontfamily="monospace", zorder=3)

        ax.set_title(title)
        return ax

    def render_result(self, result: BFSResult, *, ax: Any = None) -> Any:
        """Final state of *result*: every visited node coloured, path drawn."""
        events = result.events
        colors = frames(self.graph.labels(), events)[-1] if events else None
        path = result.path if result.found else []
        verdict = "found" if result.found else "not reachable"
        return self.render(
            colors=colors, path=path, ax=ax,
            title=f"BFS {result.start} → {result.end}: {verdict}",
        )

    @staticmethod
    def frame_title(result: BFSResult, ev: TraceEvent) -> str:
        return f"BFS {result.start} → {result.end}: {ev.kind.value} {ev.label}"

    def animate_trace(
        self,
        result: BFSResult,
        *,
        interval_ms: int = STEP_DELAY_MS,
    ) -> FuncAnimation:
        """Replay *result* one trace event per frame.

        The shortest path is drawn on the frame showing the ``found`` event.
        """
        fig, ax = plt.subplots(1, 1, figsize=(10, 7))
        self._setup_axes(ax)
        xs, ys, labels = self._node_positions()
        self._draw_edges(ax)
        sc = ax.scatter(xs, ys, c=[NODE_COLOR] * len(labels), s=600,
                        edgecolors=NODE_BORDER_COLOR, linewidths=2, zorder=2)
        for x, y, label in zip(xs, ys, labels):
            ax.annotate(label, (x, y), ha="center", va="center",
                        color="white", fontfamily="monospace", zorder=3)
        title_obj = ax.set_title(f"BFS {result.start} → {result.end}")

        colour_frames = frames(labels, result.events)
        path = result.path if result.found else []

        def update(frame: int) -> Any:
            ev: TraceEvent = result.events[frame]
            colors = colour_frames[frame]
            sc.set_facecolor([colors[label] for label in labels])
            if ev.kind is EventKind.FOUND and path:
                self._draw_edges(ax, path)
            title_obj.set_text(self.frame_title(result, ev))
            return (sc, title_obj)

        anim = FuncAnimation(fig, update, frames=len(result.events),
                             interval=interval_ms, blit=False, repeat=False)
        return anim
