"""Ring BFS demo.

Builds the default A..G ring, adds node H (which the anchor rule wires to
A), runs BFS from A to D, replays the trace on the console with the usual
animation delay and saves the final picture.
"""

from __future__ import annotations

import matplotlib.pyplot as plt

from ..config import configure_logging
from ..core.graph import GraphModel
from ..search.bfs import BFSEngine, TraceEvent
from ..visualization.playback import replay
from ..visualization.renderer import GraphRenderer


def print_event(ev: TraceEvent) -> None:
    origin = f" from {ev.parent}" if ev.parent else ""
    print(f"[{ev.order:>2}] {ev.kind.value:<11} {ev.label}{origin}")


def main() -> None:
    configure_logging()

    graph = GraphModel.default()
    graph.add_node("H", connect_to="D")

    result = BFSEngine().run(graph, "A", "D")
    replay(result.events, print_event)
    print("Path:", " -> ".join(result.path_nodes))

    renderer = GraphRenderer(graph)
    renderer.render_result(result)
    plt.savefig("ring_demo.png", dpi=150)
    plt.show()


if __name__ == "__main__":
    main()
