"""Interactive Dash UI for the BFS ring visualizer.

Run with:
    python -m ring_bfs.visualization.dash_app

Opens at http://127.0.0.1:7860
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import pandas as pd
import plotly.graph_objects as go

import dash
from dash import dcc, html, ctx, dash_table, Input, Output, State, no_update

from ring_bfs.config import (
    BACKGROUND_COLOR,
    NODE_BORDER_COLOR,
    NODE_COLOR,
    PORT,
    SCENE_HEIGHT,
    SCENE_WIDTH,
    STEP_DELAY_MS,
    configure_logging,
)
from ring_bfs.core.errors import GraphError
from ring_bfs.core.graph import GraphModel, edges_of
from ring_bfs.layout.circle import LayoutAssigner
from ring_bfs.search.bfs import BFSEngine, BFSResult, EventKind, TraceEvent
from ring_bfs.visualization.playback import edge_colors, frames

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════
#  Dark plotly theme
# ═══════════════════════════════════════════════════════════════════════

_LAYOUT_DEFAULTS = dict(
    template="plotly_dark",
    paper_bgcolor=BACKGROUND_COLOR,
    plot_bgcolor=BACKGROUND_COLOR,
    font=dict(family="Consolas, monospace", color="#e8eaed"),
    margin=dict(l=20, r=20, t=50, b=20),
    height=600,
    uirevision="stable",
)

_DROPDOWN_IDS = (
    "connect-to", "remove-select", "edge-from", "edge-to",
    "start-select", "end-select",
)


# ═══════════════════════════════════════════════════════════════════════
#  Session state (one graph per server process)
# ═══════════════════════════════════════════════════════════════════════

_graph = GraphModel.default()
_layout = LayoutAssigner()
_engine = BFSEngine()

# Callbacks run on server worker threads; graph mutation and traversal or
# drawing never overlap.
_graph_lock = threading.Lock()

# Layout is recomputed only when the graph version changes
_layout_cache: tuple[int, dict[str, tuple[float, float]]] | None = None


def _label_options() -> list[dict[str, str]]:
    return [{"label": lbl, "value": lbl} for lbl in sorted(_graph.labels())]


def _trace_frame(events: list[TraceEvent]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "order": ev.order,
                "event": ev.kind.value,
                "node": ev.label,
                "from": ev.parent or "",
            }
            for ev in events
        ],
        columns=["order", "event", "node", "from"],
    )


def _encode_result(result: BFSResult) -> dict[str, Any]:
    return {
        "start": result.start,
        "end": result.end,
        "events": [
            {"kind": ev.kind.value, "label": ev.label,
             "parent": ev.parent, "order": ev.order}
            for ev in result.events
        ],
        "path": [list(e) for e in result.path] if result.found else [],
    }


def _decode_events(data: dict[str, Any]) -> list[TraceEvent]:
    return [
        TraceEvent(EventKind(e["kind"]), e["label"], e["parent"], e["order"])
        for e in data["events"]
    ]


# ═══════════════════════════════════════════════════════════════════════
#  Figure builders
# ═══════════════════════════════════════════════════════════════════════


def _positions(
    version: int,
    labels: list[str],
) -> dict[str, tuple[float, float]]:
    global _layout_cache
    if _layout_cache is None or _layout_cache[0] != version:
        _layout_cache = (version, _layout.assign(labels))
    return _layout_cache[1]


def _edge_traces(
    coords: dict[str, tuple[float, float]],
    edges: list[tuple[str, str]],
    path: list[tuple[str, str]],
) -> list[go.Scatter]:
    by_color: dict[str, tuple[list[float | None], list[float | None]]] = {}
    for (a, b), color in edge_colors(edges, path).items():
        if a not in coords or b not in coords:
            continue
        xs, ys = by_color.setdefault(color, ([], []))
        xs += [coords[a][0], coords[b][0], None]
        ys += [coords[a][1], coords[b][1], None]
    return [
        go.Scatter(
            x=xs, y=ys, mode="lines",
            line=dict(width=2, color=color),
            hoverinfo="none", showlegend=False,
        )
        for color, (xs, ys) in by_color.items()
    ]


def _build_figure(
    colors: dict[str, str] | None = None,
    path: list[tuple[str, str]] | None = None,
    title: str = "BFS Routing Visualizer (Ring Topology)",
) -> go.Figure:
    version, adjacency = _graph.versioned_snapshot()
    coords = _positions(version, list(adjacency))
    labels = sorted(coords)
    xs = [coords[lbl][0] for lbl in labels]
    ys = [coords[lbl][1] for lbl in labels]
    fills = [(colors or {}).get(lbl, NODE_COLOR) for lbl in labels]

    hover_text = [
        f"<b>Node: {lbl}</b><br>Connections: {len(adjacency[lbl])}"
        for lbl in labels
    ]

    fig = go.Figure()
    for trace in _edge_traces(coords, edges_of(adjacency), path or []):
        fig.add_trace(trace)
    fig.add_trace(
        go.Scatter(
            x=xs,
            y=ys,
            mode="markers+text",
            text=labels,
            textfont=dict(color="white", size=14),
            marker=dict(
                size=40,
                color=fills,
                line=dict(width=2, color=NODE_BORDER_COLOR),
            ),
            hovertext=hover_text,
            hoverinfo="text",
            showlegend=False,
        )
    )
    fig.update_layout(
        title=dict(text=title, font=dict(size=16)),
        xaxis=dict(range=[0, SCENE_WIDTH], visible=False,
                   scaleanchor="y", constrain="domain"),
        # Screen coordinates: y grows downward
        yaxis=dict(range=[SCENE_HEIGHT, 0], visible=False, constrain="domain"),
        **_LAYOUT_DEFAULTS,
    )
    return fig


# ═══════════════════════════════════════════════════════════════════════
#  Dash app + layout
# ═══════════════════════════════════════════════════════════════════════

app = dash.Dash(
    __name__,
    title="BFS Routing Visualizer",
    suppress_callback_exceptions=True,
)

_BAR_STYLE = {
    "display": "flex", "gap": "10px", "padding": "10px",
    "backgroundColor": "#1a1a2e", "borderColor": "#6e00ff",
}


def _dropdown(id_: str, placeholder: str) -> dcc.Dropdown:
    return dcc.Dropdown(
        id=id_, options=_label_options(), placeholder=placeholder,
        style={"minWidth": "140px", "color": "black"},
    )


app.layout = html.Div([
    html.Div([
        _dropdown("connect-to", "Connect To Node"),
        html.Button("Add Node", id="btn-add"),
        _dropdown("remove-select", "Select Node to Remove"),
        html.Button("Remove Node", id="btn-remove"),
        _dropdown("edge-from", "From"),
        _dropdown("edge-to", "To"),
        html.Button("Add Edge", id="btn-add-edge"),
    ], style={**_BAR_STYLE, "borderBottom": "2px solid #6e00ff"}),

    dcc.Graph(id="main-graph", figure=_build_figure()),

    html.Div([
        _dropdown("start-select", "Start Node"),
        _dropdown("end-select", "End Node"),
        html.Button("Run BFS", id="btn-run"),
        html.Button("Reset", id="btn-reset"),
        dcc.Input(id="node-input", type="text", placeholder="Node Label"),
    ], style={**_BAR_STYLE, "borderTop": "2px solid #6e00ff"}),

    html.Div(id="status", style={"color": "#9aa0a6", "padding": "8px"}),
    dash_table.DataTable(
        id="trace-table",
        columns=[{"name": c, "id": c} for c in ("order", "event", "node", "from")],
        data=[],
        style_header={"backgroundColor": "#1a1a2e", "color": "white"},
        style_cell={"backgroundColor": BACKGROUND_COLOR, "color": "#e8eaed"},
    ),

    dcc.Store(id="trace-store"),
    dcc.Store(id="playback-step", data=0),
    dcc.Interval(id="playback-interval", interval=STEP_DELAY_MS, disabled=True),
], style={"backgroundColor": BACKGROUND_COLOR, "minHeight": "100vh"})


# ═══════════════════════════════════════════════════════════════════════
#  Callbacks
# ═══════════════════════════════════════════════════════════════════════

# ── CB1: Graph mutations ─────────────────────────────────────────────

@app.callback(
    Output("main-graph", "figure", allow_duplicate=True),
    *[Output(i, "options") for i in _DROPDOWN_IDS],
    Output("status", "children", allow_duplicate=True),
    Output("trace-store", "data", allow_duplicate=True),
    Output("playback-interval", "disabled", allow_duplicate=True),
    Output("trace-table", "data", allow_duplicate=True),
    Input("btn-add", "n_clicks"),
    Input("btn-remove", "n_clicks"),
    Input("btn-add-edge", "n_clicks"),
    Input("btn-reset", "n_clicks"),
    State("node-input", "value"),
    State("connect-to", "value"),
    State("remove-select", "value"),
    State("edge-from", "value"),
    State("edge-to", "value"),
    prevent_initial_call=True,
)
def mutate_graph(add_clicks, remove_clicks, edge_clicks, reset_clicks,
                 node_text, connect_to, remove_label, edge_from, edge_to):
    triggered = ctx.triggered_id
    message = ""

    with _graph_lock:
        if triggered == "btn-add":
            label = (node_text or "").strip().upper()
            if _graph.add_node(label, connect_to=connect_to):
                message = f"Node {label} added with circular update."
            else:
                message = f"Cannot add node {label!r}."
        elif triggered == "btn-remove":
            if remove_label and _graph.remove_node(remove_label):
                message = f"Node {remove_label} removed."
        elif triggered == "btn-add-edge":
            if edge_from and edge_to and _graph.connect(edge_from, edge_to):
                message = f"Edge {edge_from}-{edge_to} added"
        elif triggered == "btn-reset":
            _graph.reset()
            message = "Graph reset."

        options = _label_options()
        figure = _build_figure()
    return (
        figure,
        *([options] * len(_DROPDOWN_IDS)),
        message, None, True, [],
    )


# ── CB2: Run BFS ─────────────────────────────────────────────────────

@app.callback(
    Output("trace-store", "data"),
    Output("playback-step", "data"),
    Output("playback-interval", "disabled"),
    Output("trace-table", "data"),
    Output("status", "children"),
    Output("main-graph", "figure", allow_duplicate=True),
    Input("btn-run", "n_clicks"),
    State("start-select", "value"),
    State("end-select", "value"),
    prevent_initial_call=True,
)
def run_bfs(n_clicks, start, end):
    if not start or not end:
        return (no_update,) * 6
    with _graph_lock:
        figure = _build_figure()
        try:
            result = _engine.run(_graph, start, end)
        except GraphError as exc:
            logger.warning("BFS request rejected: %s", exc)
            return None, 0, True, [], str(exc), figure

    table = _trace_frame(result.events).to_dict("records")
    return _encode_result(result), 0, False, table, f"Starting BFS from: {start}", figure


# ── CB3: Animated playback ───────────────────────────────────────────

@app.callback(
    Output("main-graph", "figure"),
    Output("playback-step", "data", allow_duplicate=True),
    Output("playback-interval", "disabled", allow_duplicate=True),
    Output("status", "children", allow_duplicate=True),
    Input("playback-interval", "n_intervals"),
    State("trace-store", "data"),
    State("playback-step", "data"),
    prevent_initial_call=True,
)
def advance_playback(n_intervals, trace_data, step):
    if not trace_data:
        return no_update, no_update, True, no_update
    events = _decode_events(trace_data)
    step = min(step or 0, len(events) - 1)
    ev = events[step]

    path: list[tuple[str, str]] = []
    if ev.kind is EventKind.FOUND:
        path = [tuple(e) for e in trace_data["path"]]
        status = f"Destination {ev.label} found."
    elif ev.kind is EventKind.UNREACHABLE:
        status = f"Destination {ev.label} not reachable."
    elif ev.kind is EventKind.QUEUED:
        status = f"Queueing: {ev.label} from: {ev.parent}"
    else:
        status = f"Starting BFS from: {ev.label}"

    done = ev.terminal or step + 1 >= len(events)
    title = f"BFS {trace_data['start']} → {trace_data['end']}"
    with _graph_lock:
        colors = frames(_graph.labels(), events[: step + 1])[-1]
        figure = _build_figure(colors, path, title)
    return figure, step + 1, done, status


# ═══════════════════════════════════════════════════════════════════════
#  Entry point
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    configure_logging()
    app.run(host="0.0.0.0", debug=False, port=PORT)
