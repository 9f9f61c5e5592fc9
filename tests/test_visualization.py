"""Tests for the matplotlib renderer and the Dash figure builders."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest
from matplotlib.animation import FuncAnimation

from ring_bfs.config import PATH_COLOR
from ring_bfs.core.graph import GraphModel
from ring_bfs.layout.circle import LayoutAssigner
from ring_bfs.search.bfs import BFSEngine
from ring_bfs.visualization import dash_app
from ring_bfs.visualization.renderer import GraphRenderer


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


class TestGraphRenderer:
    def test_render_draws_every_edge(self):
        graph = GraphModel.default()
        ax = GraphRenderer(graph).render()
        assert len(ax.lines) == 7
        assert len(ax.collections) == 1

    def test_render_result_highlights_path(self):
        graph = GraphModel.default()
        result = BFSEngine().run(graph, "A", "D")
        ax = GraphRenderer(graph).render_result(result)
        teal = [ln for ln in ax.lines if ln.get_color() == PATH_COLOR]
        assert len(teal) == 3
        assert "found" in ax.get_title()

    def test_render_result_unreachable(self):
        graph = GraphModel.default()
        graph.remove_node("C")
        graph.remove_node("E")
        result = BFSEngine().run(graph, "A", "D")
        ax = GraphRenderer(graph).render_result(result)
        assert "not reachable" in ax.get_title()

    def test_frame_title(self):
        result = BFSEngine().run(GraphModel.default(), "A", "D")
        title = GraphRenderer.frame_title(result, result.events[1])
        assert title == "BFS A → D: queued B"
        assert "\u2014" not in title

    def test_animate_trace(self):
        graph = GraphModel.default()
        result = BFSEngine().run(graph, "A", "D")
        anim = GraphRenderer(graph).animate_trace(result, interval_ms=10)
        assert isinstance(anim, FuncAnimation)


class TestDashFigures:
    def test_base_figure_traces(self):
        fig = dash_app._build_figure()
        # one edge trace (single colour) + node markers
        assert len(fig.data) == 2
        assert list(fig.data[-1].text) == sorted(dash_app._graph.labels())

    def test_path_gets_own_edge_trace(self):
        result = BFSEngine().run(dash_app._graph, "A", "D")
        fig = dash_app._build_figure(path=result.path)
        assert len(fig.data) == 3
        colours = {tr.line.color for tr in fig.data[:-1]}
        assert PATH_COLOR in colours

    def test_trace_frame_columns(self):
        result = BFSEngine().run(dash_app._graph, "A", "D")
        df = dash_app._trace_frame(result.events)
        assert list(df.columns) == ["order", "event", "node", "from"]
        assert df.iloc[0]["event"] == "start"
        assert df.iloc[-1]["node"] == "D"

    def test_store_encoding_keeps_events(self):
        result = BFSEngine().run(dash_app._graph, "A", "D")
        data = dash_app._encode_result(result)
        assert dash_app._decode_events(data) == result.events
        assert data["path"] == [["A", "B"], ["B", "C"], ["C", "D"]]

    def test_layout_recomputed_only_on_version_change(self, monkeypatch):
        calls = []
        layout = LayoutAssigner()

        class _CountingLayout:
            def assign(self, labels):
                calls.append(list(labels))
                return layout.assign(labels)

        graph = GraphModel.default()
        monkeypatch.setattr(dash_app, "_graph", graph)
        monkeypatch.setattr(dash_app, "_layout", _CountingLayout())
        monkeypatch.setattr(dash_app, "_layout_cache", None)

        dash_app._build_figure()
        dash_app._build_figure()
        assert len(calls) == 1

        graph.add_node("H")
        fig = dash_app._build_figure()
        assert len(calls) == 2
        assert "H" in fig.data[-1].text

    def test_figure_hover_uses_snapshot_degree(self, monkeypatch):
        graph = GraphModel.default()
        graph.add_node("H")
        monkeypatch.setattr(dash_app, "_graph", graph)
        monkeypatch.setattr(dash_app, "_layout_cache", None)
        fig = dash_app._build_figure()
        hover = dict(zip(fig.data[-1].text, fig.data[-1].hovertext))
        assert hover["A"].endswith("Connections: 3")
        assert hover["H"].endswith("Connections: 1")
