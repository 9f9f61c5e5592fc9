"""Tests for the graph model."""

from __future__ import annotations

import threading

import pytest

from ring_bfs.core.errors import InvalidLabel, NotFound
from ring_bfs.core.graph import GraphModel
from ring_bfs.core.policy import no_auto_connect, ring_anchor
from ring_bfs.search.bfs import BFSEngine


def _assert_symmetric(graph: GraphModel) -> None:
    for label in graph.labels():
        for nbr in graph.neighbors(label):
            assert nbr in graph
            assert label in graph.neighbors(nbr)


class TestDefaultRing:
    def test_seven_nodes(self):
        graph = GraphModel.default()
        assert graph.labels() == ["A", "B", "C", "D", "E", "F", "G"]

    def test_each_node_has_two_ring_neighbors(self):
        graph = GraphModel.default()
        assert graph.neighbors("A") == ("B", "G")
        assert graph.neighbors("B") == ("A", "C")
        assert graph.neighbors("G") == ("F", "A")
        for label in graph.labels():
            assert graph.degree(label) == 2
        _assert_symmetric(graph)

    def test_edges_listed_once(self):
        graph = GraphModel.default()
        edges = graph.edges()
        assert len(edges) == 7
        assert all(a < b for a, b in edges)
        assert ("A", "G") in edges

    def test_reset_restores_ring(self):
        graph = GraphModel.default()
        graph.remove_node("C")
        graph.add_node("Z")
        graph.reset()
        assert graph.labels() == ["A", "B", "C", "D", "E", "F", "G"]
        assert len(graph.edges()) == 7

    def test_two_node_ring_has_single_edge(self):
        graph = GraphModel.ring(["A", "B"])
        assert graph.edges() == [("A", "B")]


class TestAddNode:
    def test_new_node_connects_to_anchor(self):
        graph = GraphModel.default()
        assert graph.add_node("H")
        assert graph.neighbors("H") == ("A",)
        assert graph.neighbors("A") == ("B", "G", "H")

    def test_connect_to_applied_before_anchor(self):
        graph = GraphModel.default()
        graph.add_node("H", connect_to="D")
        assert graph.neighbors("H") == ("D", "A")
        assert "H" in graph.neighbors("D")
        _assert_symmetric(graph)

    def test_connect_to_anchor_not_duplicated(self):
        graph = GraphModel.default()
        graph.add_node("H", connect_to="A")
        assert graph.neighbors("H") == ("A",)
        assert graph.neighbors("A").count("H") == 1

    def test_absent_connect_to_is_ignored(self):
        graph = GraphModel.default()
        graph.add_node("H", connect_to="Q")
        assert graph.neighbors("H") == ("A",)

    def test_adding_anchor_never_self_loops(self):
        graph = GraphModel.ring(["B", "C"])
        graph.add_node("A")
        assert graph.neighbors("A") == ()

    def test_no_anchor_without_a(self):
        graph = GraphModel.ring(["B", "C", "D"])
        graph.add_node("E")
        assert graph.neighbors("E") == ()

    def test_policy_can_be_disabled(self):
        graph = GraphModel.ring("ABC", auto_connect=no_auto_connect)
        graph.add_node("D")
        assert graph.neighbors("D") == ()

    def test_custom_anchor(self):
        graph = GraphModel.ring("XYZ", auto_connect=ring_anchor("Z"))
        graph.add_node("W")
        assert graph.neighbors("W") == ("Z",)

    def test_empty_and_duplicate_are_noops(self):
        graph = GraphModel.default()
        version = graph.version
        assert not graph.add_node("")
        assert not graph.add_node("B")
        assert len(graph) == 7
        assert graph.version == version

    def test_strict_raises_invalid_label(self):
        graph = GraphModel.default()
        with pytest.raises(InvalidLabel):
            graph.add_node("", strict=True)
        with pytest.raises(InvalidLabel):
            graph.add_node("B", strict=True)
        with pytest.raises(ValueError):
            graph.add_node("C", strict=True)


class TestConnect:
    def test_connect_is_symmetric_and_idempotent(self):
        graph = GraphModel.default()
        assert graph.connect("A", "D")
        once = graph.snapshot()
        assert not graph.connect("D", "A")
        assert not graph.connect("A", "D")
        assert graph.snapshot() == once
        _assert_symmetric(graph)

    def test_self_loop_rejected(self):
        graph = GraphModel.default()
        assert not graph.connect("A", "A")
        assert "A" not in graph.neighbors("A")

    def test_missing_endpoint_is_noop(self):
        graph = GraphModel.default()
        assert not graph.connect("A", "Q")
        assert graph.neighbors("A") == ("B", "G")

    def test_strict_missing_endpoint_raises(self):
        graph = GraphModel.default()
        with pytest.raises(NotFound):
            graph.connect("Q", "A", strict=True)

    def test_version_bumps_on_change_only(self):
        graph = GraphModel.default()
        v0 = graph.version
        graph.connect("A", "C")
        assert graph.version == v0 + 1
        graph.connect("A", "C")
        assert graph.version == v0 + 1


class TestRemoveNode:
    def test_remove_cascades_edges(self):
        graph = GraphModel.default()
        graph.connect("C", "F")
        assert graph.remove_node("C")
        assert "C" not in graph.labels()
        for label in graph.labels():
            assert "C" not in graph.neighbors(label)
        assert graph.neighbors("F") == ("E", "G")
        _assert_symmetric(graph)

    def test_remove_absent_is_noop(self):
        graph = GraphModel.default()
        assert not graph.remove_node("Q")
        assert len(graph) == 7


class TestQueries:
    def test_neighbors_of_missing_node(self):
        graph = GraphModel.default()
        with pytest.raises(NotFound):
            graph.neighbors("Q")
        with pytest.raises(KeyError):
            graph.degree("Q")

    def test_has_node_and_contains(self):
        graph = GraphModel.default()
        assert graph.has_node("A")
        assert "G" in graph
        assert not graph.has_node("H")

    def test_snapshot_is_detached(self):
        graph = GraphModel.default()
        snap = graph.snapshot()
        graph.remove_node("B")
        assert "B" in snap
        assert snap["A"] == ("B", "G")


class TestAtomicity:
    def test_reader_waits_for_removal_to_finish(self):
        graph = GraphModel.default()
        results = []
        worker = threading.Thread(
            target=lambda: results.append(BFSEngine().run(graph, "A", "D")),
        )
        blocked = []

        class _PausingList(list):
            def remove(self, value):
                worker.start()
                worker.join(0.2)
                blocked.append(worker.is_alive())
                super().remove(value)

        graph._adjacency["B"] = _PausingList(graph._adjacency["B"])
        graph.remove_node("C")
        worker.join(5)

        assert blocked == [True]
        result = results[0]
        assert "C" not in result.visited
        assert result.path_nodes == ["A", "G", "F", "E", "D"]

    def test_versioned_snapshot_matches_version(self):
        graph = GraphModel.default()
        graph.add_node("H")
        version, snap = graph.versioned_snapshot()
        assert version == graph.version
        assert snap["H"] == ("A",)
