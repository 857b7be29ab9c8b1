"""Tests for the double-labeling trace engine.

Covers:
- The classroom example, asserted literally step by step
- Tie-break and edge-order determinism
- Early exit, unreachable end, self-loops, parallel edges
- Snapshot independence (no aliasing between Steps)
- Trace-wide invariants (monotonic status, frozen P-labels, frontier order)
- Validation happening before any Step exists
"""

import dataclasses
from typing import List

import pytest

from graph import Graph, GraphInvalid, GraphCheck, NodeStatus, INF
from algorithms import Step, StepKind, run_double_labeling, trace, shortest_path, fmt
from tests.conftest import make_graph


ORDER = {NodeStatus.UNVISITED: 0, NodeStatus.TEMPORARY: 1, NodeStatus.PERMANENT: 2}


class TestExampleGraph:
    """v1..v6 from the classroom example, start v1, end v6."""

    def test_step_kinds(self, example_trace: List[Step]):
        F, R, A = StepKind.FINALIZE, StepKind.RELAX, StepKind.ARRIVE
        assert [s.kind for s in example_trace] == [
            StepKind.INIT,
            F, R, R,        # v1: e1, e2
            F, R, R, R,     # v3: e3, e5, e6
            F, R,           # v2: e4
            F, R, R,        # v4: e7, e8
            F, R,           # v5: e9
            F, A,           # v6
        ]

    def test_indices_are_positions(self, example_trace: List[Step]):
        assert [s.index for s in example_trace] == list(range(17))

    def test_finalisation_order(self, example_trace: List[Step]):
        assert example_trace[-1].permanent_nodes == ("v1", "v3", "v2", "v4", "v5", "v6")

    def test_final_labels(self, example_trace: List[Step]):
        final = example_trace[-1].node_states
        assert {nid: (s.distance, s.parent) for nid, s in final.items()} == {
            "v1": (0, "v1"),
            "v3": (2, "v1"),
            "v2": (3, "v3"),
            "v4": (8, "v2"),
            "v5": (10, "v4"),
            "v6": (13, "v5"),
        }
        assert all(s.status is NodeStatus.PERMANENT for s in final.values())

    def test_shortest_path(self, example_trace: List[Step]):
        assert shortest_path(example_trace[-1], "v6") == ["v1", "v3", "v2", "v4", "v5", "v6"]

    def test_checking_edges_in_order(self, example_trace: List[Step]):
        examined = [s.checking_edge for s in example_trace if s.checking_edge]
        assert examined == ["e1", "e2", "e3", "e5", "e6", "e4", "e7", "e8", "e9"]

    def test_initial_snapshot(self, example_trace: List[Step]):
        first = example_trace[0]
        assert first.active_node is None and first.checking_edge is None
        assert first.permanent_nodes == ()
        assert first.state_of("v1").status is NodeStatus.TEMPORARY
        assert first.state_of("v1").parent == "v1"
        assert first.state_of("v6").distance == INF
        assert first.state_of("v6").status is NodeStatus.UNVISITED

    def test_relaxation_lowers_v2_through_v3(self, example_trace: List[Step]):
        step = example_trace[5]
        assert step.kind is StepKind.RELAX
        assert (step.active_node, step.checking_edge) == ("v3", "e3")
        assert (step.state_of("v2").distance, step.state_of("v2").parent) == (3, "v3")
        assert "4 → 3" in step.description

    def test_arrival_description(self, example_trace: List[Step]):
        last = example_trace[-1]
        assert last.active_node == "v6"
        assert "13" in last.description
        assert "v1 → v3 → v2 → v4 → v5 → v6" in last.description

    def test_plain_list_entry_point(self, example_graph: Graph, example_trace: List[Step]):
        assert trace(example_graph.nodes, example_graph.edges, "v1", "v6") == example_trace


class TestSelectionAndRelaxation:
    """Tie-break, no-improvement steps, special edges."""

    def test_tie_goes_to_first_node_in_list(self):
        g = make_graph(["s", "y", "x"], [("e1", "s", "x", 1), ("e2", "s", "y", 1)])
        steps = run_double_labeling(g, "s", "x")
        assert steps[-1].permanent_nodes == ("s", "y", "x")

    def test_tie_break_is_not_lexicographic(self):
        g = make_graph(["s", "b", "a"], [("e1", "s", "a", 1), ("e2", "s", "b", 1)])
        finalized = [s.active_node for s in run_double_labeling(g, "s", "a") if s.kind is StepKind.FINALIZE]
        assert finalized == ["s", "b", "a"]

    def test_worse_path_emits_no_improvement(self):
        g = make_graph(["a", "b", "c"], [("ab", "a", "b", 1), ("ac", "a", "c", 1), ("bc", "b", "c", 5)])
        steps = run_double_labeling(g, "a", "c")
        checks = [s for s in steps if s.kind is StepKind.NO_IMPROVEMENT]
        assert len(checks) == 1
        assert (checks[0].active_node, checks[0].checking_edge) == ("b", "bc")
        assert checks[0].state_of("c").distance == 1

    def test_equal_candidate_keeps_old_parent(self):
        g = make_graph(["a", "b", "c"], [("ab", "a", "b", 2), ("ac", "a", "c", 1), ("cb", "c", "b", 1)])
        steps = run_double_labeling(g, "a", "b")
        cb = next(s for s in steps if s.checking_edge == "cb")
        assert cb.kind is StepKind.NO_IMPROVEMENT
        assert (cb.state_of("b").distance, cb.state_of("b").parent) == (2, "a")

    def test_edges_to_permanent_nodes_are_skipped_silently(self, example_trace: List[Step]):
        # e2 touches v3 but v1 is already P when v3 is finalised
        v3_edges = [s.checking_edge for s in example_trace if s.active_node == "v3" and s.checking_edge]
        assert "e2" not in v3_edges

    def test_self_loop_never_relaxed(self):
        g = make_graph(["a", "b"], [("loop", "a", "a", 3), ("ab", "a", "b", 1)])
        steps = run_double_labeling(g, "a", "b")
        assert "loop" not in [s.checking_edge for s in steps]
        assert [s.kind for s in steps] == [
            StepKind.INIT, StepKind.FINALIZE, StepKind.RELAX, StepKind.FINALIZE, StepKind.ARRIVE,
        ]

    def test_parallel_edges_each_examined(self):
        g = make_graph(["a", "b"], [("slow", "a", "b", 5), ("fast", "a", "b", 2)])
        steps = run_double_labeling(g, "a", "b")
        relaxed = [(s.checking_edge, s.state_of("b").distance) for s in steps if s.kind is StepKind.RELAX]
        assert relaxed == [("slow", 5), ("fast", 2)]

    def test_edge_endpoint_order_does_not_matter(self):
        g = make_graph(["a", "b"], [("ba", "b", "a", 7)])
        steps = run_double_labeling(g, "a", "b")
        assert steps[-1].state_of("b").distance == 7

    def test_zero_weight_edges(self):
        g = make_graph(["a", "b", "c"], [("ab", "a", "b", 0), ("bc", "b", "c", 0)])
        assert run_double_labeling(g, "a", "c")[-1].state_of("c").distance == 0

    def test_float_weights_display_compactly(self):
        g = make_graph(["a", "b"], [("ab", "a", "b", 2.5)])
        steps = run_double_labeling(g, "a", "b")
        assert "2.5" in steps[2].description
        assert fmt(3.0) == "3"
        assert fmt(INF) == "∞"


class TestTermination:
    """Early exit at the end node and the exhausted outcome."""

    def test_start_equals_end(self, example_graph: Graph):
        steps = run_double_labeling(example_graph, "v1", "v1")
        assert [s.kind for s in steps] == [StepKind.INIT, StepKind.FINALIZE, StepKind.ARRIVE]
        assert shortest_path(steps[-1], "v1") == ["v1"]

    def test_early_exit_leaves_rest_unfinalised(self, example_graph: Graph):
        steps = run_double_labeling(example_graph, "v1", "v3")
        last = steps[-1]
        assert last.kind is StepKind.ARRIVE
        assert last.permanent_nodes == ("v1", "v3")
        assert last.state_of("v2").status is NodeStatus.TEMPORARY
        assert last.state_of("v6").status is NodeStatus.UNVISITED

    def test_unreachable_end(self):
        g = make_graph(["a", "b", "c"], [("ab", "a", "b", 1)])
        steps = run_double_labeling(g, "a", "c")
        last = steps[-1]
        assert last.kind is StepKind.EXHAUSTED
        assert "No further reachable" in last.description
        assert last.active_node is None
        assert "c" not in last.permanent_nodes
        assert last.state_of("c").distance == INF
        assert last.state_of("c").status is NodeStatus.UNVISITED
        assert shortest_path(last, "c") == []

    def test_isolated_start_and_no_edges(self):
        steps = run_double_labeling(make_graph(["a", "b"], []), "a", "b")
        assert [s.kind for s in steps] == [StepKind.INIT, StepKind.FINALIZE, StepKind.EXHAUSTED]

    def test_nothing_finalised_after_end(self, example_graph: Graph):
        for end in example_graph.node_ids():
            steps = run_double_labeling(example_graph, "v1", end)
            k = next(i for i, s in enumerate(steps) if s.kind is StepKind.FINALIZE and s.active_node == end)
            assert all(s.kind is not StepKind.FINALIZE for s in steps[k + 1:])


class TestSnapshots:
    """Each Step owns its own copy of the labels."""

    def test_early_steps_do_not_see_later_updates(self, example_trace: List[Step]):
        assert example_trace[0].state_of("v6").distance == INF
        assert example_trace[12].state_of("v6").distance == 14
        assert example_trace[14].state_of("v6").distance == 13

    def test_node_states_are_read_only(self, example_trace: List[Step]):
        with pytest.raises(TypeError):
            example_trace[3].node_states["v1"] = None

    def test_labels_are_frozen(self, example_trace: List[Step]):
        with pytest.raises(dataclasses.FrozenInstanceError):
            example_trace[3].state_of("v2").distance = 0

    def test_step_is_frozen(self, example_trace: List[Step]):
        with pytest.raises(dataclasses.FrozenInstanceError):
            example_trace[3].description = "edited"

    def test_every_step_lists_every_node(self, example_graph: Graph, example_trace: List[Step]):
        for step in example_trace:
            assert list(step.node_states) == example_graph.node_ids()

    def test_inputs_not_mutated(self, example_graph: Graph):
        before = example_graph.to_dict()
        run_double_labeling(example_graph, "v1", "v6")
        assert example_graph.to_dict() == before

    def test_dict_round_trip(self, example_trace: List[Step]):
        step = example_trace[6]
        assert Step.from_dict(step.to_dict()) == step


class TestTraceInvariants:
    """Properties that hold across the whole trace."""

    @pytest.fixture(params=["v1", "v4", "v6"])
    def any_trace(self, request, example_graph: Graph) -> List[Step]:
        return run_double_labeling(example_graph, request.param, "v6" if request.param != "v6" else "v1")

    def test_deterministic(self, example_graph: Graph):
        first = run_double_labeling(example_graph, "v1", "v6")
        second = run_double_labeling(example_graph, "v1", "v6")
        assert first == second
        assert [s.to_dict() for s in first] == [s.to_dict() for s in second]

    def test_status_never_goes_backward(self, any_trace: List[Step]):
        for prev, cur in zip(any_trace, any_trace[1:]):
            for nid, state in cur.node_states.items():
                assert ORDER[state.status] >= ORDER[prev.state_of(nid).status]

    def test_permanent_labels_frozen(self, any_trace: List[Step]):
        for i, step in enumerate(any_trace):
            for nid in step.permanent_nodes:
                fixed = step.state_of(nid)
                for later in any_trace[i + 1:]:
                    assert (later.state_of(nid).distance, later.state_of(nid).parent) == (fixed.distance, fixed.parent)

    def test_finalised_distances_non_decreasing(self, any_trace: List[Step]):
        dists = [s.state_of(s.active_node).distance for s in any_trace if s.kind is StepKind.FINALIZE]
        assert dists == sorted(dists)

    def test_permanent_list_only_grows(self, any_trace: List[Step]):
        for prev, cur in zip(any_trace, any_trace[1:]):
            assert cur.permanent_nodes[: len(prev.permanent_nodes)] == prev.permanent_nodes


class TestValidationFirst:
    """Bad input raises before any Step exists."""

    def test_dangling_edge(self):
        g = make_graph(["a", "b"], [("e", "a", "ghost", 1)])
        with pytest.raises(GraphInvalid) as info:
            run_double_labeling(g, "a", "b")
        assert info.value.check is GraphCheck.DANGLING_EDGE

    def test_negative_weight(self):
        g = make_graph(["a", "b"], [("e", "a", "b", -2)])
        with pytest.raises(GraphInvalid) as info:
            run_double_labeling(g, "a", "b")
        assert info.value.check is GraphCheck.NEGATIVE_WEIGHT

    def test_unknown_end(self, example_graph: Graph):
        with pytest.raises(GraphInvalid) as info:
            run_double_labeling(example_graph, "v1", "v9")
        assert info.value.check is GraphCheck.UNKNOWN_END
