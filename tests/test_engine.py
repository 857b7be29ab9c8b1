"""Tests for playback (Stepper) and recording (Recorder)."""

from typing import List

import pytest

from graph import Graph, GraphInvalid, GraphCheck
from algorithms import Step, StepKind
from engine import Stepper, StepperState, Recorder, TraceStore, SPEED_PRESETS
from tests.conftest import make_graph


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stepper(example_trace: List[Step], clock: FakeClock) -> Stepper:
    s = Stepper(clock=clock)
    s.load(example_trace)
    return s


class TestStepperNavigation:
    """Random access over a materialised trace."""

    def test_load_shows_step_zero(self, stepper: Stepper):
        assert stepper.state is StepperState.PAUSED
        assert stepper.current_step.kind is StepKind.INIT
        assert stepper.total_steps == 17

    def test_next_and_prev(self, stepper: Stepper):
        assert stepper.next_step()
        assert stepper.current_idx == 1
        assert stepper.prev_step()
        assert stepper.current_idx == 0
        assert not stepper.prev_step()

    def test_goto_any_index(self, stepper: Stepper, example_trace: List[Step]):
        assert stepper.goto_step(12)
        assert stepper.current_step is example_trace[12]
        assert stepper.goto_step(3)
        assert stepper.current_step is example_trace[3]

    def test_goto_out_of_range(self, stepper: Stepper):
        assert not stepper.goto_step(17)
        assert not stepper.goto_step(-1)
        assert stepper.current_idx == 0

    def test_end_marks_finished_and_rewind_clears_it(self, stepper: Stepper):
        stepper.jump_to_end()
        assert stepper.is_finished
        assert stepper.current_step.kind is StepKind.ARRIVE
        assert not stepper.next_step()
        stepper.rewind()
        assert stepper.state is StepperState.PAUSED
        assert stepper.current_idx == 0

    def test_on_step_callback(self, example_trace: List[Step]):
        seen = []
        s = Stepper(on_step=seen.append)
        s.load(example_trace)
        s.next_step()
        s.goto_step(5)
        assert [st.index for st in seen] == [0, 1, 5]

    def test_reset(self, stepper: Stepper):
        stepper.reset()
        assert stepper.state is StepperState.IDLE
        assert stepper.current_step is None

    def test_load_empty_stays_idle(self):
        s = Stepper()
        s.load([])
        assert s.state is StepperState.IDLE
        assert not s.next_step()


class TestStepperPlayback:
    """Timer-driven auto-advance."""

    def test_tick_waits_for_speed(self, stepper: Stepper, clock: FakeClock):
        stepper.set_speed("slow")
        stepper.play()
        clock.now = 0.5
        assert not stepper.tick()
        clock.now = 1.0
        assert stepper.tick()
        assert stepper.current_idx == 1

    def test_tick_ignored_when_paused(self, stepper: Stepper, clock: FakeClock):
        clock.now = 10.0
        assert not stepper.tick()

    def test_plays_to_finish(self, stepper: Stepper, clock: FakeClock):
        stepper.set_speed("turbo")
        stepper.play()
        for _ in range(40):
            clock.now += 1.0
            stepper.tick()
        assert stepper.is_finished
        assert stepper.current_idx == 16
        stepper.play()
        assert not stepper.is_playing

    def test_toggle_play(self, stepper: Stepper):
        stepper.toggle_play()
        assert stepper.is_playing
        stepper.toggle_play()
        assert stepper.state is StepperState.PAUSED

    def test_speed_presets_and_floor(self, stepper: Stepper):
        stepper.set_speed("fast")
        assert stepper.speed == SPEED_PRESETS["fast"]
        stepper.set_speed("warp")
        assert stepper.speed == SPEED_PRESETS["medium"]
        stepper.set_speed_value(0.0)
        assert stepper.speed == 0.02


class TestRecorder:
    """One engine run plus derived metrics."""

    def test_metrics_for_example(self, example_graph: Graph):
        rec = Recorder()
        rec.start(example_graph, "v1", "v6")
        m = rec.run_to_completion()
        assert m.reached
        assert m.path == ["v1", "v3", "v2", "v4", "v5", "v6"]
        assert m.path_length == 5
        assert m.path_cost == 13
        assert m.nodes_finalized == 6
        assert m.edges_examined == 9
        assert m.relaxations == 9
        assert m.no_improvement == 0
        assert m.total_steps == 17
        assert rec.get_metrics() is m

    def test_metrics_for_unreachable_end(self):
        rec = Recorder()
        rec.start(make_graph(["a", "b", "c"], [("ab", "a", "b", 1)]), "a", "c")
        m = rec.run_to_completion()
        assert not m.reached
        assert m.path == []
        assert m.path_cost is None

    def test_start_validates(self, example_graph: Graph):
        with pytest.raises(GraphInvalid) as info:
            Recorder().start(example_graph, "nope", "v6")
        assert info.value.check is GraphCheck.UNKNOWN_START

    def test_run_before_start(self):
        with pytest.raises(RuntimeError):
            Recorder().run_to_completion()

    def test_export_is_json_safe(self, example_graph: Graph):
        rec = Recorder()
        rec.start(example_graph, "v1", "v6")
        rec.run_to_completion()
        data = rec.export()
        assert data["algo_key"] == "double_labeling"
        assert data["metrics"]["path_cost"] == 13
        assert len(data["steps"]) == 17
        assert data["steps"][0]["node_states"]["v6"]["distance"] is None
        assert data["steps"][-1]["kind"] == "arrive"


class TestTraceStore:
    """Bounded, least-recently-used storage of finished runs."""

    def test_evicts_oldest_past_capacity(self):
        store = TraceStore(capacity=2)
        recs = [Recorder() for _ in range(3)]
        for i, rec in enumerate(recs):
            store.put(f"run{i}", rec)
        assert len(store) == 2
        assert "run0" not in store
        assert store.get("run2") is recs[2]

    def test_get_refreshes_recency(self):
        store = TraceStore(capacity=2)
        first, second = Recorder(), Recorder()
        store.put("first", first)
        store.put("second", second)
        assert store.get("first") is first
        store.put("third", Recorder())
        assert "first" in store
        assert "second" not in store

    def test_missing_and_pop(self):
        store = TraceStore()
        rec = Recorder()
        store.put("r", rec)
        assert store.get("nope") is None
        assert store.pop("r") is rec
        assert store.pop("r") is None
        assert len(store) == 0

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            TraceStore(capacity=0)
