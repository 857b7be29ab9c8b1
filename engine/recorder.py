"""
recorder.py — Run Recorder & Analytics
========================================
Runs the trace engine once for a (graph, start, end) triple, keeps the
resulting Steps, and computes the numbers the Analytics panel shows.

Usage:
    rec = Recorder()
    rec.start(graph=g, source="v1", target="v6")   # validates
    rec.run_to_completion()                         # one engine call
    metrics = rec.get_metrics()
    rec.export()                                    # JSON-safe snapshot

A new graph / start / end means a new Recorder: traces are never
patched incrementally.
"""

import logging
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from graph import Graph
from algorithms import ALGORITHM, Step, StepKind, run_double_labeling, shortest_path


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass: what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:          str       = ""
    algo_label:        str       = ""
    source:            str       = ""
    target:            str       = ""
    nodes_finalized:   int       = 0          # P-labels handed out
    edges_examined:    int       = 0          # RELAX + NO_IMPROVEMENT steps
    relaxations:       int       = 0          # labels actually improved
    no_improvement:    int       = 0
    path:              List[str] = field(default_factory=list)
    path_length:       int       = 0          # number of edges on the final path
    path_cost:         Optional[float] = None # None when the end is unreachable
    reached:           bool      = False
    total_steps:       int       = 0
    wall_time_ms:      float     = 0.0


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps   : Full list of Steps from the run.
        metrics : Computed RunMetrics (available after run_to_completion).
    """

    def __init__(self):
        self.steps:   List[Step]           = []
        self.metrics: Optional[RunMetrics] = None

        self._source: str             = ""
        self._target: str             = ""
        self._graph:  Optional[Graph] = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, graph: Graph, source: str, target: str) -> None:
        """Remember the inputs.  Raises GraphInvalid straight away on bad input."""
        graph.validate(source, target)
        self._graph   = graph
        self._source  = source
        self._target  = target
        self.steps    = []
        self.metrics  = None

    def run_to_completion(self) -> RunMetrics:
        """Compute the whole trace and the metrics."""
        if self._graph is None:
            raise RuntimeError("Call start() first.")

        t0 = time.monotonic()
        self.steps = run_double_labeling(self._graph, self._source, self._target)
        wall_ms = (time.monotonic() - t0) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        logger.info(
            "trace %s → %s: %d steps, reached=%s, cost=%s (%.2f ms)",
            self._source, self._target, self.metrics.total_steps,
            self.metrics.reached, self.metrics.path_cost, self.metrics.wall_time_ms,
        )
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": ALGORITHM.key,
            "source":   self._source,
            "target":   self._target,
            "graph":    self._graph.to_dict() if self._graph else {},
            "metrics":  asdict(self.metrics) if self.metrics else {},
            "steps":    [s.to_dict() for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        last = self.steps[-1]
        kinds = [s.kind for s in self.steps]

        reached = last.kind is StepKind.ARRIVE
        path = shortest_path(last, self._target) if reached else []

        return RunMetrics(
            algo_key=ALGORITHM.key,
            algo_label=ALGORITHM.label,
            source=self._source,
            target=self._target,
            nodes_finalized=len(last.permanent_nodes),
            edges_examined=kinds.count(StepKind.RELAX) + kinds.count(StepKind.NO_IMPROVEMENT),
            relaxations=kinds.count(StepKind.RELAX),
            no_improvement=kinds.count(StepKind.NO_IMPROVEMENT),
            path=path,
            path_length=len(path) - 1 if len(path) > 1 else 0,
            path_cost=last.state_of(self._target).distance if reached else None,
            reached=reached,
            total_steps=len(self.steps),
            wall_time_ms=round(wall_ms, 2),
        )
