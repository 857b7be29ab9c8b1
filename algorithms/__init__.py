"""
algorithms/__init__.py — Trace Engine
=======================================
    from algorithms import run_double_labeling, Step, StepKind, ALGORITHM

ALGORITHM is the metadata card the UI shows next to the pseudocode
(label, complexity, one-line description).
"""

from dataclasses import dataclass, field
from typing import Callable, List

from algorithms.step import Step, StepKind, StepBuilder
from algorithms.double_labeling import (
    run_double_labeling,
    trace,
    shortest_path,
    fmt,
    PSEUDOCODE,
)


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:               str                    # e.g. "double_labeling"
    label:             str                    # human label
    fn:                Callable               # the trace function
    pseudocode:        List[str]              # lines for the side-panel
    tags:              List[str] = field(default_factory=list)
    complexity_time:   str      = ""
    complexity_space:  str      = ""
    description:       str      = ""


ALGORITHM = AlgoInfo(
    key="double_labeling", label="Double-Labeling (P/T) Method",
    fn=run_double_labeling, pseudocode=PSEUDOCODE,
    tags=["weighted", "shortest-path", "undirected"],
    complexity_time="O(V² + E·V)", complexity_space="O(V) per step",
    description="Promote the smallest T-label to P, then try every edge from it. Weights must be ≥ 0.",
)


__all__ = [
    "AlgoInfo",
    "ALGORITHM",
    "Step",
    "StepKind",
    "StepBuilder",
    "run_double_labeling",
    "trace",
    "shortest_path",
    "fmt",
    "PSEUDOCODE",
]
