"""
step.py — Algorithm Step Snapshot
==================================
The trace engine returns a list of Step objects.
A Step is a frozen-in-time picture of everything the visualizer
needs to render one frame:

    • The [d, p] label and P / T status of EVERY node
    • Which node is being finalised, which edge is being examined
    • The P-nodes in the order they were finalised
    • Which line of pseudocode is executing right now
    • A plain-English description of the action

Design decisions:
  - Step is a frozen dataclass.  node_states is a read-only mapping
    over a dict built fresh for this Step, and its values are frozen
    NodeLabelStates, so nothing a consumer does can leak into another
    Step or back into the engine.
  - Each Step is self-contained: the player can jump to any index
    without replaying the ones before it.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from graph import NodeLabelState


class StepKind(Enum):
    INIT           = "init"             # step 0, labels initialised
    FINALIZE       = "finalize"         # smallest T-label promoted to P
    RELAX          = "relax"            # neighbour's label improved
    NO_IMPROVEMENT = "no_improvement"   # edge examined, label kept
    ARRIVE         = "arrive"           # end node became permanent
    EXHAUSTED      = "exhausted"        # only ∞ labels left


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        index           : 0-based position of this step in the trace.
        kind            : StepKind of the action recorded.
        description     : Human-readable account of the action.
        active_node     : Node being finalised / whose edges are examined (or None).
        checking_edge   : Edge being examined right now (or None).
        node_states     : {node_id: NodeLabelState} for every node, read-only.
        permanent_nodes : Node ids with a P-label, in finalisation order.
        pseudocode_line : 0-based index of the pseudocode line executing now.
    """

    index:            int
    kind:             StepKind
    description:      str
    active_node:      Optional[str]                 = None
    checking_edge:    Optional[str]                 = None
    node_states:      Mapping[str, NodeLabelState]  = field(default_factory=lambda: MappingProxyType({}))
    permanent_nodes:  Tuple[str, ...]               = ()
    pseudocode_line:  int                           = 0

    @property
    def is_final(self) -> bool:
        return self.kind in (StepKind.ARRIVE, StepKind.EXHAUSTED)

    def state_of(self, node_id: str) -> NodeLabelState:
        return self.node_states[node_id]

    # ------------------------------------------------------------------
    # Serialisation (session storage / export)
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "index":           self.index,
            "kind":            self.kind.value,
            "description":     self.description,
            "active_node":     self.active_node,
            "checking_edge":   self.checking_edge,
            "node_states":     {nid: s.to_dict() for nid, s in self.node_states.items()},
            "permanent_nodes": list(self.permanent_nodes),
            "pseudocode_line": self.pseudocode_line,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Step":
        states = {nid: NodeLabelState.from_dict(s) for nid, s in data.get("node_states", {}).items()}
        return cls(
            index=data["index"],
            kind=StepKind(data["kind"]),
            description=data.get("description", ""),
            active_node=data.get("active_node"),
            checking_edge=data.get("checking_edge"),
            node_states=MappingProxyType(states),
            permanent_nodes=tuple(data.get("permanent_nodes", [])),
            pseudocode_line=data.get("pseudocode_line", 0),
        )


# ---------------------------------------------------------------------------
# Snapshot writer: the only place Steps are constructed during a run
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Owns the growing trace for one engine run and stamps out Steps from
    the engine's working label map.

    Usage inside the engine:
        sb = StepBuilder(labels, permanent)
        sb.emit(StepKind.FINALIZE, "v3 finalised with d=2", active="v3", line=7)
        return sb.steps
    """

    def __init__(self, labels: Dict[str, NodeLabelState], permanent: List[str]):
        # live references into the engine's working state: read only here
        self._labels    = labels
        self._permanent = permanent
        self.steps: List[Step] = []

    def emit(
        self,
        kind: StepKind,
        description: str,
        active: Optional[str] = None,
        edge: Optional[str] = None,
        line: int = 0,
    ) -> Step:
        step = Step(
            index=len(self.steps),
            kind=kind,
            description=description,
            active_node=active,
            checking_edge=edge,
            node_states=MappingProxyType(dict(self._labels)),
            permanent_nodes=tuple(self._permanent),
            pseudocode_line=line,
        )
        self.steps.append(step)
        return step
