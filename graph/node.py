import math
import numbers
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


INF = float("inf")


# ---------------------------------------------------------------------------
# Node Status: the three label kinds of the double-labeling method
# ---------------------------------------------------------------------------
class NodeStatus(Enum):
    UNVISITED  = "unvisited"   # no label yet, d = ∞
    TEMPORARY  = "temporary"   # T-label: best known, may still improve
    PERMANENT  = "permanent"   # P-label: final, never changes again


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Node:
    """
    Attributes:
        id    : Unique identifier within a graph.
        label : Human-readable name shown on the canvas (defaults to id).
        x, y  : Canvas coordinates.  Display only; the engine never reads them.
    """

    id:    str
    label: Optional[str] = None
    x:     float         = 0.0
    y:     float         = 0.0

    @property
    def name(self) -> str:
        return self.label or self.id

    def to_dict(self) -> dict:
        return {
            "id":    self.id,
            "label": self.name,
            "x":     self.x,
            "y":     self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        label = data.get("label")
        return cls(
            id=str(data["id"]),
            label=None if label is None else str(label),
            x=_coordinate(data, "x"),
            y=_coordinate(data, "y"),
        )


def _coordinate(data: dict, key: str) -> float:
    value = data.get(key, 0.0)
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise TypeError(f"node '{data.get('id')}' coordinate {key!r} must be a finite number, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# NodeLabelState: one per node, the [d, p] label plus its status
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NodeLabelState:
    """
    Frozen so a snapshot can never be edited after the fact.  The engine
    "mutates" its working map by swapping in new values.

    Attributes:
        distance : Best known path length from start (INF until reached).
        parent   : Predecessor id; the node's own id for the start node;
                   None while unreached.
        status   : NodeStatus.
    """

    distance: float                = INF
    parent:   Optional[str]        = None
    status:   NodeStatus           = NodeStatus.UNVISITED

    @classmethod
    def unvisited(cls) -> "NodeLabelState":
        return cls()

    @classmethod
    def root(cls, node_id: str) -> "NodeLabelState":
        """The start node: d = 0, parent = itself."""
        return cls(distance=0, parent=node_id, status=NodeStatus.TEMPORARY)

    def improved(self, distance: float, parent: str) -> "NodeLabelState":
        return replace(self, distance=distance, parent=parent, status=NodeStatus.TEMPORARY)

    def made_permanent(self) -> "NodeLabelState":
        return replace(self, status=NodeStatus.PERMANENT)

    @property
    def is_permanent(self) -> bool:
        return self.status is NodeStatus.PERMANENT

    @property
    def reached(self) -> bool:
        return self.distance != INF

    # JSON has no ∞: write it as null
    def to_dict(self) -> dict:
        return {
            "distance": self.distance if self.reached else None,
            "parent":   self.parent,
            "status":   self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NodeLabelState":
        dist = data.get("distance")
        return cls(
            distance=INF if dist is None else dist,
            parent=data.get("parent"),
            status=NodeStatus(data.get("status", "unvisited")),
        )
