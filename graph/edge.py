"""
edge.py — Graph Edge
====================
Connects two nodes with a nonnegative weight.

Design decisions:
  - `a` and `b` are node-id strings, NOT Node references.
    This keeps edges serialisable and avoids circular references.
  - Every edge is undirected as far as the algorithm is concerned:
    either endpoint can relax the other.  The editor may still call them
    source / target, so from_dict accepts both spellings.
  - Frozen; the engine only ever reads edges.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Edge:
    """
    Attributes:
        id     : Unique identifier.
        a, b   : Endpoint node ids (order carries no meaning).
        weight : Numeric cost, must be >= 0 (checked by Graph.validate).
    """

    id:     str
    a:      str
    b:      str
    weight: float = 1.0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def touches(self, node_id: str) -> bool:
        return node_id == self.a or node_id == self.b

    def other_end(self, node_id: str) -> Optional[str]:
        """Given one endpoint, return the other.  None if node_id isn't an endpoint."""
        if node_id == self.a:
            return self.b
        if node_id == self.b:
            return self.a
        return None

    @property
    def is_self_loop(self) -> bool:
        return self.a == self.b

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":     self.id,
            "a":      self.a,
            "b":      self.b,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        a = data["a"] if "a" in data else data["source"]
        b = data["b"] if "b" in data else data["target"]
        return cls(
            id=str(data["id"]),
            a=str(a),
            b=str(b),
            weight=data["weight"],
        )

    def __repr__(self) -> str:
        return f"Edge({self.id}: {self.a} ↔ {self.b}, w={self.weight})"
