"""
graph.py — Graph Container & Validation
========================================
Single source of truth for the graph.  The trace engine and the renderer
both read this object; nothing writes to it after construction.

Responsibilities:
  1. Ordered storage of nodes & edges       (caller order is meaningful)
  2. Lookup & incidence queries             (get_node, incident_edges, …)
  3. Structural validation                  (validate → GraphInvalid)
  4. Serialisation round-trip               (to_dict / from_dict)
  5. The stock example graph                (default)

Design decisions:
  - Nodes & edges are kept as tuples in the order the editor supplied.
    The engine's tie-break and relaxation order both depend on it, so
    this is NOT a dict keyed by id.
  - Duplicate ids are tolerated at construction time and reported by
    validate(), so the caller sees one error path for every problem.
"""

import math
import numbers
from typing import Dict, Iterable, List, Optional, Tuple

from graph.node import Node
from graph.edge import Edge
from graph.errors import GraphInvalid, GraphCheck


class Graph:
    """
    Attributes:
        nodes : Tuple[Node, ...] in caller order.
        edges : Tuple[Edge, ...] in caller order.
    """

    def __init__(self, nodes: Iterable[Node] = (), edges: Iterable[Edge] = ()):
        self.nodes: Tuple[Node, ...] = tuple(nodes)
        self.edges: Tuple[Edge, ...] = tuple(edges)
        # first occurrence wins; duplicates are a validate() concern
        self._by_id: Dict[str, Node] = {}
        for node in self.nodes:
            self._by_id.setdefault(node.id, node)

    # ==================================================================
    # LOOKUP
    # ==================================================================
    def get_node(self, node_id: str) -> Optional[Node]:
        return self._by_id.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._by_id

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def label_of(self, node_id: Optional[str]) -> str:
        """Display name for a node id (falls back to the id itself)."""
        if node_id is None:
            return "-"
        node = self.get_node(node_id)
        return node.name if node else node_id

    def incident_edges(self, node_id: str) -> List[Edge]:
        """Every edge touching node_id, in edge-list order (undirected)."""
        return [e for e in self.edges if e.touches(node_id)]

    # ==================================================================
    # VALIDATION
    # ==================================================================
    def validate(self, start_id: str, end_id: str) -> None:
        """
        Raise GraphInvalid on the first broken rule; return None otherwise.
        Checks run in a fixed order so the same bad input always reports
        the same check.
        """
        if not self.nodes:
            raise GraphInvalid(GraphCheck.EMPTY_GRAPH, "Graph has no nodes.")

        seen = set()
        for node in self.nodes:
            if node.id in seen:
                raise GraphInvalid(
                    GraphCheck.DUPLICATE_NODE_ID,
                    f"Node id '{node.id}' is used more than once.",
                    subject=node.id,
                )
            seen.add(node.id)

        seen_edges = set()
        for edge in self.edges:
            if edge.id in seen_edges:
                raise GraphInvalid(
                    GraphCheck.DUPLICATE_EDGE_ID,
                    f"Edge id '{edge.id}' is used more than once.",
                    subject=edge.id,
                )
            seen_edges.add(edge.id)

        for edge in self.edges:
            for end in (edge.a, edge.b):
                if end not in self._by_id:
                    raise GraphInvalid(
                        GraphCheck.DANGLING_EDGE,
                        f"Edge '{edge.id}' references unknown node '{end}'.",
                        subject=edge.id,
                    )

        self.check_numeric_weights()

        for edge in self.edges:
            if edge.weight < 0:
                raise GraphInvalid(
                    GraphCheck.NEGATIVE_WEIGHT,
                    f"Edge '{edge.id}' has negative weight {edge.weight}; the method needs weights >= 0.",
                    subject=edge.id,
                )

        if start_id not in self._by_id:
            raise GraphInvalid(
                GraphCheck.UNKNOWN_START, f"Start node '{start_id}' is not in the graph.", subject=start_id
            )
        if end_id not in self._by_id:
            raise GraphInvalid(
                GraphCheck.UNKNOWN_END, f"End node '{end_id}' is not in the graph.", subject=end_id
            )

    def check_numeric_weights(self) -> None:
        """Raise GraphInvalid(NON_NUMERIC_WEIGHT) for the first edge whose weight is not a real number."""
        for edge in self.edges:
            w = edge.weight
            if isinstance(w, bool) or not isinstance(w, numbers.Real) or math.isnan(w):
                raise GraphInvalid(
                    GraphCheck.NON_NUMERIC_WEIGHT,
                    f"Edge '{edge.id}' has a non-numeric weight {w!r}.",
                    subject=edge.id,
                )

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        """
        Build from the editor's JSON document.  Structural problems that
        make the document unreadable (missing ids / endpoints, wrong
        shapes) are raised as GraphInvalid(MALFORMED_DOCUMENT); everything
        else is left for validate().
        """
        if not isinstance(data, dict):
            raise GraphInvalid(GraphCheck.MALFORMED_DOCUMENT, "Graph document must be an object.")
        try:
            nodes = [Node.from_dict(nd) for nd in data.get("nodes", [])]
            edges = [Edge.from_dict(ed) for ed in data.get("edges", [])]
        except (KeyError, TypeError, AttributeError) as exc:
            raise GraphInvalid(
                GraphCheck.MALFORMED_DOCUMENT, f"Malformed graph document: missing or bad field {exc}."
            ) from exc
        return cls(nodes, edges)

    # ==================================================================
    # STOCK EXAMPLE
    # ==================================================================
    @classmethod
    def default(cls) -> "Graph":
        """
        The classroom example: six nodes v1…v6, nine weighted edges.
        Shortest v1 → v6 distance is 13 along v1 v3 v2 v4 v5 v6.
        """
        positions = [(145, 225), (345, 125), (345, 325), (545, 125), (545, 325), (745, 225)]
        nodes = [
            Node(id=f"v{i}", label=f"v{i}", x=x, y=y)
            for i, (x, y) in enumerate(positions, start=1)
        ]
        weighted = [
            ("v1", "v2", 4), ("v1", "v3", 2), ("v2", "v3", 1),
            ("v2", "v4", 5), ("v3", "v4", 8), ("v3", "v5", 10),
            ("v4", "v5", 2), ("v4", "v6", 6), ("v5", "v6", 3),
        ]
        edges = [
            Edge(id=f"e{i}", a=a, b=b, weight=w)
            for i, (a, b, w) in enumerate(weighted, start=1)
        ]
        return cls(nodes, edges)

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()})"
