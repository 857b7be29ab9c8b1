"""
double_labeling.py — Double-Labeling (P / T) Shortest Path
============================================================
Dijkstra in its textbook "double-labeling" form: every node carries a
[d, p] label that is either Temporary (T) or Permanent (P).  Each round
the smallest T-label becomes a P-label, then every edge from that node
is examined against its neighbours' T-labels.

Produces a Step at:
  1. Initialise labels  (start = [0, start], others = [∞, -])
  2. Smallest T-label promoted to P
  3. Each edge examined from the new P-node  →  RELAX or NO_IMPROVEMENT
  4. End node promoted  →  ARRIVE, stop at once
  5. Only ∞ labels left  →  EXHAUSTED

Selection is a plain linear scan over the node list (O(V²) overall).
Ties go to the node that comes first in the caller's node order, and
edges are examined in the caller's edge order, so the same input always
yields the same trace.

Edges are undirected here.  Weights must be >= 0 (Graph.validate).
"""

import logging
from typing import Dict, List, Optional, Sequence

from graph import Graph, Node, Edge, NodeLabelState, INF
from algorithms.step import Step, StepBuilder, StepKind


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def DoubleLabel(graph, start, end):",                      # 0
    "    label[v] ← [∞, -] (T) for v in V",                     # 1
    "    label[start] ← [0, start] (T)",                         # 2
    "    while some node is not P:",                             # 3
    "        u ← T-node with smallest d (first in list on tie)", # 4
    "        if d[u] = ∞:",                                      # 5
    "            return  # nothing else reachable",              # 6
    "        mark u as P",                                       # 7
    "        if u = end: return path",                           # 8
    "        for edge (u, v, w) touching u:",                    # 9
    "            if v is P or v = u: continue",                  # 10
    "            if d[u] + w < d[v]:",                           # 11
    "                label[v] ← [d[u] + w, u] (T)",              # 12
]


def fmt(value: float) -> str:
    """Distances / weights for display: ∞, 3, 2.5 (never 3.0)."""
    if value == INF:
        return "∞"
    return f"{value:g}"


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
def run_double_labeling(graph: Graph, start_id: str, end_id: str) -> List[Step]:
    """
    Validate, then compute the full trace in one pass.

    Raises GraphInvalid (before any Step exists) on bad input.  Never
    fails afterwards; an unreachable end node ends in an EXHAUSTED step.
    """
    graph.validate(start_id, end_id)

    name = graph.label_of

    # per-call working state: never shared with a previous call
    labels: Dict[str, NodeLabelState] = {
        n.id: NodeLabelState.unvisited() for n in graph.nodes
    }
    labels[start_id] = NodeLabelState.root(start_id)
    permanent: List[str] = []

    sb = StepBuilder(labels, permanent)
    sb.emit(
        StepKind.INIT,
        f"Initialise: start '{name(start_id)}' gets label [0, {name(start_id)}] (T); "
        f"every other node gets [∞, -].",
        line=2,
    )

    while len(permanent) < len(labels):
        u = _select_min(graph.nodes, labels)

        if u is None:
            sb.emit(
                StepKind.EXHAUSTED,
                "No further reachable temporary nodes: every remaining label is ∞. "
                "The algorithm stops.",
                line=6,
            )
            break

        labels[u] = labels[u].made_permanent()
        permanent.append(u)
        d_u = labels[u].distance
        sb.emit(
            StepKind.FINALIZE,
            f"'{name(u)}' has the smallest temporary label (d={fmt(d_u)}); mark it P (permanent).",
            active=u,
            line=7,
        )

        if u == end_id:
            path = shortest_path(sb.steps[-1], end_id)
            sb.emit(
                StepKind.ARRIVE,
                f"Reached end node '{name(u)}'. Shortest distance = {fmt(d_u)}, "
                f"path: {' → '.join(name(p) for p in path)}.",
                active=u,
                line=8,
            )
            break

        for edge in graph.incident_edges(u):
            _examine(edge, u, labels, sb, name)

    logger.debug(
        "double labeling %s → %s: %d nodes, %d steps, outcome=%s",
        start_id, end_id, len(labels), len(sb.steps), sb.steps[-1].kind.value,
    )
    return sb.steps


def trace(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    start_id: str,
    end_id: str,
) -> List[Step]:
    """Convenience for callers holding plain node / edge lists."""
    return run_double_labeling(Graph(nodes, edges), start_id, end_id)


# ---------------------------------------------------------------------------
# Internal
# ---------------------------------------------------------------------------
def _select_min(nodes: Sequence[Node], labels: Dict[str, NodeLabelState]) -> Optional[str]:
    """First non-permanent node with the strictly smallest finite distance."""
    best: Optional[str] = None
    best_d = INF
    for node in nodes:
        state = labels[node.id]
        if state.is_permanent:
            continue
        if state.distance < best_d:
            best, best_d = node.id, state.distance
    return best


def _examine(edge: Edge, u: str, labels: Dict[str, NodeLabelState], sb: StepBuilder, name) -> None:
    v = edge.other_end(u)
    if edge.is_self_loop or labels[v].is_permanent:
        return

    d_u = labels[u].distance
    before = labels[v].distance
    candidate = d_u + edge.weight

    if candidate < before:
        labels[v] = labels[v].improved(candidate, u)
        sb.emit(
            StepKind.RELAX,
            f"Update '{name(v)}' via '{name(u)}': {fmt(d_u)} + {fmt(edge.weight)} = {fmt(candidate)} "
            f"< {fmt(before)}, label {fmt(before)} → {fmt(candidate)}, parent '{name(u)}'.",
            active=u,
            edge=edge.id,
            line=12,
        )
    else:
        sb.emit(
            StepKind.NO_IMPROVEMENT,
            f"Check '{name(v)}' via '{name(u)}': {fmt(d_u)} + {fmt(edge.weight)} = {fmt(candidate)} "
            f"≥ current {fmt(before)}, no update.",
            active=u,
            edge=edge.id,
            line=11,
        )


# ---------------------------------------------------------------------------
def shortest_path(step: Step, end_id: str) -> List[str]:
    """
    Walk parent links back from end_id in a Step's snapshot.  Returns
    start … end, or [] when end_id has no label yet.  The start node is
    recognised by being its own parent.
    """
    states = step.node_states
    if end_id not in states or states[end_id].parent is None:
        return []
    path, cur = [end_id], end_id
    while states[cur].parent != cur:
        cur = states[cur].parent
        path.append(cur)
    path.reverse()
    return path
