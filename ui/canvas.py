"""
canvas.py — SVG Graph Renderer
================================
Pure rendering function: Graph + Step → SVG string.

The renderer consumes:
  • graph       – the Graph object (node positions, edges)
  • step        – the current Step snapshot (labels, active node / edge)
  • start / end – highlighted with coloured rings
  • config      – visual config (canvas size, colors, fonts, …)

Design decisions:
  - NO mutation.  Stateless: everything comes in as arguments.
  - Node fill is a dict lookup on the P / T status.
  - Edges are plain lines.  The algorithm treats them as undirected, so
    drawing arrowheads would suggest a direction it never uses.
  - Edges on the current parent tree (p-labels) are drawn thicker so
    the shortest-path tree grows visibly as the trace advances.
  - Each node carries its [d, p] label underneath, exactly as written
    on the blackboard version of the method.
"""

import math
from html import escape
from typing import Dict, Optional, Set

from graph import Graph, Node, Edge, NodeLabelState, NodeStatus
from algorithms import Step, fmt


# ---------------------------------------------------------------------------
# Visual Config: color palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:  int = 900
    height: int = 460
    bg:     str = "#f8fafc"

    # node status → fill
    node_colors: Dict[str, str] = {
        "unvisited":  "#cbd5e1",
        "temporary":  "#f59e0b",
        "permanent":  "#3b82f6",
    }
    start_ring:  str = "#22c55e"
    end_ring:    str = "#ef4444"
    active_glow: str = "#f59e0b"

    # edge colors
    edge_colors: Dict[str, str] = {
        "default":   "#94a3b8",
        "tree":      "#3b82f6",   # parent link of some node
        "checking":  "#f59e0b",   # the edge examined in this step
    }

    # node
    node_radius:        int = 22
    node_stroke:        str = "#64748b"
    node_stroke_width:  int = 2
    node_label_color:   str = "#0f172a"
    node_label_size:    int = 13
    label_tag_color:    str = "#334155"
    label_tag_size:     int = 12

    # edge
    edge_width:         int = 2
    edge_width_tree:    int = 4
    edge_weight_color:  str = "#475569"
    edge_weight_size:   int = 12
    edge_weight_bg:     str = "#ffffff"


CONFIG = CanvasConfig()


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_canvas(
    graph: Graph,
    step: Optional[Step] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    config: CanvasConfig = CONFIG,
) -> str:
    """
    Returns an SVG string.

    Args:
        graph  : The graph to render.
        step   : Current trace step (or None for the bare graph).
        start  : Start node id (green ring).
        end    : End node id (red ring).
        config : Visual config.
    """
    svg_parts = [
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">'
    ]

    tree = _tree_edges(graph, step) if step else set()

    # -- edges (draw first so nodes sit on top) --
    for edge in graph.edges:
        svg_parts.append(_render_edge(graph, edge, step, tree, config))

    # -- nodes --
    for node in graph.nodes:
        state = step.node_states.get(node.id) if step else None
        svg_parts.append(_render_node(graph, node, state, step, start, end, config))

    svg_parts.append("</svg>")
    return "\n".join(p for p in svg_parts if p)


# ---------------------------------------------------------------------------
# Node Rendering
# ---------------------------------------------------------------------------
def _render_node(
    graph: Graph,
    node: Node,
    state: Optional[NodeLabelState],
    step: Optional[Step],
    start: Optional[str],
    end: Optional[str],
    config: CanvasConfig,
) -> str:
    status = state.status.value if state else NodeStatus.UNVISITED.value
    fill = config.node_colors.get(status, config.node_colors["unvisited"])

    stroke, stroke_width = config.node_stroke, config.node_stroke_width
    if node.id == start:
        stroke, stroke_width = config.start_ring, 4
    elif node.id == end:
        stroke, stroke_width = config.end_ring, 4

    cx, cy, r = node.x, node.y, config.node_radius
    parts = [f'<g class="node node-{status}" data-id="{escape(node.id)}">']

    if step and step.active_node == node.id:
        parts.append(
            f'  <circle cx="{cx}" cy="{cy}" r="{r + 8}" fill="none" '
            f'stroke="{config.active_glow}" stroke-width="3" opacity="0.5"/>'
        )

    parts.append(
        f'  <circle cx="{cx}" cy="{cy}" r="{r}" '
        f'fill="{fill}" stroke="{stroke}" stroke-width="{stroke_width}"/>'
    )
    parts.append(
        f'  <text x="{cx}" y="{cy + 5}" text-anchor="middle" '
        f'font-size="{config.node_label_size}" font-family="sans-serif" '
        f'fill="{config.node_label_color}" font-weight="600">{escape(node.name)}</text>'
    )
    if state is not None:
        parts.append(
            f'  <text x="{cx}" y="{cy + r + 18}" text-anchor="middle" '
            f'font-size="{config.label_tag_size}" font-family="monospace" '
            f'fill="{config.label_tag_color}">{escape(label_tag(graph, node.id, state))}</text>'
        )
    parts.append("</g>")
    return "\n".join(parts)


def label_tag(graph: Graph, node_id: str, state: NodeLabelState) -> str:
    """Blackboard notation: [d, p].  The start node's self-parent shows as '-'."""
    parent = "-" if state.parent in (None, node_id) else graph.label_of(state.parent)
    return f"[{fmt(state.distance)}, {parent}]"


# ---------------------------------------------------------------------------
# Edge Rendering
# ---------------------------------------------------------------------------
def _render_edge(
    graph: Graph,
    edge: Edge,
    step: Optional[Step],
    tree: Set[str],
    config: CanvasConfig,
) -> str:
    a, b = graph.get_node(edge.a), graph.get_node(edge.b)
    if not a or not b:
        return ""

    stroke, stroke_width = config.edge_colors["default"], config.edge_width
    if edge.id in tree:
        stroke, stroke_width = config.edge_colors["tree"], config.edge_width_tree
    if step and step.checking_edge == edge.id:
        stroke, stroke_width = config.edge_colors["checking"], config.edge_width_tree

    parts = [f'<g class="edge" data-id="{escape(edge.id)}">']

    if edge.is_self_loop:
        r = config.node_radius
        parts.append(
            f'  <circle cx="{a.x}" cy="{a.y - r - 12}" r="14" fill="none" '
            f'stroke="{stroke}" stroke-width="{stroke_width}"/>'
        )
        parts.append(_weight_label(a.x, a.y - r - 34, edge.weight, config))
        parts.append("</g>")
        return "\n".join(parts)

    dx, dy = b.x - a.x, b.y - a.y
    dist = math.sqrt(dx * dx + dy * dy)
    if dist < 0.001:
        return ""  # two nodes on the same spot

    # shorten the line by node_radius on both ends
    ux, uy = dx / dist, dy / dist
    r = config.node_radius
    parts.append(
        f'  <line x1="{a.x + ux * r}" y1="{a.y + uy * r}" '
        f'x2="{b.x - ux * r}" y2="{b.y - uy * r}" '
        f'stroke="{stroke}" stroke-width="{stroke_width}"/>'
    )

    # weight label at the midpoint, nudged off the line
    mx, my = (a.x + b.x) / 2 - uy * 12, (a.y + b.y) / 2 + ux * 12
    parts.append(_weight_label(mx, my, edge.weight, config))
    parts.append("</g>")
    return "\n".join(parts)


def _weight_label(x: float, y: float, weight: float, config: CanvasConfig) -> str:
    return (
        f'  <circle cx="{x}" cy="{y}" r="11" fill="{config.edge_weight_bg}" opacity="0.9"/>\n'
        f'  <text x="{x}" y="{y + 4}" text-anchor="middle" '
        f'font-size="{config.edge_weight_size}" font-family="sans-serif" '
        f'fill="{config.edge_weight_color}" font-weight="600">{fmt(weight)}</text>'
    )


def _tree_edges(graph: Graph, step: Step) -> Set[str]:
    """
    Ids of edges that realise some node's parent link.  With parallel
    edges the first one whose weight matches the label wins.
    """
    tree: Set[str] = set()
    for nid, state in step.node_states.items():
        if state.parent in (None, nid):
            continue
        parent_d = step.node_states[state.parent].distance
        for edge in graph.incident_edges(nid):
            if edge.other_end(nid) == state.parent and parent_d + edge.weight == state.distance:
                tree.add(edge.id)
                break
    return tree
