"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls       – rewind/prev/play/next/end + speed
  • source_target_picker    – start / end dropdowns
  • data_table              – the P / T label table for one step
  • step_list               – numbered list of every step description
  • analytics_panel         – finalised nodes, edges examined, path cost, …
  • pseudocode_viewer       – with live line highlighting
  • explanation_panel       – description of the current step

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - Anything that came from the user (ids, labels) goes through escape().
"""

from html import escape
from typing import List, Optional, Sequence

from graph import Graph, NodeStatus
from algorithms import Step, fmt
from engine import RunMetrics, SPEED_PRESETS


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    is_playing: bool = False,
    current_step: int = 0,
    total_steps: int = 0,
    speed: str = "medium",
    is_finished: bool = False,
) -> str:
    play_icon = "⏸" if is_playing else "▶"
    play_label = "Pause" if is_playing else "Play"

    options = "".join(
        f'<option value="{name}" {"selected" if name == speed else ""}>{name.capitalize()} ({secs:g}s)</option>'
        for name, secs in SPEED_PRESETS.items()
    )
    shown = current_step + 1 if total_steps else 0

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-rewind" title="Rewind to start">⏮</button>
        <button id="btn-prev" title="Previous step">◀</button>
        <button id="btn-play" title="{play_label}">{play_icon}</button>
        <button id="btn-next" title="Next step">▶</button>
        <button id="btn-end" title="Jump to end">⏭</button>
      </div>
      <div class="step-info">
        Step <span id="current-step">{shown}</span> / <span id="total-steps">{total_steps}</span>
        {' <span class="finished-badge">FINISHED</span>' if is_finished else ''}
      </div>
      <div class="speed-control">
        <label>Speed:</label>
        <select id="speed-selector">{options}</select>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Start / End Picker
# ---------------------------------------------------------------------------
def source_target_picker(
    graph: Graph,
    source: Optional[str] = None,
    target: Optional[str] = None,
) -> str:
    src_options, tgt_options = [], []
    for node in graph.nodes:
        nid, name = escape(node.id), escape(node.name)
        src_options.append(f'<option value="{nid}" {"selected" if node.id == source else ""}>{name}</option>')
        tgt_options.append(f'<option value="{nid}" {"selected" if node.id == target else ""}>{name}</option>')

    return f"""
    <div class="panel source-target-picker">
      <h3>🎯 Start & End</h3>
      <label>Start:
        <select id="source-selector">
          {''.join(src_options)}
        </select>
      </label>
      <label>End:
        <select id="target-selector">
          {''.join(tgt_options)}
        </select>
      </label>
      <button id="btn-run" class="btn-primary">▶ Compute</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Data Table: one row per node, [d, p] and P / T
# ---------------------------------------------------------------------------
def data_table(step: Optional[Step], graph: Graph) -> str:
    if step is None:
        return '<div class="data-table placeholder">Click <strong>Compute</strong> to fill the label table.</div>'

    rows = []
    for node in graph.nodes:
        state = step.node_states.get(node.id)
        if state is None:
            continue
        parent = "-" if state.parent in (None, node.id) else graph.label_of(state.parent)
        if state.status is NodeStatus.PERMANENT:
            badge = '<span class="badge badge-p">P</span>'
        elif state.status is NodeStatus.TEMPORARY:
            badge = '<span class="badge badge-t">T</span>'
        else:
            badge = '<span class="badge badge-u">–</span>'
        active = ' class="active"' if step.active_node == node.id else ""
        rows.append(
            f'<tr{active} data-id="{escape(node.id)}">'
            f'<td>{escape(node.name)}</td>'
            f'<td class="mono">{fmt(state.distance)}</td>'
            f'<td>{escape(parent)}</td>'
            f'<td>{badge}</td>'
            f'</tr>'
        )

    return f"""
    <table class="data-table">
      <thead><tr><th>Node</th><th>d</th><th>p</th><th>Label</th></tr></thead>
      <tbody>{''.join(rows)}</tbody>
    </table>
    """


# ---------------------------------------------------------------------------
# Step List
# ---------------------------------------------------------------------------
def step_list(steps: Sequence[Step], current: int = -1) -> str:
    if not steps:
        return '<div class="step-list placeholder">Configure the graph, then click <strong>Compute</strong>.</div>'

    items = []
    for step in steps:
        cls = "step-item current" if step.index == current else "step-item"
        items.append(
            f'<li class="{cls}" data-index="{step.index}">'
            f'<span class="step-no">{step.index + 1:02d}</span> {escape(step.description)}</li>'
        )
    return f"""
    <div class="step-list">
      <h4>Trace ({len(steps)} steps)</h4>
      <ol>{''.join(items)}</ol>
    </div>
    """


# ---------------------------------------------------------------------------
# Analytics Panel
# ---------------------------------------------------------------------------
def analytics_panel(metrics: Optional[RunMetrics] = None, graph: Optional[Graph] = None) -> str:
    if not metrics:
        return """
        <div class="panel analytics-panel">
          <h3>📊 Analytics</h3>
          <p class="placeholder">Compute a trace to see metrics.</p>
        </div>
        """

    if metrics.reached:
        names = [graph.label_of(n) for n in metrics.path] if graph else metrics.path
        path_status = "✅ " + escape(" → ".join(names))
        cost = fmt(metrics.path_cost)
    else:
        path_status = "❌ End not reachable"
        cost = "∞"

    return f"""
    <div class="panel analytics-panel">
      <h3>📊 Analytics</h3>
      <table>
        <tr><td>P-labels assigned:</td><td><strong>{metrics.nodes_finalized}</strong></td></tr>
        <tr><td>Edges examined:</td><td><strong>{metrics.edges_examined}</strong></td></tr>
        <tr><td>Labels improved:</td><td><strong>{metrics.relaxations}</strong></td></tr>
        <tr><td>Path length:</td><td><strong>{metrics.path_length} edges</strong></td></tr>
        <tr><td>Path cost:</td><td><strong>{cost}</strong></td></tr>
        <tr><td>Total steps:</td><td><strong>{metrics.total_steps}</strong></td></tr>
        <tr><td>Path:</td><td><strong>{path_status}</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(pseudocode_lines: List[str], current_line: int = -1) -> str:
    lines_html = []
    for i, line in enumerate(pseudocode_lines):
        highlight = "highlight" if i == current_line else ""
        lines_html.append(f'<div class="code-line {highlight}" data-line="{i}">{escape(line)}</div>')

    return f"""
    <div class="code-block">
      {''.join(lines_html)}
    </div>
    """


# ---------------------------------------------------------------------------
# Explanation Panel
# ---------------------------------------------------------------------------
def explanation_panel(step: Optional[Step] = None) -> str:
    if step is None:
        return '<div class="explanation-text">▶ Click <strong>Compute</strong> to walk through the method step by step.</div>'
    return f'<div class="explanation-text kind-{step.kind.value}">{escape(step.description)}</div>'
