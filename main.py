"""
main.py — Double-Labeling Visualizer Flask App
================================================
The web server that powers the visualizer.

Routes:
  GET  /                          – main UI
  GET  /api/graph                 – current graph document + start / end
  POST /api/graph                 – replace the graph (editor boundary)
  POST /api/config/source_target  – change start and/or end
  POST /api/config/speed          – change playback speed preset
  POST /api/run                   – validate + compute the whole trace once
  POST /api/step/next             – advance one step
  POST /api/step/prev             – rewind one step
  POST /api/step/goto             – jump to step N
  POST /api/step/play             – toggle play/pause
  GET  /api/state                 – current app state (for polling)
  GET  /api/trace                 – full exported trace + metrics

State management:
  The Flask session (signed cookie) holds the small things: graph
  document, start / end, current step index, speed, play flag, and the
  id of the current run.  The recorded trace itself lives server-side
  in a bounded TraceStore keyed by that run id; a trace is far too big
  for a cookie.  Old runs are evicted once MAX_TRACES is exceeded, and
  a session whose run was evicted is asked to compute again.

  Each /api/step/* request rebuilds a Stepper from the stored trace and
  the session's position, applies one move, and writes the position
  back.

  Any change to the graph, start or end drops the run: traces are
  recomputed from scratch, never patched.
"""

import logging
import uuid
from typing import Any, Callable, Dict, Mapping, Optional

from flask import Flask, current_app, jsonify, render_template_string, request, session

from config import Config
from graph import Graph, GraphInvalid
from algorithms import ALGORITHM
from engine import Recorder, Stepper, TraceStore, SPEED_PRESETS
from ui import (
    render_canvas,
    playback_controls,
    source_target_picker,
    data_table,
    step_list,
    analytics_panel,
    pseudocode_viewer,
    explanation_panel,
)


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
def get_graph() -> Graph:
    """Deserialise graph from session, or create the stock example."""
    if "graph" not in session:
        g = Graph.default()
        session["graph"] = g.to_dict()
        ids = g.node_ids()
        session["source"], session["target"] = ids[0], ids[-1]
    return Graph.from_dict(session["graph"])


def get_state() -> Dict[str, Any]:
    """Return current app state as a dict."""
    rec = get_recorder()
    return {
        "source":        session.get("source"),
        "target":        session.get("target"),
        "current_step":  session.get("current_step", 0),
        "total_steps":   len(rec.steps) if rec else 0,
        "is_playing":    session.get("is_playing", False),
        "speed":         session.get("speed", current_app.config["DEFAULT_SPEED"]),
        "has_trace":     rec is not None,
    }


def set_state(**kwargs) -> None:
    for k, v in kwargs.items():
        session[k] = v


def _store() -> TraceStore:
    return current_app.extensions["traces"]


def get_recorder() -> Optional[Recorder]:
    run_id = session.get("run_id")
    return _store().get(run_id) if run_id else None


def discard_run() -> None:
    """Graph / start / end changed: forget the old trace entirely."""
    run_id = session.pop("run_id", None)
    if run_id:
        _store().pop(run_id)
    set_state(current_step=0, is_playing=False)


def get_stepper(rec: Recorder) -> Stepper:
    """Stepper over the stored trace, positioned where this session left off."""
    stepper = Stepper()
    stepper.load(rec.steps)
    stepper.goto_step(session.get("current_step", 0))
    stepper.set_speed(get_state()["speed"])
    if session.get("is_playing", False):
        stepper.play()
    return stepper


def save_stepper(stepper: Stepper) -> None:
    set_state(current_step=stepper.current_idx, is_playing=stepper.is_playing)


def _step_payload(graph: Graph, rec: Recorder, idx: int) -> Dict[str, Any]:
    step  = rec.steps[idx]
    state = get_state()
    return {
        "svg":          render_canvas(graph, step, start=state["source"], end=state["target"]),
        "table":        data_table(step, graph),
        "explanation":  explanation_panel(step),
        "pseudocode":   pseudocode_viewer(ALGORITHM.pseudocode, step.pseudocode_line),
        "step":         step.to_dict(),
        "current_step": idx,
        "total_steps":  len(rec.steps),
        "is_final":     step.is_final,
        "is_playing":   state["is_playing"],
    }


def _navigate(move: Callable[[Stepper], bool], error: str):
    rec = get_recorder()
    if rec is None:
        return jsonify({"error": "Compute a trace first"}), 400
    stepper = get_stepper(rec)
    if not move(stepper):
        return jsonify({"error": error}), 400
    save_stepper(stepper)
    return jsonify(_step_payload(get_graph(), rec, stepper.current_idx))


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    app.extensions["traces"] = TraceStore(app.config["MAX_TRACES"])

    @app.errorhandler(GraphInvalid)
    def handle_graph_invalid(exc: GraphInvalid):
        logger.warning("rejected graph: %s (%s)", exc, exc.check.value)
        return jsonify(exc.to_dict()), 400

    # -----------------------------------------------------------------------
    # Main UI Route
    # -----------------------------------------------------------------------
    @app.route("/")
    def index():
        graph = get_graph()
        state = get_state()
        rec   = get_recorder()
        step  = rec.steps[state["current_step"]] if rec else None

        return render_template_string(
            INDEX_TEMPLATE,
            svg=render_canvas(graph, step, start=state["source"], end=state["target"]),
            picker=source_target_picker(graph, state["source"], state["target"]),
            playback=playback_controls(
                is_playing=state["is_playing"],
                current_step=state["current_step"],
                total_steps=state["total_steps"],
                speed=state["speed"],
                is_finished=bool(step and step.is_final),
            ),
            table=data_table(step, graph),
            steps=step_list(rec.steps if rec else [], state["current_step"]),
            explanation=explanation_panel(step),
            pseudocode=pseudocode_viewer(ALGORITHM.pseudocode, step.pseudocode_line if step else -1),
            analytics=analytics_panel(rec.metrics if rec else None, graph),
            algo=ALGORITHM,
        )

    # -----------------------------------------------------------------------
    # API: Graph (editor boundary)
    # -----------------------------------------------------------------------
    @app.route("/api/graph", methods=["GET"])
    def api_graph_get():
        graph = get_graph()
        state = get_state()
        return jsonify({**graph.to_dict(), "start": state["source"], "end": state["target"]})

    @app.route("/api/graph", methods=["POST"])
    def api_graph_set():
        data  = _json_body()
        graph = Graph.from_dict(data)
        graph.check_numeric_weights()   # the canvas prints every weight

        ids = graph.node_ids()
        source = data.get("start", session.get("source"))
        target = data.get("end", session.get("target"))
        if source not in ids:
            source = ids[0] if ids else None
        if target not in ids:
            target = ids[-1] if ids else None

        session["graph"] = graph.to_dict()
        set_state(source=source, target=target)
        discard_run()

        return jsonify({
            "svg":      render_canvas(graph, None, start=source, end=target),
            "node_ids": ids,
            "start":    source,
            "end":      target,
        })

    # -----------------------------------------------------------------------
    # API: Config Changes
    # -----------------------------------------------------------------------
    @app.route("/api/config/source_target", methods=["POST"])
    def api_config_source_target():
        data = _json_body()
        src, tgt = data.get("source"), data.get("target")
        if src:
            set_state(source=src)
        if tgt:
            set_state(target=tgt)
        discard_run()
        state = get_state()
        return jsonify({"source": state["source"], "target": state["target"]})

    @app.route("/api/config/speed", methods=["POST"])
    def api_config_speed():
        speed = _json_body().get("speed", "medium")
        if speed not in SPEED_PRESETS:
            return jsonify({"error": f"Unknown speed preset: {speed}"}), 400
        set_state(speed=speed)
        return jsonify({"speed": speed, "seconds": SPEED_PRESETS[speed]})

    # -----------------------------------------------------------------------
    # API: Run
    # -----------------------------------------------------------------------
    @app.route("/api/run", methods=["POST"])
    def api_run():
        graph = get_graph()
        state = get_state()

        rec = Recorder()
        rec.start(graph, state["source"], state["target"])   # GraphInvalid → 400
        rec.run_to_completion()

        discard_run()
        run_id = uuid.uuid4().hex
        _store().put(run_id, rec)
        set_state(run_id=run_id, current_step=0, is_playing=False)

        payload = _step_payload(graph, rec, 0)
        payload["steps"]     = step_list(rec.steps, 0)
        payload["analytics"] = analytics_panel(rec.metrics, graph)
        return jsonify(payload)

    # -----------------------------------------------------------------------
    # API: Step Navigation
    # -----------------------------------------------------------------------
    @app.route("/api/step/next", methods=["POST"])
    def api_step_next():
        return _navigate(lambda s: s.next_step(), "Already at last step")

    @app.route("/api/step/prev", methods=["POST"])
    def api_step_prev():
        return _navigate(lambda s: s.prev_step(), "Already at first step")

    @app.route("/api/step/goto", methods=["POST"])
    def api_step_goto():
        idx = _json_body().get("index", 0)
        if isinstance(idx, bool) or not isinstance(idx, int):
            return jsonify({"error": "Step index must be an integer"}), 400
        return _navigate(lambda s: s.goto_step(idx), "Invalid step index")

    @app.route("/api/step/play", methods=["POST"])
    def api_step_play():
        rec = get_recorder()
        if rec is None:
            return jsonify({"error": "Compute a trace first"}), 400
        stepper = get_stepper(rec)
        stepper.toggle_play()
        save_stepper(stepper)
        return jsonify({"is_playing": stepper.is_playing, "seconds": stepper.speed})

    # -----------------------------------------------------------------------
    # API: Read-only views
    # -----------------------------------------------------------------------
    @app.route("/api/state", methods=["GET"])
    def api_state():
        get_graph()
        return jsonify(get_state())

    @app.route("/api/trace", methods=["GET"])
    def api_trace():
        rec = get_recorder()
        if rec is None:
            return jsonify({"error": "Compute a trace first"}), 400
        return jsonify(rec.export())

    return app


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Double-Labeling Shortest Path</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: sans-serif; background: #f1f5f9; color: #0f172a; display: flex; gap: 16px; padding: 16px; }
    main { flex: 1; }
    aside { width: 360px; display: flex; flex-direction: column; gap: 12px; }
    .panel { background: #fff; border: 1px solid #e2e8f0; border-radius: 8px; padding: 12px; }
    .panel h3 { font-size: 14px; margin-bottom: 8px; }
    .button-row button, .btn-primary { padding: 4px 10px; margin-right: 4px; }
    .data-table { width: 100%; border-collapse: collapse; font-size: 13px; }
    .data-table td, .data-table th { padding: 4px 8px; border-bottom: 1px solid #e2e8f0; text-align: left; }
    .data-table tr.active { background: #fef3c7; }
    .mono { font-family: monospace; }
    .badge { padding: 1px 8px; border-radius: 999px; font-size: 11px; font-weight: 700; }
    .badge-p { background: #dbeafe; color: #1d4ed8; }
    .badge-t { background: #fef3c7; color: #b45309; }
    .badge-u { background: #f1f5f9; color: #64748b; }
    .step-list ol { list-style: none; max-height: 200px; overflow-y: auto; font-size: 12px; }
    .step-item { padding: 4px; cursor: pointer; }
    .step-item.current { background: #2563eb; color: #fff; }
    .step-no { font-family: monospace; opacity: 0.5; margin-right: 6px; }
    .code-block { font-family: monospace; font-size: 12px; white-space: pre; }
    .code-line.highlight { background: #fef3c7; }
    .explanation-text { padding: 8px; font-size: 13px; }
    .error { color: #b91c1c; font-size: 13px; }
  </style>
</head>
<body>
  <main>
    <div id="canvas-svg">{{ svg|safe }}</div>
    <div class="panel"><h3>{{ algo.label }}</h3><div id="explanation">{{ explanation|safe }}</div></div>
    <div class="panel" id="table">{{ table|safe }}</div>
  </main>
  <aside>
    <div id="picker">{{ picker|safe }}</div>
    <div id="error" class="error"></div>
    <div id="playback">{{ playback|safe }}</div>
    <div class="panel" id="steps">{{ steps|safe }}</div>
    <div class="panel" id="pseudocode">{{ pseudocode|safe }}</div>
    <div id="analytics">{{ analytics|safe }}</div>
  </aside>

  <script>
    let timer = null;

    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
      });
      return await res.json();
    }

    function show(data) {
      document.getElementById('error').textContent = data.error || '';
      if (data.error) return false;
      if (data.svg) document.getElementById('canvas-svg').innerHTML = data.svg;
      if (data.table) document.getElementById('table').innerHTML = data.table;
      if (data.explanation) document.getElementById('explanation').innerHTML = data.explanation;
      if (data.pseudocode) document.getElementById('pseudocode').innerHTML = data.pseudocode;
      if (data.steps) document.getElementById('steps').innerHTML = data.steps;
      if (data.analytics) document.getElementById('analytics').innerHTML = data.analytics;
      if (data.current_step !== undefined) {
        document.getElementById('current-step').textContent = data.current_step + 1;
        document.getElementById('total-steps').textContent = data.total_steps;
        document.querySelectorAll('.step-item').forEach((li) => {
          li.classList.toggle('current', +li.dataset.index === data.current_step);
        });
      }
      return true;
    }

    function stop() { if (timer) { clearInterval(timer); timer = null; } }

    document.addEventListener('click', async (e) => {
      const id = e.target.id;
      if (id === 'btn-run') { stop(); show(await post('/api/run')); }
      if (id === 'btn-next') show(await post('/api/step/next'));
      if (id === 'btn-prev') show(await post('/api/step/prev'));
      if (id === 'btn-rewind') show(await post('/api/step/goto', {index: 0}));
      if (id === 'btn-end') {
        const total = +document.getElementById('total-steps').textContent;
        show(await post('/api/step/goto', {index: Math.max(total - 1, 0)}));
      }
      if (id === 'btn-play') {
        const data = await post('/api/step/play');
        stop();
        if (data.is_playing) {
          timer = setInterval(async () => {
            const step = await post('/api/step/next');
            if (!show(step) || !step.is_playing) stop();
          }, data.seconds * 1000);
        }
      }
      const li = e.target.closest('.step-item');
      if (li) show(await post('/api/step/goto', {index: +li.dataset.index}));
    });

    document.addEventListener('change', async (e) => {
      if (e.target.id === 'source-selector') { stop(); await post('/api/config/source_target', {source: e.target.value}); }
      if (e.target.id === 'target-selector') { stop(); await post('/api/config/source_target', {target: e.target.value}); }
      if (e.target.id === 'speed-selector') await post('/api/config/speed', {speed: e.target.value});
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(level=Config.LOG_LEVEL, format=Config.LOG_FORMAT)
    logger.info("Double-Labeling Visualizer on http://%s:%d", Config.HOST, Config.PORT)
    create_app().run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)
