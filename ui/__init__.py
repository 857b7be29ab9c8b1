"""
ui/
---
Presentation layer.

    from ui import render_canvas
    from ui import data_table, step_list, playback_controls, …
"""

from ui.canvas import render_canvas, label_tag, CanvasConfig

from ui.controls import (
    playback_controls,
    source_target_picker,
    data_table,
    step_list,
    analytics_panel,
    pseudocode_viewer,
    explanation_panel,
)

__all__ = [
    "render_canvas",
    "label_tag",
    "CanvasConfig",
    "playback_controls",
    "source_target_picker",
    "data_table",
    "step_list",
    "analytics_panel",
    "pseudocode_viewer",
    "explanation_panel",
]
