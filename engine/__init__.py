"""
engine/
-------
Playback & recording layer.

    from engine import Stepper, Recorder, TraceStore
"""

from engine.stepper     import Stepper, StepperState, SPEED_PRESETS
from engine.recorder    import Recorder, RunMetrics
from engine.trace_store import TraceStore

__all__ = [
    "Stepper",
    "StepperState",
    "SPEED_PRESETS",
    "Recorder",
    "RunMetrics",
    "TraceStore",
]
