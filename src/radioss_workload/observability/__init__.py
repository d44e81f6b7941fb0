from .context import RunContext, current_run, run_scope
from .events import log_event
from .telemetry import EventTelemetry, TelemetrySink

__all__ = [
    "EventTelemetry",
    "RunContext",
    "TelemetrySink",
    "current_run",
    "log_event",
    "run_scope",
]
