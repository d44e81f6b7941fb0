import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True)
class RunContext:
    """Identifies one workload run in every event it emits."""

    scenario: str
    trace_id: str


_current_run: ContextVar[RunContext | None] = ContextVar("radioss_run", default=None)


def current_run() -> RunContext | None:
    return _current_run.get()


@contextmanager
def run_scope(scenario: str) -> Iterator[RunContext]:
    """Tag events logged inside the block with ``scenario`` and a fresh trace id."""
    run = RunContext(scenario=scenario, trace_id=f"run-{uuid.uuid4().hex[:12]}")
    token = _current_run.set(run)
    try:
        yield run
    finally:
        _current_run.reset(token)
