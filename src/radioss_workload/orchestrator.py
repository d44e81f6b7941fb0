import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

from .errors import ErrorReason, StageFailedError
from .observability import TelemetrySink, log_event
from .platforms import CommandStage, ExecutionPlan
from .process import ProcessResult, ProcessRuntime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageExecution:
    index: int
    stage: CommandStage
    process: ProcessResult


@dataclass(frozen=True)
class StageFailure:
    stage_name: str
    reason: ErrorReason
    message: str
    stderr: str = ""

    def to_error(self) -> StageFailedError:
        return StageFailedError(self.stage_name, self.message, self.reason, self.stderr)


@dataclass(frozen=True)
class RunResult:
    """Outcome of running a plan: every finished stage plus how the run ended."""

    executions: tuple[StageExecution, ...] = ()
    failure: StageFailure | None = None
    cancelled: bool = False

    @property
    def succeeded(self) -> bool:
        return self.failure is None and not self.cancelled

    @property
    def last_execution(self) -> StageExecution | None:
        return self.executions[-1] if self.executions else None


@dataclass
class _StageScope:
    process: ProcessResult | None = None


def failure_reason(index: int) -> ErrorReason:
    # The first stage prepares the environment; later stages run the benchmark.
    if index == 0:
        return ErrorReason.DEPENDENCY_INSTALLATION_FAILED
    return ErrorReason.WORKLOAD_EXECUTION_FAILED


class ProcessOrchestrator:
    def __init__(self, runtime: ProcessRuntime, telemetry: TelemetrySink) -> None:
        self.runtime = runtime
        self.telemetry = telemetry

    @asynccontextmanager
    async def _stage_scope(self, stage: CommandStage) -> AsyncIterator[_StageScope]:
        """Record stage diagnostics when the scope exits, however it exits."""
        scope = _StageScope()
        started = datetime.now(UTC)
        aborted = False
        try:
            yield scope
        except asyncio.CancelledError:
            aborted = True
            raise
        finally:
            if scope.process is not None:
                self.telemetry.log_process_details(scope.process, stage.name)
            else:
                log_event(
                    {
                        # A cancelled task kills the process it already spawned
                        "kind": "stage_aborted" if aborted else "stage_not_started",
                        "level": "warning",
                        "stage": stage.name,
                        "command": stage.command_line,
                        "working_directory": stage.working_directory,
                        "duration_ms": int((datetime.now(UTC) - started).total_seconds() * 1000),
                    }
                )

    async def run(
        self, plan: ExecutionPlan, cancel_event: asyncio.Event | None = None
    ) -> RunResult:
        """Run ``plan`` stage by stage.

        Cancellation is observed before each stage and again once each stage
        exits, ahead of its error check, so output from an interrupted stage
        is never classified. A stage whose process writes to standard error
        (or cannot be started) ends the run.
        """
        executions: list[StageExecution] = []
        for index, stage in enumerate(plan.stages):
            if cancel_event is not None and cancel_event.is_set():
                logger.info(
                    "Cancellation requested, skipping %d remaining stage(s)", len(plan) - index
                )
                return RunResult(executions=tuple(executions), cancelled=True)

            async with self._stage_scope(stage) as scope:
                logger.info("Running stage %d/%d: %s", index + 1, len(plan), stage.name)
                try:
                    scope.process = await self.runtime.run(
                        stage.executable, stage.arguments, stage.working_directory
                    )
                except OSError as exc:
                    logger.error("Stage %s failed to start: %s", stage.name, exc)
                    return RunResult(
                        executions=tuple(executions),
                        failure=StageFailure(
                            stage_name=stage.name,
                            reason=failure_reason(index),
                            message=f"Failed to start '{stage.command_line}': {exc}",
                        ),
                    )

                process = scope.process
                executions.append(StageExecution(index=index, stage=stage, process=process))
                if cancel_event is not None and cancel_event.is_set():
                    logger.info("Cancellation requested during stage %s", stage.name)
                    return RunResult(executions=tuple(executions), cancelled=True)
                if process.stderr:
                    reason = failure_reason(index)
                    detail = process.stderr.strip()
                    logger.error("Stage %s reported errors (%s)", stage.name, reason.value)
                    return RunResult(
                        executions=tuple(executions),
                        failure=StageFailure(
                            stage_name=stage.name,
                            reason=reason,
                            message=f"Error occurred while running stage '{stage.name}': {detail}",
                            stderr=process.stderr,
                        ),
                    )

        return RunResult(executions=tuple(executions))
