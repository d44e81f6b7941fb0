import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

from ..parsing.rules import Metric
from ..process import ProcessResult
from .events import log_event

logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    def log_process_details(self, process: ProcessResult, stage_name: str) -> None: ...

    def log_metrics(
        self,
        tool_name: str,
        scenario: str,
        start_time: datetime,
        end_time: datetime,
        metrics: Sequence[Metric],
        command_line: str,
        tags: Sequence[str] = (),
        metadata: dict[str, Any] | None = None,
    ) -> None: ...

    def log_not_supported(self, tool_name: str, platform: str, architecture: str) -> None: ...


class EventTelemetry:
    """Telemetry sink writing to the structured event log and the stdlib logger."""

    def log_process_details(self, process: ProcessResult, stage_name: str) -> None:
        logger.info(
            "%s: %s exited %s after %d ms",
            stage_name,
            process.command,
            process.exit_code,
            process.duration_ms,
        )
        log_event(
            {
                "kind": "process_details",
                "level": "error" if process.stderr else "info",
                "stage": stage_name,
                "command": process.command,
                "arguments": process.arguments,
                "working_directory": process.working_directory,
                "exit_code": process.exit_code,
                "start_time": process.start_time.isoformat(),
                "exit_time": process.exit_time.isoformat(),
                "duration_ms": process.duration_ms,
                "stdout": process.stdout,
                "stderr": process.stderr,
            }
        )

    def log_metrics(
        self,
        tool_name: str,
        scenario: str,
        start_time: datetime,
        end_time: datetime,
        metrics: Sequence[Metric],
        command_line: str,
        tags: Sequence[str] = (),
        metadata: dict[str, Any] | None = None,
    ) -> None:
        for metric in metrics:
            logger.info(
                "%s %s: %s=%s %s", tool_name, scenario, metric.name, metric.value, metric.unit
            )
        log_event(
            {
                "kind": "metrics",
                "level": "info",
                "tool": tool_name,
                "metric_scenario": scenario,
                "start_time": start_time.isoformat(),
                "end_time": end_time.isoformat(),
                "metrics": [
                    {"name": m.name, "value": m.value, "unit": m.unit} for m in metrics
                ],
                "command_line": command_line,
                "tags": list(tags),
                "metadata": metadata or {},
            }
        )

    def log_not_supported(self, tool_name: str, platform: str, architecture: str) -> None:
        logger.warning(
            "%s is not supported on the current platform/architecture %s-%s",
            tool_name,
            platform,
            architecture,
        )
        log_event(
            {
                "kind": "not_supported",
                "level": "warning",
                "tool": tool_name,
                "platform": platform,
                "architecture": architecture,
            }
        )
