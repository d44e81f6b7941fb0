from datetime import UTC, datetime
from pathlib import Path

import pytest

from radioss_workload.observability import EventTelemetry, current_run, log_event, run_scope
from radioss_workload.observability.events import MAX_FIELD_CHARS
from radioss_workload.parsing import Metric
from radioss_workload.process import ProcessResult

from fakes import EventReader


def _process(stdout: str = "", stderr: str = "") -> ProcessResult:
    now = datetime(2024, 3, 12, tzinfo=UTC)
    return ProcessResult(
        command="sudo",
        arguments="chmod 777 runscript.sh",
        working_directory="/opt/openradioss",
        exit_code=0,
        stdout=stdout,
        stderr=stderr,
        start_time=now,
        exit_time=now,
    )


class TestLogEvent:
    def test_tags_events_with_active_run(self, logged_events: EventReader) -> None:
        with run_scope("Running_OpenRadioss") as run:
            log_event({"kind": "cleanup"})
        log_event({"kind": "cleanup"})

        inside, outside = logged_events()
        assert inside["trace_id"] == run.trace_id
        assert inside["scenario"] == "Running_OpenRadioss"
        assert inside["level"] == "info"
        assert "timestamp" in inside
        assert "trace_id" not in outside
        assert current_run() is None

    def test_parse_errors_default_to_error_level(self, logged_events: EventReader) -> None:
        log_event({"kind": "parse_error"})
        assert logged_events()[0]["level"] == "error"

    def test_disabled_logging_writes_nothing(
        self, event_log: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("radioss_workload.config.settings.RADIOSS_LOGGING", False)
        log_event({"kind": "cleanup"})
        assert not event_log.exists()

    def test_redacts_free_text_fields(
        self, logged_events: EventReader, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("radioss_workload.config.settings.RADIOSS_LOG_REDACT", True)

        log_event({"kind": "process_details", "stderr": "secret path", "exit_code": 1})

        (event,) = logged_events()
        assert event["stderr"].startswith("[REDACTED len=11 ")
        assert event["exit_code"] == 1

    def test_clips_long_fields_without_redaction(self, logged_events: EventReader) -> None:
        log_event({"kind": "process_details", "stdout": "x" * (MAX_FIELD_CHARS + 5)})

        (event,) = logged_events()
        assert event["stdout"].startswith("x" * MAX_FIELD_CHARS)
        assert event["stdout"].endswith(f"[truncated, len={MAX_FIELD_CHARS + 5}]")

    def test_never_raises_when_path_is_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("radioss_workload.config.settings.LOG_PATH", tmp_path)
        log_event({"kind": "cleanup"})

    def test_rotates_oversized_log(
        self, event_log: Path, logged_events: EventReader, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("radioss_workload.config.settings.MAX_LOG_SIZE_BYTES", 10)
        log_event({"kind": "cleanup", "matched": 1})
        log_event({"kind": "cleanup", "matched": 2})

        assert [e["matched"] for e in logged_events()] == [2]
        assert event_log.with_suffix(".log.1").exists()


class TestEventTelemetry:
    def test_process_details_event(self, logged_events: EventReader) -> None:
        EventTelemetry().log_process_details(_process(stderr="denied"), "PrepareRunScript")

        (event,) = logged_events()
        assert event["kind"] == "process_details"
        assert event["stage"] == "PrepareRunScript"
        assert event["level"] == "error"
        assert event["stderr"] == "denied"

    def test_redacted_streams_describe_captured_output(
        self, logged_events: EventReader, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("radioss_workload.config.settings.RADIOSS_LOG_REDACT", True)
        stdout = "NEON1M11 engine output " * 20

        EventTelemetry().log_process_details(_process(stdout=stdout), "OpenRadioss")

        (event,) = logged_events()
        assert event["stdout"].startswith(f"[REDACTED len={len(stdout)} ")

    def test_metrics_event(self, logged_events: EventReader) -> None:
        now = datetime(2024, 3, 12, tzinfo=UTC)
        EventTelemetry().log_metrics(
            "OpenRadioss",
            "np_1_and_nt_2",
            now,
            now,
            [Metric("TotalNumberOfCycles", 160039, "cycles")],
            "sudo bash -c ./runscript.sh",
            tags=("crash",),
            metadata={"tool_version": "20240312"},
        )

        (event,) = logged_events()
        assert event["metrics"] == [
            {"name": "TotalNumberOfCycles", "value": 160039, "unit": "cycles"}
        ]
        assert event["tags"] == ["crash"]
        assert event["metadata"] == {"tool_version": "20240312"}
