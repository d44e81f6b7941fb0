import json
from pathlib import Path
from typing import Any

import pytest

from fakes import EventReader, FakeRuntime, RecordingTelemetry
from radioss_workload.config import WorkloadConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def event_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route structured events to a per-test file."""
    log_path = tmp_path / "state" / "events.log"
    monkeypatch.setattr("radioss_workload.config.settings.LOG_PATH", log_path)
    monkeypatch.setattr("radioss_workload.config.settings.RADIOSS_LOGGING", True)
    monkeypatch.setattr("radioss_workload.config.settings.RADIOSS_LOG_REDACT", False)
    return log_path


@pytest.fixture
def logged_events(event_log: Path) -> EventReader:
    """Return a reader for the events written so far in this test."""

    def read() -> list[dict[str, Any]]:
        if not event_log.exists():
            return []
        lines = event_log.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line]

    return read


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "RADIOSS_PACKAGE_NAME",
        "RADIOSS_VISUALCPP_PACKAGE_NAME",
        "RADIOSS_COMMAND_LINE",
        "RADIOSS_THREAD_COUNT",
        "RADIOSS_SCENARIO",
        "RADIOSS_METRIC_SCENARIO",
        "RADIOSS_TAGS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_results() -> str:
    return (FIXTURES_DIR / "openradioss_results.out").read_text(encoding="utf-8")


@pytest.fixture
def truncated_results() -> str:
    return (FIXTURES_DIR / "openradioss_results_truncated.out").read_text(encoding="utf-8")


@pytest.fixture
def fake_runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def telemetry() -> RecordingTelemetry:
    return RecordingTelemetry()


@pytest.fixture
def workload_config() -> WorkloadConfig:
    return WorkloadConfig(
        package_name="openradioss",
        visualcpp_package_name="visual_c++_red",
        command_line="NEON1M11_0000.rad 2 1 no no no no no",
        thread_count=4,
        scenario="Running_OpenRadioss",
        metric_scenario="np_1_and_nt_2",
        tags=("crash", "cpu"),
    )


@pytest.fixture
def packages_dir(tmp_path: Path) -> Path:
    """Package store with OpenRadioss for linux-x64/win-x64 and the VC++ runtime."""
    root = tmp_path / "packages"
    radioss = root / "openradioss"
    (radioss / "linux-x64").mkdir(parents=True)
    (radioss / "win-x64" / "win_scripts_mk4").mkdir(parents=True)
    (radioss / "version.txt").write_text("20240312\n", encoding="utf-8")
    (root / "visual_c++_red").mkdir(parents=True)
    return root
