import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from platformdirs import user_state_dir

from ..errors import ConfigError
from .env import env_bool

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_COMMAND_LINE",
    "LOG_DIR",
    "LOG_PATH",
    "MAX_LOG_SIZE_BYTES",
    "PACKAGES_DIR",
    "RADIOSS_LOGGING",
    "RADIOSS_LOG_REDACT",
    "WorkloadConfig",
]

# Package store root used by the default directory package provider
PACKAGES_DIR = Path(os.getenv("RADIOSS_PACKAGES_DIR", "").strip() or "packages").expanduser()

# Local event logging mode (default: off)
# Options: off (disabled), safe (enabled with redaction), full (enabled without redaction)
_LOGGING_RAW = os.getenv("RADIOSS_LOGGING", "off").strip().lower()
RADIOSS_LOGGING = _LOGGING_RAW in ("safe", "full", "1", "true", "yes")
RADIOSS_LOG_REDACT = _LOGGING_RAW != "full" and env_bool("RADIOSS_LOG_REDACT", default=True)

# Logging - Cross-platform state directory:
# - Linux: ~/.local/state/radioss-workload
# - macOS: ~/Library/Application Support/radioss-workload
# - Windows: %LOCALAPPDATA%\radioss-workload
# Note: Directory is created lazily when the first event is written
LOG_DIR = Path(user_state_dir("radioss-workload", appauthor=False))
LOG_PATH = LOG_DIR / "radioss-workload.log"
MAX_LOG_SIZE_BYTES = 10 * 1024 * 1024

# Benchmark input deck shipped with the OpenRadioss package and the file it writes
DEFAULT_INPUT_DECK = "NEON1M11_0000.rad"
DEFAULT_RESULTS_FILE_NAME = "NEON1M11_0001.out"
DEFAULT_COMMAND_LINE = f"{DEFAULT_INPUT_DECK} 2 1 no no no no no"
DEFAULT_PROCESS_NAME = "OpenRadioss"
DEFAULT_VISUALCPP_PACKAGE_NAME = "visualcpp"


def _coerce_int(key: str, value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigError(f"Parameter '{key}' must be an integer, got {value!r}")
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"Parameter '{key}' must be an integer, got {value!r}") from exc


def _coerce_tags(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(tag.strip() for tag in value.split(",") if tag.strip())
    return tuple(str(tag).strip() for tag in value if str(tag).strip())


@dataclass(frozen=True)
class WorkloadConfig:
    """Parameters for one OpenRadioss run, validated once at construction."""

    package_name: str
    visualcpp_package_name: str = DEFAULT_VISUALCPP_PACKAGE_NAME
    command_line: str = DEFAULT_COMMAND_LINE  # Arguments for the Windows run script
    thread_count: int | None = None  # None: let the Linux run script decide
    input_deck: str = DEFAULT_INPUT_DECK
    results_file_name: str = DEFAULT_RESULTS_FILE_NAME
    process_name: str = DEFAULT_PROCESS_NAME
    scenario: str = "OpenRadioss"
    metric_scenario: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for name in ("package_name", "input_deck", "results_file_name", "process_name"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"Parameter '{name}' is required and must be non-empty")
        if self.thread_count is not None and self.thread_count < 1:
            raise ConfigError(f"Parameter 'thread_count' must be positive, got {self.thread_count}")

    @property
    def effective_metric_scenario(self) -> str:
        return self.metric_scenario or self.scenario

    @classmethod
    def from_parameters(cls, parameters: Mapping[str, Any]) -> "WorkloadConfig":
        """Build a config from a profile parameter bag (PascalCase keys)."""
        package_name = parameters.get("PackageName")
        if not package_name:
            raise ConfigError("Parameter 'PackageName' is required")

        kwargs: dict[str, Any] = {"package_name": str(package_name)}
        optional = {
            "VisualcppPackageName": "visualcpp_package_name",
            "CommandLine": "command_line",
            "InputDeck": "input_deck",
            "ResultsFileName": "results_file_name",
            "ProcessName": "process_name",
            "Scenario": "scenario",
            "MetricScenario": "metric_scenario",
        }
        for key, attr in optional.items():
            value = parameters.get(key)
            if value is not None and str(value).strip():
                kwargs[attr] = str(value).strip()

        kwargs["thread_count"] = _coerce_int("ThreadCount", parameters.get("ThreadCount"))
        kwargs["tags"] = _coerce_tags(parameters.get("Tags"))
        return cls(**kwargs)

    @classmethod
    def from_env(cls) -> "WorkloadConfig":
        package_name = os.getenv("RADIOSS_PACKAGE_NAME", "").strip() or "openradioss"
        parameters: dict[str, Any] = {
            "PackageName": package_name,
            "VisualcppPackageName": os.getenv("RADIOSS_VISUALCPP_PACKAGE_NAME"),
            "CommandLine": os.getenv("RADIOSS_COMMAND_LINE"),
            "ThreadCount": os.getenv("RADIOSS_THREAD_COUNT"),
            "Scenario": os.getenv("RADIOSS_SCENARIO"),
            "MetricScenario": os.getenv("RADIOSS_METRIC_SCENARIO"),
            "Tags": os.getenv("RADIOSS_TAGS"),
        }
        config = cls.from_parameters(parameters)
        logger.debug("Loaded workload config from environment: %s", config)
        return config
