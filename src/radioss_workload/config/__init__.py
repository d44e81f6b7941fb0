"""Configuration module for radioss-workload."""

from .settings import (
    DEFAULT_COMMAND_LINE,
    DEFAULT_INPUT_DECK,
    DEFAULT_PROCESS_NAME,
    DEFAULT_RESULTS_FILE_NAME,
    LOG_DIR,
    LOG_PATH,
    MAX_LOG_SIZE_BYTES,
    PACKAGES_DIR,
    RADIOSS_LOG_REDACT,
    RADIOSS_LOGGING,
    WorkloadConfig,
)

__all__ = [
    "DEFAULT_COMMAND_LINE",
    "DEFAULT_INPUT_DECK",
    "DEFAULT_PROCESS_NAME",
    "DEFAULT_RESULTS_FILE_NAME",
    "LOG_DIR",
    "LOG_PATH",
    "MAX_LOG_SIZE_BYTES",
    "PACKAGES_DIR",
    "RADIOSS_LOGGING",
    "RADIOSS_LOG_REDACT",
    "WorkloadConfig",
]
