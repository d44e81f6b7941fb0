from enum import Enum


class ErrorReason(str, Enum):
    """Reason codes surfaced to the caller of a workload run."""

    PLATFORM_NOT_SUPPORTED = "PlatformNotSupported"
    DEPENDENCY_INSTALLATION_FAILED = "DependencyInstallationFailed"
    WORKLOAD_EXECUTION_FAILED = "WorkloadExecutionFailed"
    RESULTS_NOT_FOUND = "ResultsNotFound"
    MALFORMED_OUTPUT = "MalformedOutput"
    PACKAGE_NOT_FOUND = "PackageNotFound"
    INVALID_CONFIGURATION = "InvalidConfiguration"


class WorkloadError(Exception):
    """Base class for terminal workload failures.

    Attributes:
        reason: Error category for programmatic handling.
        message: Human readable description.
    """

    default_reason: ErrorReason = ErrorReason.WORKLOAD_EXECUTION_FAILED

    def __init__(self, message: str, reason: ErrorReason | None = None) -> None:
        self.message = message
        self.reason = reason or self.default_reason
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} ({self.reason.value})"


class UnsupportedPlatformError(WorkloadError):
    default_reason = ErrorReason.PLATFORM_NOT_SUPPORTED

    def __init__(self, platform: str, architecture: str) -> None:
        self.platform = platform
        self.architecture = architecture
        super().__init__(
            "The OpenRadioss workload is not supported on the current platform/architecture "
            f"{platform}-{architecture}."
        )


class StageFailedError(WorkloadError):
    """A plan stage reported error output or could not be started."""

    def __init__(
        self, stage_name: str, message: str, reason: ErrorReason, stderr: str = ""
    ) -> None:
        self.stage_name = stage_name
        self.stderr = stderr
        super().__init__(message, reason)


class ResultsNotFoundError(WorkloadError):
    default_reason = ErrorReason.RESULTS_NOT_FOUND

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"The expected OpenRadioss results file was not found at path '{path}'.")


class SchemaError(WorkloadError):
    """Result text is empty or does not match the expected format."""

    default_reason = ErrorReason.MALFORMED_OUTPUT


class PackageNotFoundError(WorkloadError):
    default_reason = ErrorReason.PACKAGE_NOT_FOUND

    def __init__(self, name: str, path: str) -> None:
        self.name = name
        self.path = path
        super().__init__(f"Package '{name}' was not found at '{path}'.")


class ConfigError(WorkloadError):
    default_reason = ErrorReason.INVALID_CONFIGURATION


__all__ = [
    "ConfigError",
    "ErrorReason",
    "PackageNotFoundError",
    "ResultsNotFoundError",
    "SchemaError",
    "StageFailedError",
    "UnsupportedPlatformError",
    "WorkloadError",
]
