from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePath

from ..config import WorkloadConfig

OPENRADIOSS_PACKAGE = "openradioss"
VISUALCPP_PACKAGE = "visualcpp"


@dataclass(frozen=True)
class CommandStage:
    """One external process invocation within a plan."""

    name: str
    executable: str
    arguments: str
    working_directory: str

    @property
    def command_line(self) -> str:
        return f"{self.executable} {self.arguments}".strip()


@dataclass(frozen=True)
class ExecutionPlan:
    stages: tuple[CommandStage, ...]

    def __post_init__(self) -> None:
        if not self.stages:
            raise ValueError("An execution plan needs at least one stage")

    def __len__(self) -> int:
        return len(self.stages)

    def __iter__(self):
        return iter(self.stages)


@dataclass(frozen=True)
class PlatformPlan:
    plan: ExecutionPlan
    executable_path: str
    results_path: str
    platform: str
    architecture: str


@dataclass(frozen=True)
class PackageRequirement:
    role: str
    """Key under which the resolved path is handed back to ``build``."""

    name: str
    platform_specific: bool = False


class PlatformVariant(ABC):
    """Builds the execution plan for one supported (platform, architecture) pair.

    Implementations must be pure: path composition only, no file system or
    process access.
    """

    platform: str
    architecture: str

    @property
    def key(self) -> tuple[str, str]:
        return (self.platform, self.architecture)

    @abstractmethod
    def required_packages(self, config: WorkloadConfig) -> tuple[PackageRequirement, ...]: ...

    @abstractmethod
    def join(self, *parts: str) -> PurePath: ...

    @abstractmethod
    def build(self, packages: Mapping[str, str], config: WorkloadConfig) -> PlatformPlan: ...

    def _package_path(self, packages: Mapping[str, str], role: str) -> str:
        try:
            return packages[role]
        except KeyError:
            raise ValueError(
                f"Package path for '{role}' is required on {self.platform}-{self.architecture}"
            ) from None
