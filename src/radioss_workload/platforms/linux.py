from collections.abc import Mapping
from pathlib import PurePosixPath

from ..config import WorkloadConfig
from .base import (
    OPENRADIOSS_PACKAGE,
    CommandStage,
    ExecutionPlan,
    PackageRequirement,
    PlatformPlan,
    PlatformVariant,
)

RUN_SCRIPT = "runscript.sh"


class LinuxPlatform(PlatformVariant):
    """Linux: make the package and run script executable, then run the deck."""

    def __init__(self, architecture: str) -> None:
        self.platform = "linux"
        self.architecture = architecture

    def required_packages(self, config: WorkloadConfig) -> tuple[PackageRequirement, ...]:
        return (
            PackageRequirement(OPENRADIOSS_PACKAGE, config.package_name, platform_specific=True),
        )

    def join(self, *parts: str) -> PurePosixPath:
        return PurePosixPath(*parts)

    def build(self, packages: Mapping[str, str], config: WorkloadConfig) -> PlatformPlan:
        package_path = self._package_path(packages, OPENRADIOSS_PACKAGE)
        executable_path = str(self.join(package_path))
        results_path = str(self.join(package_path, config.results_file_name))

        run_arguments = f"./{RUN_SCRIPT} {config.input_deck}"
        if config.thread_count is not None:
            run_arguments = f"{run_arguments} {config.thread_count}"

        stages = (
            CommandStage(
                name="PreparePackage",
                executable="sudo",
                arguments=f"chmod 777 {executable_path}",
                working_directory=executable_path,
            ),
            CommandStage(
                name="PrepareRunScript",
                executable="sudo",
                arguments=f"chmod 777 {RUN_SCRIPT}",
                working_directory=executable_path,
            ),
            CommandStage(
                name="OpenRadioss",
                executable="sudo",
                arguments=f'bash -c "{run_arguments}"',
                working_directory=executable_path,
            ),
        )
        return PlatformPlan(
            plan=ExecutionPlan(stages),
            executable_path=executable_path,
            results_path=results_path,
            platform=self.platform,
            architecture=self.architecture,
        )
