from collections.abc import Mapping
from pathlib import PureWindowsPath

from ..config import WorkloadConfig
from .base import (
    OPENRADIOSS_PACKAGE,
    VISUALCPP_PACKAGE,
    CommandStage,
    ExecutionPlan,
    PackageRequirement,
    PlatformPlan,
    PlatformVariant,
)

SCRIPTS_DIR = "win_scripts_mk4"
RUN_SCRIPT = "openradioss_run_script_ps.bat"
VISUALCPP_INSTALLER = "VC_redist.x64.exe"
VISUALCPP_INSTALL_ARGUMENTS = "/install /passive /norestart"


class WindowsPlatform(PlatformVariant):
    """Windows: install the Visual C++ runtime, then run the batch script."""

    def __init__(self, architecture: str) -> None:
        self.platform = "win"
        self.architecture = architecture

    def required_packages(self, config: WorkloadConfig) -> tuple[PackageRequirement, ...]:
        return (
            PackageRequirement(OPENRADIOSS_PACKAGE, config.package_name, platform_specific=True),
            PackageRequirement(VISUALCPP_PACKAGE, config.visualcpp_package_name),
        )

    def join(self, *parts: str) -> PureWindowsPath:
        return PureWindowsPath(*parts)

    def build(self, packages: Mapping[str, str], config: WorkloadConfig) -> PlatformPlan:
        package_path = self._package_path(packages, OPENRADIOSS_PACKAGE)
        visualcpp_path = self._package_path(packages, VISUALCPP_PACKAGE)

        executable_path = str(self.join(package_path, SCRIPTS_DIR, RUN_SCRIPT))
        results_path = str(self.join(package_path, SCRIPTS_DIR, config.results_file_name))

        stages = (
            CommandStage(
                name="VisualCppInstall",
                executable=str(self.join(visualcpp_path, VISUALCPP_INSTALLER)),
                arguments=VISUALCPP_INSTALL_ARGUMENTS,
                working_directory=visualcpp_path,
            ),
            CommandStage(
                name="OpenRadioss",
                executable=executable_path,
                arguments=config.command_line,
                working_directory=package_path,
            ),
        )
        return PlatformPlan(
            plan=ExecutionPlan(stages),
            executable_path=executable_path,
            results_path=results_path,
            platform=self.platform,
            architecture=self.architecture,
        )
