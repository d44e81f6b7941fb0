import platform as _platform
from collections.abc import Mapping

from ..config import WorkloadConfig
from ..errors import UnsupportedPlatformError
from .base import (
    OPENRADIOSS_PACKAGE,
    VISUALCPP_PACKAGE,
    CommandStage,
    ExecutionPlan,
    PackageRequirement,
    PlatformPlan,
    PlatformVariant,
)
from .linux import LinuxPlatform
from .windows import WindowsPlatform

# Registry of supported (platform, architecture) pairs
PLATFORM_VARIANTS: dict[tuple[str, str], PlatformVariant] = {
    variant.key: variant
    for variant in (
        LinuxPlatform("x64"),
        WindowsPlatform("x64"),
        WindowsPlatform("arm64"),
    )
}

_SYSTEM_NAMES = {"linux": "linux", "windows": "win", "darwin": "osx"}
_MACHINE_NAMES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def current_platform() -> tuple[str, str]:
    """Return the (platform, architecture) pair of this host in registry terms."""
    system = _platform.system().lower()
    machine = _platform.machine().lower()
    return _SYSTEM_NAMES.get(system, system), _MACHINE_NAMES.get(machine, machine)


def is_supported(platform: str, architecture: str) -> bool:
    return (platform, architecture) in PLATFORM_VARIANTS


def get_variant(platform: str, architecture: str) -> PlatformVariant:
    variant = PLATFORM_VARIANTS.get((platform, architecture))
    if variant is None:
        raise UnsupportedPlatformError(platform, architecture)
    return variant


def dispatch(
    platform: str,
    architecture: str,
    packages: Mapping[str, str],
    config: WorkloadConfig,
) -> PlatformPlan:
    """Build the execution plan for ``platform``/``architecture``.

    Raises:
        UnsupportedPlatformError: The pair is not in ``PLATFORM_VARIANTS``.
    """
    return get_variant(platform, architecture).build(packages, config)


__all__ = [
    "CommandStage",
    "ExecutionPlan",
    "OPENRADIOSS_PACKAGE",
    "PLATFORM_VARIANTS",
    "PackageRequirement",
    "PlatformPlan",
    "PlatformVariant",
    "VISUALCPP_PACKAGE",
    "current_platform",
    "dispatch",
    "get_variant",
    "is_supported",
]
