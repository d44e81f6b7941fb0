import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import PackageNotFoundError

logger = logging.getLogger(__name__)

VERSION_FILE = "version.txt"


@dataclass(frozen=True)
class DependencyPath:
    """A resolved package on disk."""

    name: str
    path: str
    version: str | None = None


def platform_folder(platform: str, architecture: str) -> str:
    return f"{platform}-{architecture}"


class PackageProvider(Protocol):
    async def get_package(self, name: str) -> DependencyPath: ...

    async def get_platform_specific_package(
        self, name: str, platform: str, architecture: str
    ) -> DependencyPath: ...


class DirectoryPackageProvider:
    """Resolves packages installed under a single root directory.

    Layout::

        <root>/<package>/version.txt        (optional)
        <root>/<package>/<platform>-<arch>/  (platform-specific payload)
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _read_version(self, package_dir: Path) -> str | None:
        version_file = package_dir / VERSION_FILE
        try:
            return version_file.read_text(encoding="utf-8").strip() or None
        except OSError:
            return None

    async def get_package(self, name: str) -> DependencyPath:
        package_dir = self.root / name
        if not package_dir.is_dir():
            raise PackageNotFoundError(name, str(package_dir))
        logger.debug("Resolved package %s -> %s", name, package_dir)
        return DependencyPath(
            name=name, path=str(package_dir), version=self._read_version(package_dir)
        )

    async def get_platform_specific_package(
        self, name: str, platform: str, architecture: str
    ) -> DependencyPath:
        package = await self.get_package(name)
        platform_dir = Path(package.path) / platform_folder(platform, architecture)
        if not platform_dir.is_dir():
            raise PackageNotFoundError(name, str(platform_dir))
        return DependencyPath(name=name, path=str(platform_dir), version=package.version)


__all__ = ["DependencyPath", "DirectoryPackageProvider", "PackageProvider", "platform_folder"]
