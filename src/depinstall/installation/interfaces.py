"""
Interfaces of the collaborators the installation workflow delegates to.

The package registry, archive extraction and process invocation are provided by
the hosting harness; depinstall only decides what to run, where outputs go and
how to react to failure.
"""

import dataclasses
from typing import Optional, Protocol

from depinstall.depinstall_config import InstallerSettings
from depinstall.depinstall_logger import DepInstallLogger
from depinstall.depinstall_utils import Architecture, PlatformFamily, PlatformUtils
from depinstall.dependency_models import ArchiveType, DependencyPath


@dataclasses.dataclass(frozen=True)
class ProcessResult:
    """
    Outcome of an external process run.
    """

    command: str
    arguments: str
    working_directory: str
    exit_code: int
    standard_output: str = ""
    standard_error: str = ""

    @property
    def full_command(self) -> str:
        return f"{self.command} {self.arguments}".strip()

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class PackageManager(Protocol):
    """Looks up, registers and extracts packages."""

    async def get_package(self, name: str) -> Optional[DependencyPath]:
        """Return the registered package with this name, or None."""
        ...

    async def register_package(self, package: DependencyPath) -> None:
        ...

    async def extract_package(
        self,
        file_path: str,
        destination_path: str,
        archive_type: Optional[ArchiveType] = None,
    ) -> None:
        ...


class ProcessManager(Protocol):
    """Runs external processes."""

    async def run(
        self, command: str, arguments: str, working_directory: str
    ) -> ProcessResult:
        """
        Run `command` with `arguments` from `working_directory` until it exits.
        Launch faults are raised, a non-zero exit is reported in the result.
        """
        ...


@dataclasses.dataclass
class InstallerDependencies:
    """
    The collaborators and host facts an installation runs against.
    """

    package_manager: PackageManager
    process_manager: ProcessManager
    packages_root: str
    platform: PlatformFamily = dataclasses.field(
        default_factory=PlatformUtils.get_platform_family
    )
    architecture: Architecture = dataclasses.field(
        default_factory=PlatformUtils.get_architecture
    )
    logger: DepInstallLogger = dataclasses.field(default_factory=DepInstallLogger)

    @classmethod
    def from_settings(
        cls,
        settings: InstallerSettings,
        package_manager: PackageManager,
        process_manager: ProcessManager,
        logger: Optional[DepInstallLogger] = None,
    ) -> "InstallerDependencies":
        return cls(
            package_manager=package_manager,
            process_manager=process_manager,
            packages_root=settings.packages_root,
            logger=logger or DepInstallLogger(),
        )
