"""
Selection and resolution of the wget toolset used to download packages.
"""

import logging
import os
from typing import Dict, Optional

from depinstall.depinstall_exceptions import DependencyException, ErrorReason
from depinstall.depinstall_logger import DepInstallLogger
from depinstall.depinstall_utils import Architecture, PlatformFamily, PlatformUtils
from depinstall.dependency_models import DependencyPath
from depinstall.installation.interfaces import PackageManager

MISSING_PACKAGE_PREFIX = "Missing required package."

# Unix systems run the wget2 build, Windows systems run wget.
TOOLSET_BINARIES: Dict[PlatformFamily, str] = {
    PlatformFamily.UNIX: "wget2",
    PlatformFamily.WIN32NT: "wget",
}


def select_toolset(platform: PlatformFamily, architecture: Optional[Architecture] = None) -> str:
    """
    Returns the name of the download binary for the platform. The architecture
    only decides which platform folder of the toolset package is used.
    """
    return TOOLSET_BINARIES[platform]


def get_toolset_executable(
    toolset: DependencyPath, platform: PlatformFamily, architecture: Architecture
) -> str:
    """
    Returns the path to the download binary inside the toolset package,
    e.g. /packages/wget/linux-x64/wget2
    """
    platform_id = PlatformUtils.get_platform_id(platform, architecture)
    return os.path.join(toolset.path, platform_id.value, select_toolset(platform))


class ToolsetResolver:
    """
    Resolves the toolset package through the package manager.
    """

    def __init__(self, package_manager: PackageManager, logger: DepInstallLogger):
        self.package_manager = package_manager
        self.logger = logger

    async def resolve(self, name: str) -> DependencyPath:
        """
        Returns the registered toolset package.

        Raises:
            DependencyException: With reason DEPENDENCY_NOT_FOUND when the
                package is not registered. This is never retried.
        """
        toolset = await self.package_manager.get_package(name)
        if toolset is None:
            raise DependencyException(
                f"{MISSING_PACKAGE_PREFIX} The '{name}' toolset package does not "
                f"exist on the system and is required to download packages.",
                ErrorReason.DEPENDENCY_NOT_FOUND,
            )

        self.logger.log(f"Resolved toolset '{name}' at {toolset.path}", logging.DEBUG)
        return toolset
