"""
Package installation workflow.

This package handles:
1. Selecting and resolving the wget toolset for the host platform
2. Downloading package archives with the toolset
3. Extracting archives next to the download
4. Registering the extracted package by name
"""

from .interfaces import InstallerDependencies, PackageManager, ProcessManager, ProcessResult
from .toolset import MISSING_PACKAGE_PREFIX, ToolsetResolver, select_toolset
from .downloader import WgetDownloader
from .wget_package_installation import InstallationState, WgetPackageInstallation

__all__ = [
    "InstallationState",
    "InstallerDependencies",
    "MISSING_PACKAGE_PREFIX",
    "PackageManager",
    "ProcessManager",
    "ProcessResult",
    "ToolsetResolver",
    "WgetDownloader",
    "WgetPackageInstallation",
    "select_toolset",
]
