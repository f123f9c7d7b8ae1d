"""
depinstall installs packages downloaded with wget and registers them with the
hosting harness's package manager.
"""

from depinstall.depinstall_config import InstallationRequest, InstallerSettings, load_settings
from depinstall.depinstall_exceptions import (
    ConfigurationException,
    DepInstallException,
    DependencyException,
    ErrorReason,
    ProcessException,
)
from depinstall.dependency_models import ArchiveType, DependencyPath
from depinstall.installation import InstallerDependencies, WgetPackageInstallation
from depinstall.retry import RetryPolicy

__all__ = [
    "ArchiveType",
    "ConfigurationException",
    "DepInstallException",
    "DependencyException",
    "DependencyPath",
    "ErrorReason",
    "InstallationRequest",
    "InstallerDependencies",
    "InstallerSettings",
    "ProcessException",
    "RetryPolicy",
    "WgetPackageInstallation",
    "load_settings",
]
