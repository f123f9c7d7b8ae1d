"""
This file contains various utility functions like host platform detection and
package path derivation.
"""

import os
import platform
import posixpath
from enum import Enum
from typing import List, Optional, Tuple
from urllib.parse import unquote, urlsplit

from depinstall.depinstall_exceptions import ConfigurationException, DepInstallException
from depinstall.dependency_models import ArchiveType


class PlatformFamily(str, Enum):
    """
    Operating system family of the host.
    """

    UNIX = "Unix"
    WIN32NT = "Win32NT"


class Architecture(str, Enum):
    """
    CPU architecture of the host.
    """

    X64 = "x64"
    ARM64 = "arm64"


class PlatformId(str, Enum):
    """
    Platform identifiers used to name platform-specific package folders.
    """

    LINUX_x64 = "linux-x64"
    LINUX_arm64 = "linux-arm64"
    WIN_x64 = "win-x64"
    WIN_arm64 = "win-arm64"


_PLATFORM_PREFIXES = {
    PlatformFamily.UNIX: "linux",
    PlatformFamily.WIN32NT: "win",
}

_MACHINE_ARCHITECTURES = {
    "x86_64": Architecture.X64,
    "amd64": Architecture.X64,
    "x64": Architecture.X64,
    "aarch64": Architecture.ARM64,
    "arm64": Architecture.ARM64,
}


class PlatformUtils:
    """
    This class provides utilities for platform detection and identification.
    """

    @staticmethod
    def get_platform_family() -> PlatformFamily:
        """
        Returns the platform family of the host.
        """
        system = platform.system()
        if system == "Windows":
            return PlatformFamily.WIN32NT
        if system in ("Linux", "Darwin"):
            return PlatformFamily.UNIX
        raise DepInstallException(f"Unknown platform: {system}")

    @staticmethod
    def get_architecture() -> Architecture:
        """
        Returns the CPU architecture of the host.
        """
        machine = platform.machine().lower()
        if machine not in _MACHINE_ARCHITECTURES:
            raise DepInstallException(f"Unknown machine architecture: {machine}")
        return _MACHINE_ARCHITECTURES[machine]

    @staticmethod
    def get_platform_id(
        platform_family: Optional[PlatformFamily] = None,
        architecture: Optional[Architecture] = None,
    ) -> PlatformId:
        """
        Returns the platform id for the given platform/architecture, defaulting
        to the host values.
        """
        platform_family = platform_family or PlatformUtils.get_platform_family()
        architecture = architecture or PlatformUtils.get_architecture()
        return PlatformId(f"{_PLATFORM_PREFIXES[platform_family]}-{architecture.value}")


# Compound extensions come before their single-extension tails.
ARCHIVE_SUFFIXES: List[Tuple[str, ArchiveType]] = [
    (".tar.gz", ArchiveType.TAR_GZ),
    (".tgz", ArchiveType.TAR_GZ),
    (".tar.bz2", ArchiveType.TAR_BZ2),
    (".tbz2", ArchiveType.TAR_BZ2),
    (".tar.xz", ArchiveType.TAR_XZ),
    (".txz", ArchiveType.TAR_XZ),
    (".zip", ArchiveType.ZIP),
    (".tar", ArchiveType.TAR),
    (".gz", ArchiveType.GZ),
]


class PathUtils:
    """
    Pure functions mapping a package URI onto the locations it is downloaded
    and extracted to.
    """

    @staticmethod
    def get_file_name(package_uri: str) -> str:
        """
        Returns the file name at the end of the URI path, ignoring any query
        string or fragment.
        """
        file_name = posixpath.basename(unquote(urlsplit(package_uri).path))
        if not file_name:
            raise ConfigurationException(
                f"The package URI '{package_uri}' does not end in a file name."
            )
        return file_name

    @staticmethod
    def strip_archive_suffix(file_name: str) -> str:
        """
        Removes a recognized archive extension (e.g. '.tar.gz') from the file
        name, falling back to the final extension.
        """
        lowered = file_name.lower()
        for suffix, _ in ARCHIVE_SUFFIXES:
            if lowered.endswith(suffix) and len(file_name) > len(suffix):
                return file_name[: -len(suffix)]

        return os.path.splitext(file_name)[0]

    @staticmethod
    def get_archive_type(file_name: str) -> Optional[ArchiveType]:
        """
        Returns the archive type matching the file extension, or None when the
        extension is not recognized and the extractor has to detect it.
        """
        lowered = file_name.lower()
        for suffix, archive_type in ARCHIVE_SUFFIXES:
            if lowered.endswith(suffix):
                return archive_type
        return None

    @staticmethod
    def derive_paths(package_uri: str, packages_root: str) -> Tuple[str, str]:
        """
        Derive the download and extraction paths for a package.

        Args:
            package_uri: URI of the package archive
            packages_root: Directory packages are downloaded to

        Returns:
            Tuple of (download_path, extraction_path). Both are direct children
            of packages_root, e.g.:
            .../any-package.1.0.0.tar.gz -> (<root>/any-package.1.0.0.tar.gz, <root>/any-package.1.0.0)
        """
        file_name = PathUtils.get_file_name(package_uri)
        extraction_name = PathUtils.strip_archive_suffix(file_name)

        if not extraction_name or extraction_name == file_name:
            raise ConfigurationException(
                f"The package URI '{package_uri}' does not reference an archive file."
            )

        return (
            os.path.join(packages_root, file_name),
            os.path.join(packages_root, extraction_name),
        )
