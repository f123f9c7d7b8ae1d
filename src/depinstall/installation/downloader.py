"""
Runs the wget toolset to download a package archive.
"""

import asyncio
import logging
import os
from typing import Optional

from depinstall.cancellation import run_cancellable
from depinstall.depinstall_exceptions import ProcessException
from depinstall.depinstall_logger import DepInstallLogger
from depinstall.depinstall_utils import Architecture, PlatformFamily
from depinstall.dependency_models import DependencyPath
from depinstall.installation.interfaces import ProcessManager
from depinstall.installation.toolset import get_toolset_executable


class WgetDownloader:
    """
    Downloads a package by running `<toolset> <package uri>` from the directory
    the archive should land in.
    """

    def __init__(
        self,
        process_manager: ProcessManager,
        platform: PlatformFamily,
        architecture: Architecture,
        logger: DepInstallLogger,
    ):
        self.process_manager = process_manager
        self.platform = platform
        self.architecture = architecture
        self.logger = logger

    async def download(
        self,
        toolset: DependencyPath,
        package_uri: str,
        destination: str,
        cancellation: Optional[asyncio.Event] = None,
    ) -> None:
        """
        Download the package archive to `destination`.

        wget saves to the URI's file name in the working directory, so the
        process runs from the destination's parent directory.

        Raises:
            ProcessException: If the process exits with a non-zero code
        """
        executable = get_toolset_executable(toolset, self.platform, self.architecture)
        working_directory = os.path.dirname(destination)

        self.logger.log(
            f"Downloading {package_uri} to {destination}",
            logging.INFO,
        )

        result = await run_cancellable(
            self.process_manager.run(executable, package_uri, working_directory),
            cancellation,
        )

        if not result.succeeded:
            raise ProcessException(
                f"Wget package download failed with exit code {result.exit_code}: "
                f"{result.standard_error.strip() or result.full_command}",
                exit_code=result.exit_code,
                command=result.full_command,
            )
