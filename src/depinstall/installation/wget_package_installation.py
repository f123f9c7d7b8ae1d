"""
Installs a package by downloading its archive with wget, extracting it next to
the download and registering the extracted directory with the package manager.
"""

import asyncio
import logging
import os
from enum import Enum
from typing import Any, Dict, Optional, Set

from depinstall.cancellation import run_cancellable, throw_if_cancelled
from depinstall.depinstall_config import InstallationRequest, InstallerSettings
from depinstall.depinstall_exceptions import DepInstallException, DependencyException
from depinstall.depinstall_utils import PathUtils
from depinstall.dependency_models import ArchiveType, DependencyPath
from depinstall.installation.downloader import WgetDownloader
from depinstall.installation.interfaces import InstallerDependencies
from depinstall.installation.toolset import ToolsetResolver
from depinstall.retry import RetryPolicy


class InstallationState(str, Enum):
    """
    Progress of an installation.
    """

    IDLE = "idle"
    TOOLSET_RESOLVED = "toolset_resolved"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED_PERMANENT = "failed_permanent"
    FAILED_EXHAUSTED = "failed_exhausted"
    CANCELLED = "cancelled"


class WgetPackageInstallation:
    """
    Downloads, extracts and registers a package.

    The toolset is resolved once. Download, extraction and registration then run
    as one unit of work under `retry_policy`, which may be replaced before
    `execute` is called.

    Example usage:
    ```python
    with WgetPackageInstallation(dependencies, {"PackageName": "...", "PackageUri": "..."}) as installation:
        package = await installation.execute(cancellation)
    ```
    """

    def __init__(
        self,
        dependencies: InstallerDependencies,
        parameters: Dict[str, Any],
        settings: Optional[InstallerSettings] = None,
    ):
        """
        Args:
            dependencies: Collaborators and host facts
            parameters: Harness parameters holding PackageName and PackageUri
            settings: Installer settings; defaults apply when omitted

        Raises:
            ConfigurationException: If the parameters are invalid
        """
        self.dependencies = dependencies
        self.logger = dependencies.logger
        self.request = InstallationRequest.from_dict(
            parameters, dependencies.platform, dependencies.architecture
        )

        if settings is not None:
            self._packages_root = settings.packages_root
            self.toolset_package = settings.toolset_package
            self.retry_policy = RetryPolicy.from_settings(settings.retry, self.logger)
        else:
            self._packages_root = dependencies.packages_root
            self.toolset_package = "wget"
            self.retry_policy = RetryPolicy(logger=self.logger)

        self.resolver = ToolsetResolver(dependencies.package_manager, self.logger)
        self.downloader = WgetDownloader(
            dependencies.process_manager,
            self.request.platform,
            self.request.architecture,
            self.logger,
        )

        self.state = InstallationState.IDLE
        self.attempts = 0
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def package_name(self) -> str:
        return self.request.package_name

    @property
    def package_uri(self) -> str:
        return self.request.package_uri

    @property
    def packages_root(self) -> str:
        """Settings, when given, take precedence over the dependencies' root."""
        return self._packages_root

    async def execute(self, cancellation: Optional[asyncio.Event] = None) -> DependencyPath:
        """
        Run the installation.

        Args:
            cancellation: Signal checked at every step boundary, also during backoff

        Returns:
            The registered package

        Raises:
            DependencyException: If the toolset package is missing (not retried)
            asyncio.CancelledError: If the installation was cancelled
            The last download/extraction/registration failure once retries are exhausted,
            or the first one the retry policy does not handle
        """
        if self._closed:
            raise DepInstallException("The installation has already been closed.")

        task = asyncio.current_task()
        if task is not None:
            self._tasks.add(task)

        try:
            return await self._execute(cancellation)
        except asyncio.CancelledError:
            self.state = InstallationState.CANCELLED
            self.logger.log(
                f"Installation of package '{self.package_name}' was cancelled",
                logging.WARNING,
            )
            raise
        finally:
            if task is not None:
                self._tasks.discard(task)

    async def _execute(self, cancellation: Optional[asyncio.Event]) -> DependencyPath:
        throw_if_cancelled(cancellation)

        try:
            toolset = await run_cancellable(
                self.resolver.resolve(self.toolset_package), cancellation
            )
        except DependencyException as e:
            self.state = InstallationState.FAILED_PERMANENT
            self.logger.log(str(e), logging.ERROR)
            raise

        self.state = InstallationState.TOOLSET_RESOLVED

        outcome = await self.retry_policy.execute_and_capture(
            lambda: self._attempt(toolset, cancellation), cancellation
        )
        if not outcome.succeeded:
            self.state = (
                InstallationState.FAILED_EXHAUSTED
                if outcome.exception_handled
                else InstallationState.FAILED_PERMANENT
            )
            self.logger.log(
                f"Failed to install package '{self.package_name}' after "
                f"{self.attempts} attempt(s): {str(outcome.final_exception)}",
                logging.ERROR,
            )
            raise outcome.final_exception

        package = outcome.result

        self.state = InstallationState.SUCCEEDED
        self.logger.log(
            f"Installed package '{package.name}' to {package.path}",
            logging.INFO,
        )
        return package

    async def _attempt(
        self, toolset: DependencyPath, cancellation: Optional[asyncio.Event]
    ) -> DependencyPath:
        self.attempts += 1
        self.state = InstallationState.ATTEMPTING

        download_path, extraction_path = PathUtils.derive_paths(
            self.package_uri, self.packages_root
        )
        archive_type = PathUtils.get_archive_type(os.path.basename(download_path))

        throw_if_cancelled(cancellation)
        await self.downloader.download(toolset, self.package_uri, download_path, cancellation)

        throw_if_cancelled(cancellation)
        return await self.extract_and_register(
            download_path, extraction_path, archive_type, self.package_name, cancellation
        )

    async def extract_and_register(
        self,
        download_path: str,
        extraction_path: str,
        archive_type: Optional[ArchiveType],
        package_name: str,
        cancellation: Optional[asyncio.Event] = None,
    ) -> DependencyPath:
        """
        Extract the archive to `extraction_path` and register that directory
        under `package_name`.

        Returns:
            The registered package
        """
        package_manager = self.dependencies.package_manager

        self.logger.log(
            f"Extracting {download_path} to {extraction_path}",
            logging.INFO,
        )
        await run_cancellable(
            package_manager.extract_package(download_path, extraction_path, archive_type),
            cancellation,
        )

        package = DependencyPath(name=package_name, path=extraction_path)

        throw_if_cancelled(cancellation)
        await run_cancellable(package_manager.register_package(package), cancellation)
        return package

    def close(self) -> None:
        """
        Cancel any execution still in flight. Safe to call more than once.
        """
        if self._closed:
            return

        self._closed = True
        current = None
        try:
            current = asyncio.current_task()
        except RuntimeError:
            # No running event loop.
            pass

        for task in list(self._tasks):
            if task is not current and not task.done():
                task.cancel()
        self._tasks.clear()

    def __enter__(self) -> "WgetPackageInstallation":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    async def __aenter__(self) -> "WgetPackageInstallation":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
