"""
Configuration parameters for depinstall.
"""

import logging
import os
import pathlib
from typing import Any, Dict, Optional, Union
from urllib.parse import urlsplit

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from depinstall.depinstall_exceptions import ConfigurationException
from depinstall.depinstall_logger import DepInstallLogger
from depinstall.depinstall_utils import Architecture, PathUtils, PlatformFamily, PlatformUtils

SETTINGS_FILE_NAME = "depinstall.toml"

SUPPORTED_URI_SCHEMES = ("http", "https", "ftp")


SETTINGS_TOML_SCHEMA = """
# Installer settings for depinstall

[installer]
# Directory packages are downloaded and extracted into
packages_root = "/opt/packages"

# Name under which the wget toolset package is registered
# toolset_package = "wget"

[installer.retry]
# Number of retries after the first failed attempt
retries = 5

# Backoff before retry n is n * backoff_seconds
backoff_seconds = 2.0
"""


class InstallationRequest(BaseModel):
    """
    A request to install one package. Immutable once built.

    The harness supplies the parameters as `PackageName` / `PackageUri`; the
    platform and architecture come from the host.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    package_name: str = Field(..., alias="PackageName", min_length=1)
    package_uri: str = Field(..., alias="PackageUri")
    platform: PlatformFamily
    architecture: Architecture

    @field_validator("package_name")
    @classmethod
    def _strip_package_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("package name must not be blank")
        return value

    @field_validator("package_uri")
    @classmethod
    def _check_package_uri(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme.lower() not in SUPPORTED_URI_SCHEMES or not parts.netloc:
            raise ValueError(f"'{value}' is not an absolute http/https/ftp URI")
        if not parts.path or parts.path.endswith("/"):
            raise ValueError(f"'{value}' does not end in a file name")
        file_name = PathUtils.get_file_name(value)
        if PathUtils.strip_archive_suffix(file_name) in ("", file_name):
            raise ValueError(f"'{value}' does not end in an archive file name")
        return value

    @classmethod
    def from_dict(
        cls,
        parameters: Dict[str, Any],
        platform: Optional[PlatformFamily] = None,
        architecture: Optional[Architecture] = None,
    ) -> "InstallationRequest":
        """
        Create an InstallationRequest from harness parameters.

        Args:
            parameters: Dictionary holding PackageName and PackageUri
            platform: Platform family, defaults to the host's
            architecture: CPU architecture, defaults to the host's

        Raises:
            ConfigurationException: If a parameter is missing or invalid
        """
        values = dict(parameters)
        values.setdefault("platform", platform or PlatformUtils.get_platform_family())
        values.setdefault("architecture", architecture or PlatformUtils.get_architecture())
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigurationException(f"Invalid installation parameters: {e}") from e


class RetrySettings(BaseModel):
    """Retry configuration applied around download, extraction and registration."""

    retries: int = Field(default=5, ge=0)
    backoff_seconds: float = Field(default=2.0, ge=0)


class InstallerSettings(BaseModel):
    """Installer settings loaded from depinstall.toml."""

    packages_root: str
    toolset_package: str = "wget"
    retry: RetrySettings = Field(default_factory=RetrySettings)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "InstallerSettings":
        """
        Create InstallerSettings from a dictionary (loaded from TOML).

        Raises:
            ConfigurationException: If the settings are invalid
        """
        installer_section = config_dict.get("installer")
        if not isinstance(installer_section, dict):
            raise ConfigurationException("Missing [installer] section")

        try:
            return cls.model_validate(installer_section)
        except ValidationError as e:
            raise ConfigurationException(f"Invalid installer settings: {e}") from e


def load_settings(
    path: Union[str, os.PathLike], logger: Optional[DepInstallLogger] = None
) -> InstallerSettings:
    """
    Load installer settings from a TOML file. A directory is searched for
    depinstall.toml.

    Raises:
        ConfigurationException: If the file is missing, malformed or invalid
    """
    settings_path = pathlib.Path(path)
    if settings_path.is_dir():
        settings_path = settings_path / SETTINGS_FILE_NAME

    if not settings_path.is_file():
        raise ConfigurationException(f"Settings file not found: {settings_path}")

    try:
        with open(settings_path, "rb") as f:
            toml_dict = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationException(
            f"Failed to parse {settings_path}: {str(e)}"
        ) from e

    settings = InstallerSettings.from_dict(toml_dict)
    if logger is not None:
        logger.log(
            f"Loaded installer settings from {settings_path} "
            f"(packages_root={settings.packages_root}, retries={settings.retry.retries})",
            logging.INFO,
        )
    return settings
