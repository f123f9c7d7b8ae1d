"""
Tests for toolset selection and resolution.
"""

import os

import pytest

from depinstall.depinstall_exceptions import DependencyException, ErrorReason
from depinstall.depinstall_logger import DepInstallLogger
from depinstall.depinstall_utils import Architecture, PlatformFamily
from depinstall.dependency_models import DependencyPath
from depinstall.installation.toolset import (
    TOOLSET_BINARIES,
    ToolsetResolver,
    get_toolset_executable,
    select_toolset,
)
from tests.test_utils import FakePackageManager


@pytest.mark.parametrize("platform", list(PlatformFamily))
@pytest.mark.parametrize("architecture", list(Architecture))
def test_selection_depends_only_on_the_platform(platform, architecture):
    binary = select_toolset(platform, architecture)

    assert binary in ("wget", "wget2")
    assert binary == select_toolset(platform)


def test_unix_and_windows_use_different_binaries():
    assert select_toolset(PlatformFamily.UNIX) == "wget2"
    assert select_toolset(PlatformFamily.WIN32NT) == "wget"
    assert set(TOOLSET_BINARIES) == set(PlatformFamily)


def test_unsupported_platform_is_a_programming_error():
    with pytest.raises(KeyError):
        select_toolset("Xbox")


def test_executable_lives_in_the_platform_folder():
    toolset = DependencyPath(name="wget", path=os.path.join(os.sep, "packages", "wget"))

    assert get_toolset_executable(toolset, PlatformFamily.WIN32NT, Architecture.ARM64) == (
        os.path.join(os.sep, "packages", "wget", "win-arm64", "wget")
    )


@pytest.mark.asyncio
async def test_resolver_returns_the_registered_toolset():
    package_manager = FakePackageManager()
    wget = DependencyPath(name="wget", path="/packages/wget")
    package_manager.on_get_package("wget", wget)

    resolver = ToolsetResolver(package_manager, DepInstallLogger())

    assert await resolver.resolve("wget") == wget


@pytest.mark.asyncio
async def test_resolver_fails_when_the_toolset_is_missing():
    resolver = ToolsetResolver(FakePackageManager(), DepInstallLogger())

    with pytest.raises(DependencyException) as error:
        await resolver.resolve("wget")

    assert error.value.reason == ErrorReason.DEPENDENCY_NOT_FOUND
    assert error.value.is_permanent
    assert error.value.message.startswith("Missing required package.")
    assert "'wget'" in error.value.message
