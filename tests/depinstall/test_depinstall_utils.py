"""
Tests for platform detection and package path derivation.
"""

import os

import pytest

from depinstall.depinstall_exceptions import ConfigurationException, DepInstallException
from depinstall.depinstall_utils import (
    Architecture,
    PathUtils,
    PlatformFamily,
    PlatformId,
    PlatformUtils,
)
from depinstall.dependency_models import ArchiveType


class TestPathUtils:
    """Tests for PathUtils."""

    @pytest.fixture
    def packages_root(self):
        return os.path.join(os.sep, "packages")

    def test_derive_paths_for_tar_gz(self, packages_root):
        download_path, extraction_path = PathUtils.derive_paths(
            "https://any.company.com/packages/any-package.1.0.0.tar.gz", packages_root
        )

        assert download_path == os.path.join(packages_root, "any-package.1.0.0.tar.gz")
        assert extraction_path == os.path.join(packages_root, "any-package.1.0.0")

    def test_derive_paths_is_deterministic(self, packages_root):
        uri = "https://any.company.com/packages/any-package.1.0.0.tar.gz"
        assert PathUtils.derive_paths(uri, packages_root) == PathUtils.derive_paths(
            uri, packages_root
        )

    def test_extraction_path_is_a_sibling_of_the_download(self, packages_root):
        download_path, extraction_path = PathUtils.derive_paths(
            "https://any.company.com/tools/tool-2.zip", packages_root
        )

        assert os.path.dirname(download_path) == os.path.dirname(extraction_path)
        assert extraction_path == os.path.join(packages_root, "tool-2")

    def test_query_string_and_fragment_are_ignored(self, packages_root):
        download_path, extraction_path = PathUtils.derive_paths(
            "https://any.company.com/a/pkg-1.2.tgz?sig=abc123#top", packages_root
        )

        assert download_path == os.path.join(packages_root, "pkg-1.2.tgz")
        assert extraction_path == os.path.join(packages_root, "pkg-1.2")

    @pytest.mark.parametrize(
        "file_name,expected",
        [
            ("any-package.1.0.0.tar.gz", "any-package.1.0.0"),
            ("any-package.1.0.0.TAR.GZ", "any-package.1.0.0"),
            ("pkg.tgz", "pkg"),
            ("pkg.tar.bz2", "pkg"),
            ("pkg.tar.xz", "pkg"),
            ("pkg.zip", "pkg"),
            ("pkg.tar", "pkg"),
            ("pkg.gz", "pkg"),
            ("pkg-1.0.7z", "pkg-1.0"),
        ],
    )
    def test_strip_archive_suffix(self, file_name, expected):
        assert PathUtils.strip_archive_suffix(file_name) == expected

    @pytest.mark.parametrize(
        "file_name,expected",
        [
            ("pkg.tar.gz", ArchiveType.TAR_GZ),
            ("pkg.tgz", ArchiveType.TAR_GZ),
            ("pkg.tbz2", ArchiveType.TAR_BZ2),
            ("pkg.txz", ArchiveType.TAR_XZ),
            ("pkg.Zip", ArchiveType.ZIP),
            ("pkg.tar", ArchiveType.TAR),
            ("pkg.gz", ArchiveType.GZ),
            ("pkg.7z", None),
        ],
    )
    def test_get_archive_type(self, file_name, expected):
        assert PathUtils.get_archive_type(file_name) == expected

    def test_uri_without_file_name_is_rejected(self, packages_root):
        with pytest.raises(ConfigurationException):
            PathUtils.derive_paths("https://any.company.com/packages/", packages_root)

    def test_uri_without_extension_is_rejected(self, packages_root):
        with pytest.raises(ConfigurationException):
            PathUtils.derive_paths("https://any.company.com/packages/README", packages_root)


class TestPlatformUtils:
    """Tests for PlatformUtils."""

    @pytest.mark.parametrize(
        "system,expected",
        [
            ("Linux", PlatformFamily.UNIX),
            ("Darwin", PlatformFamily.UNIX),
            ("Windows", PlatformFamily.WIN32NT),
        ],
    )
    def test_get_platform_family(self, monkeypatch, system, expected):
        monkeypatch.setattr("platform.system", lambda: system)
        assert PlatformUtils.get_platform_family() == expected

    def test_unknown_platform_raises(self, monkeypatch):
        monkeypatch.setattr("platform.system", lambda: "Plan9")
        with pytest.raises(DepInstallException):
            PlatformUtils.get_platform_family()

    @pytest.mark.parametrize(
        "machine,expected",
        [
            ("x86_64", Architecture.X64),
            ("AMD64", Architecture.X64),
            ("aarch64", Architecture.ARM64),
            ("arm64", Architecture.ARM64),
        ],
    )
    def test_get_architecture(self, monkeypatch, machine, expected):
        monkeypatch.setattr("platform.machine", lambda: machine)
        assert PlatformUtils.get_architecture() == expected

    def test_unknown_architecture_raises(self, monkeypatch):
        monkeypatch.setattr("platform.machine", lambda: "riscv64")
        with pytest.raises(DepInstallException):
            PlatformUtils.get_architecture()

    @pytest.mark.parametrize(
        "platform_family,architecture,expected",
        [
            (PlatformFamily.UNIX, Architecture.X64, PlatformId.LINUX_x64),
            (PlatformFamily.UNIX, Architecture.ARM64, PlatformId.LINUX_arm64),
            (PlatformFamily.WIN32NT, Architecture.X64, PlatformId.WIN_x64),
            (PlatformFamily.WIN32NT, Architecture.ARM64, PlatformId.WIN_arm64),
        ],
    )
    def test_get_platform_id(self, platform_family, architecture, expected):
        assert PlatformUtils.get_platform_id(platform_family, architecture) == expected
