"""Unit tests for locating and verifying the FFmpeg toolchain."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from slimshift.domain.exceptions import PlatformNotSupportedException, ToolchainException
from slimshift.domain.models import (
    Architecture,
    OperatingSystem,
    PlatformTarget,
    ToolchainInstall,
)
from slimshift.services.toolchain_locator import (
    ToolchainLocator,
    ensure_toolchain,
    executable_names,
)

LINUX_X64 = PlatformTarget(OperatingSystem.LINUX, Architecture.X64)
WINDOWS_X64 = PlatformTarget(OperatingSystem.WINDOWS, Architecture.X64)


class TestPlatformTarget:
    """Tests for platform detection."""

    @pytest.mark.parametrize(
        "sys_platform,machine,expected",
        [
            ("win32", "AMD64", PlatformTarget(OperatingSystem.WINDOWS, Architecture.X64)),
            ("win32", "ARM64", PlatformTarget(OperatingSystem.WINDOWS, Architecture.ARM64)),
            ("linux", "x86_64", PlatformTarget(OperatingSystem.LINUX, Architecture.X64)),
            ("linux", "aarch64", PlatformTarget(OperatingSystem.LINUX, Architecture.ARM64)),
            ("darwin", "arm64", PlatformTarget(OperatingSystem.MACOS, Architecture.ARM64)),
            ("darwin", "x86_64", PlatformTarget(OperatingSystem.MACOS, Architecture.X64)),
        ],
    )
    def test_detect_supported(self, sys_platform, machine, expected):
        """Test raw platform values map to targets."""
        assert PlatformTarget.detect(sys_platform, machine) == expected

    @pytest.mark.parametrize(
        "sys_platform,machine",
        [("freebsd13", "amd64"), ("sunos5", "x86_64"), ("linux", "riscv64"), ("linux", "i686")],
    )
    def test_detect_unsupported(self, sys_platform, machine):
        """Test unknown OS or architecture is rejected."""
        with pytest.raises(PlatformNotSupportedException):
            PlatformTarget.detect(sys_platform, machine)


class TestExecutableNames:
    """Tests for per-platform binary names."""

    def test_windows_names(self):
        """Test Windows binaries carry the .exe suffix."""
        assert executable_names(WINDOWS_X64) == ("ffmpeg.exe", "ffprobe.exe")

    def test_posix_names(self):
        """Test other platforms use bare names."""
        assert executable_names(LINUX_X64) == ("ffmpeg", "ffprobe")


class TestLocate:
    """Tests for ToolchainLocator.locate."""

    def test_reports_missing(self, install_dir: Path):
        """Test an empty install dir is reported incomplete."""
        install = ToolchainLocator(LINUX_X64, install_dir=install_dir).locate()

        assert install.install_dir == install_dir.resolve()
        assert install.ffmpeg_path.name == "ffmpeg"
        assert not install.is_complete()
        assert {p.name for p in install.missing_binaries()} == {"ffmpeg", "ffprobe"}

    def test_reports_complete(self, fake_install: ToolchainInstall):
        """Test both binaries present means complete."""
        install = ToolchainLocator(LINUX_X64, install_dir=fake_install.install_dir).locate()

        assert install.is_complete()

    def test_one_binary_is_not_enough(self, install_dir: Path):
        """Test a lone ffmpeg still needs a fetch."""
        (install_dir / "ffmpeg").touch()

        install = ToolchainLocator(LINUX_X64, install_dir=install_dir).locate()

        assert not install.is_complete()
        assert [p.name for p in install.missing_binaries()] == ["ffprobe"]


class TestVerify:
    """Tests for the ffmpeg -version check."""

    @patch("slimshift.services.toolchain_locator.run_cmd")
    def test_returns_first_line(self, mock_run_cmd, fake_install):
        """Test the version line is returned."""
        mock_run_cmd.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="ffmpeg version 7.1 Copyright\nbuilt with gcc\n", stderr=""
        )

        assert ToolchainLocator.verify(fake_install) == "ffmpeg version 7.1 Copyright"
        mock_run_cmd.assert_called_once_with([str(fake_install.ffmpeg_path), "-version"])

    @patch("slimshift.services.toolchain_locator.run_cmd")
    def test_unstartable_binary(self, mock_run_cmd, fake_install):
        """Test a binary that cannot start is a toolchain error."""
        mock_run_cmd.return_value = None

        with pytest.raises(ToolchainException):
            ToolchainLocator.verify(fake_install)

    @patch("slimshift.services.toolchain_locator.run_cmd")
    def test_failing_binary(self, mock_run_cmd, fake_install):
        """Test a non-zero exit is a toolchain error."""
        mock_run_cmd.return_value = subprocess.CompletedProcess(
            args=[], returncode=1, stdout="", stderr="exec format error"
        )

        with pytest.raises(ToolchainException, match="exec format error"):
            ToolchainLocator.verify(fake_install)


class TestEnsureToolchain:
    """Tests for the locate, fetch and verify sequence."""

    def test_present_binaries_skip_fetch(self, fake_install):
        """Test no download is attempted when both binaries exist."""
        locator = ToolchainLocator(LINUX_X64, install_dir=fake_install.install_dir)
        fetch = MagicMock()

        with patch.object(ToolchainLocator, "verify") as mock_verify:
            install = ensure_toolchain(locator, fetch)

        fetch.assert_not_called()
        mock_verify.assert_called_once()
        assert install.is_complete()

    def test_missing_binaries_fetch(self, tmp_path: Path):
        """Test a missing toolchain is fetched into the install dir, then verified."""
        install_dir = tmp_path / "not-yet-created"
        locator = ToolchainLocator(LINUX_X64, install_dir=install_dir)
        fetched = ToolchainInstall(install_dir, install_dir / "ffmpeg", install_dir / "ffprobe")
        fetch = MagicMock(return_value=fetched)

        with patch.object(ToolchainLocator, "verify") as mock_verify:
            install = ensure_toolchain(locator, fetch)

        fetch.assert_called_once_with(install_dir.resolve())
        assert install_dir.is_dir()
        mock_verify.assert_called_once_with(fetched)
        assert install is fetched

    def test_fetch_failure_propagates(self, install_dir: Path):
        """Test fetch errors reach the caller and skip verification."""
        locator = ToolchainLocator(LINUX_X64, install_dir=install_dir)
        fetch = MagicMock(side_effect=ToolchainException("network down"))

        with patch.object(ToolchainLocator, "verify") as mock_verify:
            with pytest.raises(ToolchainException, match="network down"):
                ensure_toolchain(locator, fetch)

        mock_verify.assert_not_called()
