"""
This module provides the ToolchainLocator class, which finds the FFmpeg
binaries SlimShift depends on and checks that they actually run.
"""
from pathlib import Path
from typing import Callable, Optional, Tuple

from loguru import logger

from ..config.common import DEFAULT_TOOLCHAIN_DIR, MODULE_PATH
from ..domain.exceptions import ToolchainException
from ..domain.models import PlatformTarget, ToolchainInstall
from ..utils.process_utils import run_cmd


def executable_names(platform_target: PlatformTarget) -> Tuple[str, str]:
    """Returns the (ffmpeg, ffprobe) file names for the given platform."""
    if platform_target.is_windows:
        return "ffmpeg.exe", "ffprobe.exe"
    return "ffmpeg", "ffprobe"


class ToolchainLocator:
    """
    Resolves where the FFmpeg toolchain lives on disk.

    The install directory is the `ffmpeg` folder next to the program, unless
    the user configured `paths.ffmpeg_dir` or passed `--ffmpeg-dir`.
    Locating never modifies the filesystem.
    """

    def __init__(
        self,
        platform_target: PlatformTarget,
        install_dir: Optional[Path] = None,
    ):
        self.platform_target = platform_target
        self.install_dir = (install_dir or MODULE_PATH or DEFAULT_TOOLCHAIN_DIR).resolve()

    def locate(self) -> ToolchainInstall:
        """
        Computes the expected binary paths and reports what exists.

        Returns:
            A `ToolchainInstall` describing the expected location. Use
            `is_complete()` on it to learn whether a fetch is needed.
        """
        ffmpeg_name, ffprobe_name = executable_names(self.platform_target)
        install = ToolchainInstall(
            install_dir=self.install_dir,
            ffmpeg_path=self.install_dir / ffmpeg_name,
            ffprobe_path=self.install_dir / ffprobe_name,
        )
        if install.is_complete():
            logger.debug(f"FFmpeg binaries found in '{self.install_dir}'.")
        else:
            missing = ", ".join(p.name for p in install.missing_binaries())
            logger.info(f"FFmpeg binaries missing from '{self.install_dir}': {missing}")
        return install

    @staticmethod
    def verify(install: ToolchainInstall) -> str:
        """
        Verifies that the located FFmpeg can be executed.

        Runs `ffmpeg -version` and logs the first line of its output.

        Returns:
            The first line of the version output.

        Raises:
            ToolchainException: If the binary cannot be started or fails.
        """
        result = run_cmd([str(install.ffmpeg_path), "-version"])
        if result is None:
            raise ToolchainException(f"FFmpeg at '{install.ffmpeg_path}' could not be started.")
        if result.returncode != 0:
            raise ToolchainException(
                f"FFmpeg version check failed (return code {result.returncode}): {result.stderr.strip()}"
            )
        version_lines = result.stdout.splitlines()
        version_line = version_lines[0] if version_lines else "unknown version"
        logger.info(f"FFmpeg version check successful: {version_line}")
        return version_line


def ensure_toolchain(
    locator: ToolchainLocator,
    fetch: Callable[[Path], ToolchainInstall],
) -> ToolchainInstall:
    """
    Makes sure both binaries exist, fetching them when they do not.

    Args:
        locator: Resolves the install directory and binary names.
        fetch: Installs the toolchain into a directory, typically
               `ToolchainFetcher.fetch`. Only called when a binary is missing.

    Returns:
        The verified `ToolchainInstall`.

    Raises:
        ToolchainException: If fetching or verification fails.
    """
    install = locator.locate()
    if not install.is_complete():
        install.install_dir.mkdir(parents=True, exist_ok=True)
        install = fetch(install.install_dir)
    locator.verify(install)
    return install
