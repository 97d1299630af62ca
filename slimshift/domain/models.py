"""
Core value types of the SlimShift application.

These types describe where the toolchain lives, which platform we run on and
what the user asked for. They hold no behaviour beyond simple validation, so
the services can pass them around freely.
"""
import platform
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ..config.common import MAX_QUALITY, MIN_QUALITY
from .exceptions import InvalidInputFileException, PlatformNotSupportedException


class OperatingSystem(Enum):
    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"


class Architecture(Enum):
    X64 = "x64"
    ARM64 = "arm64"


# platform.machine() spellings mapped to the architectures we ship builds for.
_MACHINE_ALIASES = {
    "x86_64": Architecture.X64,
    "amd64": Architecture.X64,
    "x64": Architecture.X64,
    "arm64": Architecture.ARM64,
    "aarch64": Architecture.ARM64,
    "armv8": Architecture.ARM64,
    "armv8l": Architecture.ARM64,
}


@dataclass(frozen=True)
class PlatformTarget:
    """The (operating system, architecture) pair the program runs on."""

    operating_system: OperatingSystem
    architecture: Architecture

    @property
    def is_windows(self) -> bool:
        return self.operating_system is OperatingSystem.WINDOWS

    @classmethod
    def detect(cls, sys_platform: str, machine: str) -> "PlatformTarget":
        """
        Maps raw `sys.platform` / `platform.machine()` values to a target.

        Raises:
            PlatformNotSupportedException: If either value is not recognised.
        """
        if sys_platform.startswith("win"):
            operating_system = OperatingSystem.WINDOWS
        elif sys_platform.startswith("linux"):
            operating_system = OperatingSystem.LINUX
        elif sys_platform == "darwin":
            operating_system = OperatingSystem.MACOS
        else:
            raise PlatformNotSupportedException(
                f"Platform {sys_platform}/{machine} is not supported."
            )

        architecture = _MACHINE_ALIASES.get(machine.lower())
        if architecture is None:
            raise PlatformNotSupportedException(
                f"Platform {sys_platform}/{machine} is not supported."
            )
        return cls(operating_system, architecture)

    @classmethod
    def current(cls) -> "PlatformTarget":
        return cls.detect(sys.platform, platform.machine())

    def __str__(self) -> str:
        return f"{self.operating_system.value}-{self.architecture.value}"


class ToolchainInstall:
    """
    On-disk location of the two binaries SlimShift drives.

    Attributes:
        install_dir (Path): Flat folder holding both executables.
        ffmpeg_path (Path): The transcoder executable.
        ffprobe_path (Path): The media inspection executable.
    """

    def __init__(self, install_dir: Path, ffmpeg_path: Path, ffprobe_path: Path):
        self.install_dir = install_dir
        self.ffmpeg_path = ffmpeg_path
        self.ffprobe_path = ffprobe_path

    def is_complete(self) -> bool:
        return self.ffmpeg_path.is_file() and self.ffprobe_path.is_file()

    def missing_binaries(self) -> list:
        return [p for p in (self.ffmpeg_path, self.ffprobe_path) if not p.is_file()]

    def __repr__(self) -> str:
        return f"ToolchainInstall(install_dir={str(self.install_dir)!r})"


class CodecFamily(Enum):
    """A video compression standard the user can pick from the menu."""

    H264 = "H.264"
    H265 = "H.265"
    VP9 = "VP9"
    AV1 = "AV1"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> Optional["CodecFamily"]:
        for family in cls:
            if family.value == label:
                return family
        return None


class EncoderKind(Enum):
    """Argument layout an encoder name is dispatched to."""

    H264 = "h264"
    H265 = "h265"
    VP9 = "vp9"
    AV1 = "av1"
    GENERIC = "generic"


@dataclass(frozen=True)
class EncoderSelection:
    family: CodecFamily
    encoder_name: str
    preset: str
    quality: int

    def __post_init__(self):
        if not MIN_QUALITY <= self.quality <= MAX_QUALITY:
            raise ValueError(
                f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {self.quality}."
            )
        if not self.encoder_name:
            raise ValueError("encoder_name cannot be empty.")


class ConversionJob:
    """
    Everything needed to run one conversion.

    Built inside a single workflow invocation and discarded afterwards.

    Raises:
        InvalidInputFileException: If the input file does not exist or the
            output folder is missing.
    """

    def __init__(
        self,
        input_path: Path,
        output_path: Path,
        selection: EncoderSelection,
        argument_fragment: str,
    ):
        if not input_path.is_file():
            raise InvalidInputFileException(f"Input file not found: {input_path}")
        if not output_path.parent.is_dir():
            raise InvalidInputFileException(
                f"Output folder does not exist: {output_path.parent}"
            )
        self.input_path = input_path.resolve()
        self.output_path = output_path
        self.selection = selection
        self.argument_fragment = argument_fragment

    def __repr__(self) -> str:
        return (
            f"ConversionJob(input={self.input_path.name!r}, output={self.output_path.name!r}, "
            f"encoder={self.selection.encoder_name!r})"
        )
