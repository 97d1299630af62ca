"""
Configuration settings for acquiring the FFmpeg toolchain.

Download locations are fixed per (operating system, architecture) pair.
Windows and Linux builds come from the BtbN FFmpeg-Builds releases, which ship
one archive with an `ffmpeg-*/bin/` folder. macOS builds come from
evermeet.cx, which ships ffmpeg and ffprobe as two separate flat zips.
"""
from types import MappingProxyType

from ..domain.models import Architecture, OperatingSystem

BTBN_RELEASE_BASE = "https://github.com/BtbN/FFmpeg-Builds/releases/download/latest"
EVERMEET_BASE = "https://evermeet.cx/ffmpeg"

DOWNLOAD_URLS = MappingProxyType(
    {
        (OperatingSystem.WINDOWS, Architecture.X64): (
            f"{BTBN_RELEASE_BASE}/ffmpeg-master-latest-win64-gpl.zip",
        ),
        (OperatingSystem.WINDOWS, Architecture.ARM64): (
            f"{BTBN_RELEASE_BASE}/ffmpeg-master-latest-winarm64-gpl.zip",
        ),
        (OperatingSystem.LINUX, Architecture.X64): (
            f"{BTBN_RELEASE_BASE}/ffmpeg-master-latest-linux64-gpl.tar.xz",
        ),
        (OperatingSystem.LINUX, Architecture.ARM64): (
            f"{BTBN_RELEASE_BASE}/ffmpeg-master-latest-linuxarm64-gpl.tar.xz",
        ),
        (OperatingSystem.MACOS, Architecture.X64): (
            f"{EVERMEET_BASE}/getrelease/zip",
            f"{EVERMEET_BASE}/getrelease/ffprobe/zip",
        ),
        (OperatingSystem.MACOS, Architecture.ARM64): (
            f"{EVERMEET_BASE}/getrelease/zip",
            f"{EVERMEET_BASE}/getrelease/ffprobe/zip",
        ),
    }
)

# Glob for the top-level folder inside BtbN archives, and its binaries folder.
EXTRACTED_DIR_PATTERN = "ffmpeg-*"
EXTRACTED_BIN_DIR = "bin"

# Chunk size used when streaming the archive to disk.
DOWNLOAD_CHUNK_SIZE = 81920

# Archive name used when the URL path carries no usable file name
# (evermeet URLs end in "/zip").
DEFAULT_ARCHIVE_NAME = "toolchain-download-{index}.zip"
ARCHIVE_SUFFIXES = (".zip", ".tar.xz")
