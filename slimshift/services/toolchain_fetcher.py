"""
This module provides the ToolchainFetcher class, which downloads and installs
an FFmpeg build for the running platform.

The install procedure is linear: pick the download URL(s) for the platform,
stream each archive into the install directory, unpack it, move `ffmpeg` and
`ffprobe` up into the flat install directory, mark them executable and
finally delete the archives. Any failure along the way is reported as a
single `ToolchainFetchException`; files already unpacked are left in place.
"""
import shutil
import zipfile
from pathlib import Path
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlparse

import httpx
from loguru import logger

from ..config.common import DOWNLOAD_CONNECT_TIMEOUT
from ..config.toolchain import (
    ARCHIVE_SUFFIXES,
    DEFAULT_ARCHIVE_NAME,
    DOWNLOAD_CHUNK_SIZE,
    DOWNLOAD_URLS,
    EXTRACTED_BIN_DIR,
    EXTRACTED_DIR_PATTERN,
)
from ..domain.exceptions import PlatformNotSupportedException, ToolchainFetchException
from ..domain.models import PlatformTarget, ToolchainInstall
from ..utils.format_utils import formatted_size
from ..utils.process_utils import run_cmd
from .toolchain_locator import executable_names

# Called with (bytes received so far, total bytes or None when unknown).
ProgressCallback = Callable[[int, Optional[int]], None]


def select_download_url(platform_target: PlatformTarget) -> Tuple[str, ...]:
    """
    Returns the archive URL(s) to fetch for a platform.

    Most platforms need a single archive holding both binaries; macOS builds
    ship ffmpeg and ffprobe separately, so two URLs are returned there.

    Raises:
        PlatformNotSupportedException: If no build is known for the pair.
    """
    key = (platform_target.operating_system, platform_target.architecture)
    urls = DOWNLOAD_URLS.get(key)
    if not urls:
        raise PlatformNotSupportedException(f"Platform {platform_target} is not supported.")
    return urls


def archive_name_for(url: str, index: int = 0) -> str:
    """Picks the local file name for a downloaded archive."""
    name = Path(urlparse(url).path).name
    if name.lower().endswith(ARCHIVE_SUFFIXES):
        return name
    return DEFAULT_ARCHIVE_NAME.format(index=index)


class ToolchainFetcher:
    """
    Downloads and installs the FFmpeg toolchain for one platform.

    Attributes:
        platform_target (PlatformTarget): The platform to fetch a build for.
        progress_callback (ProgressCallback | None): Receives download progress.
    """

    def __init__(
        self,
        platform_target: PlatformTarget,
        client: Optional[httpx.Client] = None,
        progress_callback: Optional[ProgressCallback] = None,
        connect_timeout: float = DOWNLOAD_CONNECT_TIMEOUT,
    ):
        self.platform_target = platform_target
        self.progress_callback = progress_callback
        self._client = client
        self._owns_client = client is None
        self._connect_timeout = connect_timeout

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client. Only the connect phase is time limited."""
        if self._client is None:
            self._client = httpx.Client(
                follow_redirects=True,
                timeout=httpx.Timeout(None, connect=self._connect_timeout),
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def fetch(self, install_dir: Path) -> ToolchainInstall:
        """
        Downloads, unpacks and installs ffmpeg and ffprobe into `install_dir`.

        Args:
            install_dir: The flat folder that should end up holding both binaries.

        Returns:
            The populated `ToolchainInstall`.

        Raises:
            PlatformNotSupportedException: Before any network access, if the
                platform has no known build.
            ToolchainFetchException: If any download or install step fails.
        """
        urls = select_download_url(self.platform_target)
        ffmpeg_name, ffprobe_name = executable_names(self.platform_target)
        install_dir.mkdir(parents=True, exist_ok=True)
        install = ToolchainInstall(
            install_dir=install_dir,
            ffmpeg_path=install_dir / ffmpeg_name,
            ffprobe_path=install_dir / ffprobe_name,
        )

        archives: List[Path] = []
        try:
            for index, url in enumerate(urls):
                archive_path = install_dir / archive_name_for(url, index)
                self.download(url, archive_path)
                archives.append(archive_path)
                self.extract(archive_path, install_dir)
                self.relocate_binaries(install_dir, (ffmpeg_name, ffprobe_name))

            missing = install.missing_binaries()
            if missing:
                raise ToolchainFetchException(
                    f"Downloaded archive did not contain {', '.join(p.name for p in missing)} "
                    f"(expected an '{EXTRACTED_DIR_PATTERN}/{EXTRACTED_BIN_DIR}' folder)."
                )

            if not self.platform_target.is_windows:
                for binary in (install.ffmpeg_path, install.ffprobe_path):
                    self.set_execute_permission(binary)

            for archive_path in archives:
                archive_path.unlink(missing_ok=True)
        except ToolchainFetchException:
            raise
        except (httpx.HTTPError, OSError, zipfile.BadZipFile) as e:
            raise ToolchainFetchException(f"Failed to install FFmpeg: {e}") from e
        finally:
            self.close()

        logger.info(f"FFmpeg installed into '{install_dir}'.")
        return install

    def download(self, url: str, archive_path: Path) -> None:
        """
        Streams `url` into `archive_path`, reporting progress per chunk.

        The total size comes from the Content-Length header; when the server
        omits it the callback receives None as the total.
        """
        logger.info(f"Downloading FFmpeg from {url}")
        client = self._get_client()
        received = 0
        with client.stream("GET", url) as response:
            response.raise_for_status()
            content_length = response.headers.get("Content-Length")
            total = int(content_length) if content_length and content_length.isdigit() else None
            if total == 0:
                total = None
            with archive_path.open("wb") as archive_file:
                for chunk in response.iter_bytes(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    archive_file.write(chunk)
                    received += len(chunk)
                    if self.progress_callback is not None:
                        self.progress_callback(received, total)
        logger.info(f"Downloaded {formatted_size(received)} to '{archive_path.name}'.")

    @staticmethod
    def extract(archive_path: Path, extract_dir: Path) -> None:
        """
        Unpacks an archive into `extract_dir`.

        Zip archives are unpacked with `zipfile`; `.tar.xz` archives are
        handed to the system `tar`.

        Raises:
            ToolchainFetchException: On an unknown format or a failing `tar`.
        """
        logger.info(f"Extracting '{archive_path.name}'...")
        name = archive_path.name.lower()
        if name.endswith(".zip"):
            with zipfile.ZipFile(archive_path) as zf:
                zf.extractall(extract_dir)
        elif name.endswith(".tar.xz"):
            result = run_cmd(
                ["tar", "-xf", str(archive_path), "-C", str(extract_dir)], show_cmd=True
            )
            if result is None or result.returncode != 0:
                stderr = result.stderr.strip() if result is not None else "tar could not be started"
                raise ToolchainFetchException(f"Extracting '{archive_path.name}' failed: {stderr}")
        else:
            raise ToolchainFetchException(f"Unsupported archive format: '{archive_path.name}'")

    @staticmethod
    def relocate_binaries(install_dir: Path, binary_names: Tuple[str, str]) -> None:
        """
        Moves the wanted binaries from `ffmpeg-*/bin/` up into `install_dir`.

        Everything else that was extracted into the matched folder is deleted
        with it. Archives that already unpack flat (the binaries at the top
        level) have no such folder and are left untouched.
        """
        extracted_dirs = sorted(p for p in install_dir.glob(EXTRACTED_DIR_PATTERN) if p.is_dir())
        if not extracted_dirs:
            logger.debug(f"No '{EXTRACTED_DIR_PATTERN}' folder in '{install_dir}', assuming a flat archive.")
            return

        extracted_dir = extracted_dirs[0]
        bin_dir = extracted_dir / EXTRACTED_BIN_DIR
        if bin_dir.is_dir():
            for binary_name in binary_names:
                source = bin_dir / binary_name
                if source.is_file():
                    source.replace(install_dir / binary_name)
                    logger.debug(f"Moved '{binary_name}' into '{install_dir}'.")
        else:
            logger.warning(f"'{extracted_dir.name}' has no '{EXTRACTED_BIN_DIR}' folder.")
        shutil.rmtree(extracted_dir)

    @staticmethod
    def set_execute_permission(file_path: Path) -> None:
        """Marks a binary executable with the system `chmod`."""
        result = run_cmd(["chmod", "+x", str(file_path)])
        if result is None or result.returncode != 0:
            stderr = result.stderr.strip() if result is not None else "chmod could not be started"
            raise ToolchainFetchException(f"Could not mark '{file_path.name}' executable: {stderr}")
