"""
Runs a conversion job through FFmpeg and reports its progress.

FFmpeg is started with `-progress pipe:1`, which makes it print `key=value`
blocks on stdout while it encodes. The encoded position (`out_time_us`) is
divided by the input duration, read beforehand with ffprobe, to get a
percentage that is handed to a progress callback. When ffprobe cannot tell
the duration, the callback gets None once and then 100 at the end. The
process is waited on without a timeout.
"""
import shlex
import subprocess
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional

import ffmpeg
from loguru import logger

from ..config.common import OUTPUT_DIR_OVERRIDE, OUTPUT_SUBFOLDER_NAME
from ..domain.exceptions import ConversionFailedException
from ..domain.models import ConversionJob, ToolchainInstall
from ..utils.platform_utils import user_media_folder
from ..utils.process_utils import format_cmd

# Called with the completed percentage (0-100), or None while it is unknown.
EncodeProgressCallback = Callable[[Optional[float]], None]

# Number of stderr lines kept for error reports.
STDERR_TAIL_LINES = 15

ENCODER_MISSING_MARKERS = ("Unknown encoder", "Encoder not found")
INVALID_INPUT_MARKERS = ("Invalid", "failed")


def failure_hint(message: str, encoder_name: str) -> Optional[str]:
    """
    Picks a more specific hint for a failed conversion from its error text.

    Returns:
        The hint to show below the error, or None if nothing matches.
    """
    if any(marker in message for marker in ENCODER_MISSING_MARKERS):
        return (
            f"The encoder '{encoder_name}' is not available on your system. "
            "Try selecting a different encoder or install required drivers."
        )
    if any(marker in message for marker in INVALID_INPUT_MARKERS):
        return "Check that your input file is a valid video file."
    return None


def parse_progress_line(line: str, duration_seconds: Optional[float]) -> Optional[float]:
    """
    Turns one line of FFmpeg `-progress` output into a percentage.

    Args:
        line: A `key=value` line, e.g. "out_time_us=1500000".
        duration_seconds: Input duration; without it only `progress=end` is
                          meaningful.

    Returns:
        The completed percentage clamped to [0, 100], or None when the line
        carries no usable position.
    """
    key, sep, value = line.strip().partition("=")
    if not sep:
        return None
    if key == "progress":
        return 100.0 if value == "end" else None
    # out_time_ms is misnamed by FFmpeg and is also in microseconds.
    if key not in ("out_time_us", "out_time_ms") or not duration_seconds:
        return None
    try:
        position_seconds = int(value) / 1_000_000
    except ValueError:
        return None
    percent = position_seconds / duration_seconds * 100
    return max(0.0, min(100.0, percent))


def prepare_output_folder(override: Optional[Path] = OUTPUT_DIR_OVERRIDE) -> Path:
    """
    Returns the folder converted videos are written to, creating it if needed.

    Defaults to `<Videos>/SlimShift`, or `<Documents>/SlimShift` when the
    user has no Videos folder.
    """
    folder = override if override is not None else user_media_folder() / OUTPUT_SUBFOLDER_NAME
    folder.mkdir(parents=True, exist_ok=True)
    return folder


class ConversionResult:
    """Outcome of a finished conversion."""

    def __init__(self, output_path: Path, elapsed: timedelta):
        self.output_path = output_path
        self.elapsed = elapsed
        self.output_size = output_path.stat().st_size if output_path.exists() else 0


class ConversionService:
    """
    Drives the FFmpeg process for conversion jobs.

    Attributes:
        install (ToolchainInstall): Provides the ffmpeg and ffprobe paths.
    """

    def __init__(self, install: ToolchainInstall):
        self.install = install

    def probe_duration(self, input_path: Path) -> Optional[float]:
        """Reads the container duration in seconds, or None when ffprobe cannot tell."""
        try:
            info = ffmpeg.probe(str(input_path), cmd=str(self.install.ffprobe_path))
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
            logger.warning(f"ffprobe failed for '{input_path.name}': {stderr.strip()[-300:]}")
            return None
        except OSError as e:
            logger.warning(f"ffprobe could not be started: {e}")
            return None

        duration = (info.get("format") or {}).get("duration")
        try:
            return float(duration) if duration is not None else None
        except (TypeError, ValueError):
            logger.debug(f"Unparseable duration '{duration}' for '{input_path.name}'.")
            return None

    def build_command(self, job: ConversionJob) -> List[str]:
        """
        Returns the full FFmpeg command for a job.

        The output is always overwritten; the user already confirmed that
        when picking the output name.
        """
        return [
            str(self.install.ffmpeg_path),
            "-hide_banner",
            "-loglevel", "error",
            "-y",
            "-i", str(job.input_path),
            *shlex.split(job.argument_fragment),
            "-threads", "0",
            "-progress", "pipe:1",
            "-nostats",
            str(job.output_path),
        ]

    def run(
        self,
        job: ConversionJob,
        progress_callback: Optional[EncodeProgressCallback] = None,
    ) -> ConversionResult:
        """
        Encodes `job` and blocks until FFmpeg exits.

        Raises:
            ConversionFailedException: If FFmpeg cannot be started or exits
                with a non-zero status.
        """
        duration = self.probe_duration(job.input_path)
        cmd = self.build_command(job)
        logger.info(f"Starting conversion: {format_cmd(cmd)}")

        if duration is None and progress_callback is not None:
            progress_callback(None)
        started = datetime.now()
        # stderr goes to a file so a chatty FFmpeg can never block on a full pipe
        # while we are reading progress from stdout.
        with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as stderr_file:
            try:
                process = subprocess.Popen(
                    cmd,
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                    stdin=subprocess.DEVNULL,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                )
            except OSError as e:
                raise ConversionFailedException(f"Could not start FFmpeg: {e}") from e

            with process:
                for line in process.stdout:
                    percent = parse_progress_line(line, duration)
                    if percent is not None and progress_callback is not None:
                        progress_callback(percent)
                returncode = process.wait()

            stderr_file.seek(0)
            stderr_tail = "\n".join(stderr_file.read().strip().splitlines()[-STDERR_TAIL_LINES:])

        if returncode != 0:
            logger.error(f"FFmpeg exited with code {returncode} for '{job.input_path.name}'.")
            raise ConversionFailedException(
                f"FFmpeg exited with code {returncode}", stderr_tail=stderr_tail
            )

        if progress_callback is not None:
            progress_callback(100.0)
        result = ConversionResult(job.output_path, datetime.now() - started)
        logger.info(f"Conversion finished: '{job.output_path}' in {result.elapsed}.")
        return result
