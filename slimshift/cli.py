"""
Command-Line Interface (CLI) setup for SlimShift.

SlimShift is driven through an interactive menu, so the command line only
carries a few optional settings that override the defaults from
`config.user.yaml`.
"""
import argparse
from pathlib import Path
from typing import Optional, Sequence

from .config.common import DEFAULT_LOG_LEVEL, LOG_LEVELS, PROBE_TRIAL_RUN


def get_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for SlimShift.

    Args:
        argv: Arguments to parse; defaults to `sys.argv[1:]`.

    Returns:
        argparse.Namespace: The parsed options as attributes.
    """
    parser = argparse.ArgumentParser(
        prog="slimshift",
        description="Interactive video converter driving a local FFmpeg.",
    )
    parser.add_argument(
        "--log-level", type=str.upper, default=DEFAULT_LOG_LEVEL, choices=LOG_LEVELS,
        help="Console log level (default: %(default)s).",
    )
    parser.add_argument(
        "--trial-probe", action="store_true", default=PROBE_TRIAL_RUN,
        help="Test-encode every encoder candidate before offering it (slower, more accurate).",
    )
    parser.add_argument(
        "--ffmpeg-dir", type=str, default=None,
        help="Folder holding (or receiving) the ffmpeg and ffprobe executables.",
    )

    args = parser.parse_args(argv)

    if args.ffmpeg_dir:
        ffmpeg_dir = Path(args.ffmpeg_dir).expanduser()
        if ffmpeg_dir.exists() and not ffmpeg_dir.is_dir():
            parser.error(f"--ffmpeg-dir '{args.ffmpeg_dir}' exists but is not a directory.")
        args.ffmpeg_dir = ffmpeg_dir.resolve()

    return args
