"""
Common configuration settings used throughout the application.

This module contains globally shared settings and constants used across
SlimShift: logging format, program name, output folder naming and the
defaults that a user may override from an optional `config.user.yaml` file
at the project root. The file is only ever read, never written, so nothing
is persisted between runs.
"""
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

PROGRAM_NAME = "SlimShift"
PROGRAM_TAGLINE = "Cross-platform video converter"

# --- User-Defined Configuration ---
# Optional overrides loaded from 'config.user.yaml' next to the package.
# Recognised keys:
#
#   paths:
#     ffmpeg_dir: /opt/ffmpeg        # where ffmpeg/ffprobe live or get installed
#     output_dir: ~/Videos/SlimShift # where converted files are written
#   logging:
#     level: INFO
#   probe:
#     trial_run: false               # really run each encoder before listing it
#   network:
#     connect_timeout: 30            # seconds, download connect phase only

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

# The directory holding the ffmpeg and ffprobe executables. None means the
# default `<program dir>/ffmpeg` folder is used.
MODULE_PATH: Optional[Path] = None

# Where converted videos are written. None means the user's Videos folder
# (or Documents as a fallback) plus a `SlimShift` subfolder.
OUTPUT_DIR_OVERRIDE: Optional[Path] = None

# Default console log level. Kept at WARNING so log lines do not interleave
# with the interactive prompts; raise it with --log-level.
DEFAULT_LOG_LEVEL = "WARNING"

# Console log levels accepted from the command line and the user config.
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")

# When True, every encoder candidate is test-encoded before being offered.
PROBE_TRIAL_RUN = False

# Seconds allowed for establishing the download connection. Reading the
# response body is not time limited.
DOWNLOAD_CONNECT_TIMEOUT = 30.0


def load_user_config(config_path: Path = USER_CONFIG_PATH) -> Dict[str, Any]:
    """
    Reads the optional user configuration file.

    Args:
        config_path: Path of the YAML file to read.

    Returns:
        The parsed mapping, or an empty dict when the file is missing,
        empty or malformed. Malformed files are reported as a warning.
    """
    if not config_path.is_file():
        logger.debug(f"User config '{config_path}' not found. Using built-in defaults.")
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load or parse '{config_path}': {e}")
        return {}
    if not isinstance(user_config, dict):
        logger.warning(f"Ignoring '{config_path}': top level must be a mapping.")
        return {}
    return user_config


def validated_log_level(level: Any, fallback: str = DEFAULT_LOG_LEVEL) -> str:
    """
    Normalises a configured log level name.

    Returns:
        The upper-cased level if it is one of `LOG_LEVELS`, otherwise
        `fallback`. Unknown names are reported as a warning.
    """
    level_name = str(level).strip().upper()
    if level_name in LOG_LEVELS:
        return level_name
    logger.warning(
        f"Unknown logging.level '{level}' in '{USER_CONFIG_PATH}', using {fallback}. "
        f"Choose one of: {', '.join(LOG_LEVELS)}."
    )
    return fallback


_user_config = load_user_config()

_paths_config = _user_config.get("paths") or {}
if _paths_config.get("ffmpeg_dir"):
    MODULE_PATH = Path(_paths_config["ffmpeg_dir"]).expanduser()
if _paths_config.get("output_dir"):
    OUTPUT_DIR_OVERRIDE = Path(_paths_config["output_dir"]).expanduser()

_logging_config = _user_config.get("logging") or {}
if _logging_config.get("level"):
    DEFAULT_LOG_LEVEL = validated_log_level(_logging_config["level"])

_probe_config = _user_config.get("probe") or {}
PROBE_TRIAL_RUN = bool(_probe_config.get("trial_run", PROBE_TRIAL_RUN))

_network_config = _user_config.get("network") or {}
try:
    DOWNLOAD_CONNECT_TIMEOUT = float(
        _network_config.get("connect_timeout", DOWNLOAD_CONNECT_TIMEOUT)
    )
except (TypeError, ValueError):
    logger.warning(
        f"Invalid network.connect_timeout in '{USER_CONFIG_PATH}', using {DOWNLOAD_CONNECT_TIMEOUT}s."
    )


# --- Logging Configuration ---
# The format string for the Loguru logger.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# --- Directory and File Management ---
# Name of the toolchain folder created next to the program.
TOOLCHAIN_DIR_NAME = "ffmpeg"

# Default install directory for the toolchain.
DEFAULT_TOOLCHAIN_DIR = PROJECT_ROOT / TOOLCHAIN_DIR_NAME

# Subfolder of the user's Videos/Documents folder receiving all outputs.
OUTPUT_SUBFOLDER_NAME = PROGRAM_NAME


# --- Quality Rules ---
# CRF-equivalent bounds accepted at the prompt.
MIN_QUALITY = 0
MAX_QUALITY = 51

# Used when a codec family has no recommended value of its own.
GLOBAL_DEFAULT_QUALITY = 23
