"""
This module provides a helper for running short-lived external commands.

It wraps `subprocess.run` with logging and consistent error handling. It is
used for the helper processes SlimShift spawns outside of the main encode:
`tar` for unpacking archives, `chmod` for permission fixups, and the FFmpeg
version and encoder-listing checks.
"""

import os
import shlex
import subprocess
from typing import List, Optional

from loguru import logger


def format_cmd(cmd_list: List[str]) -> str:
    """Returns a copy-pasteable rendering of a command list for logs."""
    if os.name == "nt":
        return subprocess.list2cmdline(cmd_list)
    return shlex.join(cmd_list)


def run_cmd(
    cmd_parts: List[str],
    show_cmd: bool = False,
) -> Optional[subprocess.CompletedProcess]:
    """
    Executes an external command and captures its output.

    Args:
        cmd_parts: The command to execute and its arguments. Non-string parts
                   (e.g. `Path` objects) are converted with `str`.
        show_cmd: If True, the command is logged at the DEBUG level before execution.

    Returns:
        A `subprocess.CompletedProcess` object once the process has exited,
        whatever its return code. Returns `None` if the command could not be
        started (e.g., the executable was not found).
    """
    cmd_list = [str(part) for part in cmd_parts]

    if not cmd_list:
        logger.error("run_cmd received an empty command list.")
        return None

    display_cmd_str = format_cmd(cmd_list)
    if show_cmd:
        logger.debug(f"Executing command: {display_cmd_str}")

    try:
        result = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
        )
    except FileNotFoundError:
        logger.error(
            f"Command not found: '{cmd_list[0]}'. Ensure it is installed and on your PATH."
        )
        return None
    except OSError as e:
        logger.error(f"Could not start command '{display_cmd_str}': {e}")
        return None

    if result.stdout:
        logger.trace(f"Command stdout: {result.stdout[:500]}")
    # Distinguish between error output and informational warnings on stderr.
    if result.stderr and result.returncode != 0:
        logger.debug(f"Command stderr (error, rc={result.returncode}): {result.stderr}")
    elif result.stderr:
        logger.trace(f"Command stderr (non-error, rc={result.returncode}): {result.stderr}")

    return result
