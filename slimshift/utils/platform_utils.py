"""
Helpers for locating the user's special folders.

SlimShift writes its output into the user's Videos folder (Movies on macOS),
falling back to Documents when no Videos folder exists. On Linux the XDG
user-dirs configuration is honoured when present.
"""

import os
import re
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.video import DOCUMENTS_FOLDER_NAME, VIDEOS_FOLDER_NAMES

_XDG_LINE = re.compile(r'^\s*XDG_(?P<key>[A-Z]+)_DIR\s*=\s*"(?P<value>[^"]*)"\s*$')


def _read_xdg_user_dir(key: str, home: Path) -> Optional[Path]:
    """
    Looks up `XDG_<key>_DIR` from the environment or `~/.config/user-dirs.dirs`.

    Returns:
        The configured folder, or None when it is not configured.
    """
    env_value = os.environ.get(f"XDG_{key}_DIR")
    if env_value:
        return Path(env_value.replace("$HOME", str(home))).expanduser()

    config_home = Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config")
    user_dirs_file = config_home / "user-dirs.dirs"
    if not user_dirs_file.is_file():
        return None
    try:
        lines = user_dirs_file.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        logger.debug(f"Could not read '{user_dirs_file}': {e}")
        return None
    for line in lines:
        match = _XDG_LINE.match(line)
        if match and match.group("key") == key:
            return Path(match.group("value").replace("$HOME", str(home)))
    return None


def videos_folder(home: Optional[Path] = None, sys_platform: str = sys.platform) -> Path:
    """Returns the path the OS reports as the user's Videos folder (may not exist)."""
    home = home or Path.home()
    if sys_platform.startswith("linux"):
        xdg_videos = _read_xdg_user_dir("VIDEOS", home)
        if xdg_videos is not None:
            return xdg_videos
    folder_name = VIDEOS_FOLDER_NAMES.get(sys_platform, VIDEOS_FOLDER_NAMES["default"])
    return home / folder_name


def documents_folder(home: Optional[Path] = None, sys_platform: str = sys.platform) -> Path:
    """Returns the path the OS reports as the user's Documents folder (may not exist)."""
    home = home or Path.home()
    if sys_platform.startswith("linux"):
        xdg_documents = _read_xdg_user_dir("DOCUMENTS", home)
        if xdg_documents is not None:
            return xdg_documents
    return home / DOCUMENTS_FOLDER_NAME


def user_media_folder(home: Optional[Path] = None, sys_platform: str = sys.platform) -> Path:
    """
    Picks the base folder for converted videos.

    The Videos folder is used when it exists; otherwise the Documents folder.
    """
    videos = videos_folder(home, sys_platform)
    if videos.is_dir():
        return videos
    logger.debug(f"Videos folder '{videos}' does not exist, falling back to Documents.")
    return documents_folder(home, sys_platform)
