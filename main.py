"""
Main entry point for the SlimShift application.

This script configures logging, parses command-line arguments, makes sure the
FFmpeg toolchain is installed (downloading it on first run) and then hands
control to the interactive menu loop.
"""

import sys
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from slimshift.cli import get_args
from slimshift.config.common import DEFAULT_LOG_LEVEL, LOGGER_FORMAT
from slimshift.domain.exceptions import ToolchainException
from slimshift.domain.models import PlatformTarget, ToolchainInstall
from slimshift.pipeline.interactive_flow import InteractiveFlow
from slimshift.services.encoder_probe import EncoderProbe
from slimshift.services.toolchain_fetcher import ToolchainFetcher
from slimshift.services.toolchain_locator import ToolchainLocator, ensure_toolchain
from slimshift.ui.console import ConsolePrompter

# Configure the logger for initial setup.
# The level is overridden below once the command-line arguments are parsed.
logger.remove()
logger.add(sys.stderr, level=DEFAULT_LOG_LEVEL, format=LOGGER_FORMAT)


def setup_toolchain(prompter: ConsolePrompter, ffmpeg_dir: Optional[Path] = None) -> ToolchainInstall:
    """
    Locates FFmpeg, downloading it with a progress bar when it is missing.

    Raises:
        ToolchainException: If the platform is unsupported or the install fails.
    """
    prompter.show("Checking FFmpeg installation...", style="yellow")
    platform_target = PlatformTarget.current()
    logger.debug(f"Running on {platform_target}")
    locator = ToolchainLocator(platform_target, install_dir=ffmpeg_dir)

    def fetch_with_progress(install_dir: Path) -> ToolchainInstall:
        prompter.show("Downloading FFmpeg binaries...", style="green")
        with prompter.progress("Downloading FFmpeg", transfer=True) as sink:
            fetcher = ToolchainFetcher(platform_target, progress_callback=sink.update)
            install = fetcher.fetch(install_dir)
        prompter.show("FFmpeg download completed!", style="green")
        return install

    install = ensure_toolchain(locator, fetch_with_progress)
    prompter.show(f"FFmpeg ready in {install.install_dir}", style="green")
    return install


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Runs SlimShift and returns the process exit code.

    1. Parses command-line arguments and re-configures the logger.
    2. Ensures the toolchain exists; a failure here ends the program.
    3. Runs the interactive menu until the user exits.

    Ctrl+C at any point, including during the first-run download, ends the
    program with exit code 130.
    """
    args = get_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level, format=LOGGER_FORMAT)
    logger.debug(f"Parsed arguments: {args}")

    prompter = ConsolePrompter()
    try:
        try:
            install = setup_toolchain(prompter, args.ffmpeg_dir)
        except ToolchainException as e:
            logger.error(f"Toolchain setup failed: {e}")
            prompter.show(f"Failed to setup FFmpeg: {e}", style="red")
            prompter.wait_for_enter("Press Enter to exit...")
            return 1

        flow = InteractiveFlow(
            install,
            prompter,
            probe=EncoderProbe(install, trial_run=args.trial_probe),
        )
        flow.run()
    except (KeyboardInterrupt, EOFError):
        prompter.show("\nInterrupted. Goodbye!", style="yellow")
        return 130

    logger.debug("SlimShift finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
