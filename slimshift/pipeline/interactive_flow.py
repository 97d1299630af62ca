"""
The interactive menu loop of SlimShift.

`InteractiveFlow` is the composition root: it asks the user what to do,
collects the encoding choices, wires the catalog, probe, argument builder and
conversion service together, and reports the outcome. Every menu action runs
inside one boundary that turns failures into a message, so the loop only
ends when the user picks "Exit".
"""
from pathlib import Path
from typing import Callable, Dict, List, Optional

from loguru import logger

from ..config.common import MAX_QUALITY, MIN_QUALITY
from ..config.video import VIDEO_EXTENSIONS
from ..domain.exceptions import (
    ConversionFailedException,
    NoEncodersAvailableException,
    OperationNotImplementedException,
    WorkflowException,
)
from ..domain.models import CodecFamily, ConversionJob, EncoderSelection, ToolchainInstall
from ..services.argument_builder import (
    build_codec_argument,
    default_extension,
    presets_for_encoder,
)
from ..services.conversion_service import (
    ConversionService,
    failure_hint,
    prepare_output_folder,
)
from ..services.encoder_catalog import EncoderCatalog
from ..services.encoder_probe import EncoderProbe
from ..utils.format_utils import contains_any_extensions, format_timedelta, formatted_size

MENU_CONVERT = "Change video encoder/codec"
MENU_DOWNSCALE = "Downscale video resolution"
MENU_UPSCALE = "Upscale video resolution"
MENU_FRAMERATE = "Change video framerate"
MENU_EXIT = "Exit"
MAIN_MENU = (MENU_CONVERT, MENU_DOWNSCALE, MENU_UPSCALE, MENU_FRAMERATE, MENU_EXIT)

DEFAULT_PRESET = "medium"


class InteractiveFlow:
    """
    Drives the menu and the conversion workflow.

    Attributes:
        install (ToolchainInstall): The verified toolchain, resolved before
            the flow is created.
        prompter: The UI adapter (see `ui.console.ConsolePrompter`).
    """

    def __init__(
        self,
        install: ToolchainInstall,
        prompter,
        catalog: Optional[EncoderCatalog] = None,
        probe: Optional[EncoderProbe] = None,
        conversion_service: Optional[ConversionService] = None,
        output_folder_factory: Callable[[], Path] = prepare_output_folder,
    ):
        self.install = install
        self.prompter = prompter
        self.catalog = catalog or EncoderCatalog()
        self.probe = probe or EncoderProbe(install, self.catalog)
        self.conversion_service = conversion_service or ConversionService(install)
        self.output_folder_factory = output_folder_factory
        self._actions: Dict[str, Callable[[], bool]] = {
            MENU_CONVERT: self.run_conversion_workflow,
            MENU_DOWNSCALE: lambda: self.run_unavailable_operation(MENU_DOWNSCALE),
            MENU_UPSCALE: lambda: self.run_unavailable_operation(MENU_UPSCALE),
            MENU_FRAMERATE: lambda: self.run_unavailable_operation(MENU_FRAMERATE),
        }

    def run(self) -> None:
        """Shows the main menu until the user chooses to exit."""
        self.prompter.clear()
        self.prompter.banner()
        while True:
            choice = self.prompter.ask_choice("What would you like to do?", MAIN_MENU)
            if choice == MENU_EXIT:
                self.prompter.show("Thanks for using SlimShift! Goodbye!", style="yellow")
                return
            self.run_action(choice)

    def run_action(self, choice: str) -> bool:
        """
        Runs one menu action, converting any failure into a message.

        Returns:
            True if the action completed successfully.
        """
        action = self._actions.get(choice)
        if action is None:
            self.prompter.show(f"Unknown menu entry: {choice}", style="red")
            return False
        try:
            success = action()
        except WorkflowException as e:
            logger.info(f"'{choice}' ended early: {e}")
            self.prompter.show(f"✗ {e}", style="red")
            return False
        except Exception as e:
            logger.exception(f"Unexpected error while running '{choice}'")
            self.prompter.show(f"✗ Error: {e}", style="red")
            return False

        if success:
            self.prompter.show("✓ Conversion finished successfully!", style="green")
        return success

    # --- Menu actions ---

    def run_conversion_workflow(self) -> bool:
        """Collects the encoding choices, runs FFmpeg and reports the result."""
        input_path = self.ask_input_file()

        family_label = self.prompter.ask_choice(
            "Choose a codec type:", [family.label for family in self.catalog.families()]
        )
        family = CodecFamily.from_label(family_label)
        available_encoders = self.probe.probe(family)
        if not available_encoders:
            self.report_no_encoders(family_label)
            raise NoEncodersAvailableException(f"No available encoders found for {family_label}")

        encoder = self.prompter.ask_choice(f"Select {family_label} encoder:", available_encoders)
        if encoder not in available_encoders:
            raise NoEncodersAvailableException(f"Encoder '{encoder}' is not available for {family_label}")

        presets = presets_for_encoder(encoder)
        preset = self.prompter.ask_choice(
            f"Select {encoder} preset:", presets, default=DEFAULT_PRESET
        )

        recommended = self.catalog.default_quality_for(family)
        quality = self.prompter.ask_int(
            f"Enter CRF value (recommended {recommended})",
            MIN_QUALITY,
            MAX_QUALITY,
            default=recommended,
        )

        selection = EncoderSelection(family, encoder, preset, quality)
        output_path = self.ask_output_file(encoder, input_path)
        job = ConversionJob(
            input_path,
            output_path,
            selection,
            build_codec_argument(selection.encoder_name, selection.preset, selection.quality),
        )
        logger.debug(f"Built {job} with arguments '{job.argument_fragment}'")

        try:
            with self.prompter.progress("Encoding...") as sink:
                result = self.conversion_service.run(job, progress_callback=sink.update)
        except ConversionFailedException as e:
            self.prompter.show(f"✗ Conversion failed: {e}", style="red")
            hint = failure_hint(str(e), encoder)
            if hint:
                self.prompter.show(hint, style="yellow")
            return False

        self.prompter.show(f"Output file: {result.output_path}", style="blue")
        self.prompter.show(
            f"Size: {formatted_size(result.output_size)}, took {format_timedelta(result.elapsed)}",
            style="dim",
        )
        return True

    def run_unavailable_operation(self, name: str) -> bool:
        """Validates an input file for an operation that has no implementation yet."""
        self.ask_input_file()
        raise OperationNotImplementedException(f"{name} is not yet implemented.")

    # --- Prompts ---

    def ask_input_file(self) -> Path:
        """Asks for a video path until an existing file is given."""
        while True:
            raw = self.prompter.ask_text("Enter the path to your video file")
            input_path = Path(raw.strip().strip('"').strip("'")).expanduser()
            if raw.strip() and input_path.is_file():
                if not contains_any_extensions(input_path, VIDEO_EXTENSIONS):
                    self.prompter.show(
                        f"'{input_path.suffix or input_path.name}' is not a known video extension; "
                        "FFmpeg will try to read it anyway.",
                        style="yellow",
                    )
                return input_path
            self.prompter.show("✗ File not found. Please try again.", style="red")

    def ask_output_file(self, encoder: str, input_path: Path) -> Path:
        """
        Asks for an output name inside the output folder.

        The container extension follows the encoder. An existing file is only
        reused after the user confirms overwriting it; the input file itself
        can never be the output.
        """
        output_folder = self.output_folder_factory()
        self.prompter.show(f"Output location: {output_folder}", style="dim")
        extension = default_extension(encoder)

        while True:
            name = self.prompter.ask_text(
                f"Enter output file name (without extension, will add {extension})"
            ).strip()
            if not name or Path(name).name != name:
                self.prompter.show("✗ Please enter a plain file name.", style="red")
                continue

            output_path = output_folder / f"{name}{extension}"
            if output_path.resolve() == input_path.resolve():
                self.prompter.show("✗ The output cannot replace the input file.", style="red")
                continue
            if not output_path.exists():
                return output_path
            if self.prompter.ask_confirm(f"File {name}{extension} exists. Overwrite?"):
                return output_path

    def report_no_encoders(self, family_label: str) -> None:
        causes: List[str] = [
            f"FFmpeg doesn't have {family_label} support compiled in",
            "Hardware encoders require specific GPU drivers",
            "Software encoders may be missing from your FFmpeg build",
        ]
        self.prompter.show("This could mean:", style="yellow")
        for cause in causes:
            self.prompter.show(f"  • {cause}")
