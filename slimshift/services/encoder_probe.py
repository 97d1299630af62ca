"""
Filters the encoder catalog down to what the installed FFmpeg can use.

For every candidate a throwaway encode of a synthetic black frame is built
with ffmpeg-python, and the candidate must appear in `ffmpeg -encoders`. This
tells us the encoder is compiled in, not that it will work: a hardware
encoder may still fail at run time when the GPU or its driver is missing.
Set `probe.trial_run` (or pass `--trial-probe`) to actually run the
throwaway encode per candidate, which is slower but catches those cases.
"""
import re
from typing import Iterable, List, Optional, Set

import ffmpeg
from loguru import logger

from ..config.common import PROBE_TRIAL_RUN
from ..config.encoders import HARDWARE_ENCODER_MARKERS, PROBE_SOURCE, TRIAL_SOURCE
from ..domain.models import CodecFamily, ToolchainInstall
from ..utils.process_utils import run_cmd
from .encoder_catalog import EncoderCatalog

# One row of `ffmpeg -encoders`, e.g. " V....D libx264   libx264 H.264 / AVC ..."
_ENCODER_LINE = re.compile(r"^\s*[VAS][A-Z.]{5}\s+(?P<name>\S+)")


def is_hardware_encoder(encoder_name: str) -> bool:
    """True for NVIDIA (nvenc), Intel Quick Sync (qsv) and AMD (amf) encoders."""
    name = encoder_name.lower()
    return any(marker in name for marker in HARDWARE_ENCODER_MARKERS)


def prioritize_hardware(encoder_names: Iterable[str]) -> List[str]:
    """Moves hardware encoders in front of software ones, keeping relative order."""
    names = list(encoder_names)
    hardware = [name for name in names if is_hardware_encoder(name)]
    software = [name for name in names if not is_hardware_encoder(name)]
    return hardware + software


def parse_encoder_list(output: str) -> Set[str]:
    """Extracts encoder names from the output of `ffmpeg -encoders`."""
    names = set()
    in_table = False
    for line in output.splitlines():
        if not in_table:
            # The table starts after the " ------" separator under the legend.
            in_table = line.strip().startswith("---")
            continue
        match = _ENCODER_LINE.match(line)
        if match:
            names.add(match.group("name"))
    return names


class EncoderProbe:
    """
    Finds which catalog encoders the installed FFmpeg supports.

    Attributes:
        install (ToolchainInstall): The toolchain whose ffmpeg is queried.
        catalog (EncoderCatalog): Source of candidates per family.
        trial_run (bool): If True, each candidate is test-encoded.
    """

    def __init__(
        self,
        install: ToolchainInstall,
        catalog: Optional[EncoderCatalog] = None,
        trial_run: bool = PROBE_TRIAL_RUN,
    ):
        self.install = install
        self.catalog = catalog or EncoderCatalog()
        self.trial_run = trial_run
        self._compiled_encoders: Optional[Set[str]] = None
        self._encoder_list_loaded = False

    def compiled_encoders(self) -> Optional[Set[str]]:
        """
        Returns the encoders compiled into ffmpeg, or None if the list is unavailable.

        The list is read once per probe instance.
        """
        if not self._encoder_list_loaded:
            self._encoder_list_loaded = True
            result = run_cmd([str(self.install.ffmpeg_path), "-hide_banner", "-encoders"])
            if result is None or result.returncode != 0:
                logger.warning("Could not list FFmpeg encoders; skipping the compiled-in check.")
            else:
                self._compiled_encoders = parse_encoder_list(result.stdout)
                logger.debug(f"FFmpeg reports {len(self._compiled_encoders)} encoders.")
        return self._compiled_encoders

    def build_probe_command(self, encoder_name: str, source: str = PROBE_SOURCE) -> List[str]:
        """Constructs (without running) a null-output encode of a synthetic source."""
        stream = ffmpeg.input(source, f="lavfi").output("-", f="null", vcodec=encoder_name)
        return stream.compile(cmd=str(self.install.ffmpeg_path))

    def _trial_encode(self, encoder_name: str) -> bool:
        stream = ffmpeg.input(TRIAL_SOURCE, f="lavfi").output("-", f="null", vcodec=encoder_name)
        try:
            stream.run(cmd=str(self.install.ffmpeg_path), capture_stdout=True, capture_stderr=True)
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
            logger.debug(f"Trial encode with '{encoder_name}' failed: {stderr.strip()[-300:]}")
            return False
        except OSError as e:
            logger.warning(f"Trial encode with '{encoder_name}' could not start: {e}")
            return False
        return True

    def is_supported(self, encoder_name: str) -> bool:
        try:
            self.build_probe_command(encoder_name)
        except (TypeError, ValueError) as e:
            logger.debug(f"Could not construct a probe encode for '{encoder_name}': {e}")
            return False

        compiled = self.compiled_encoders()
        if compiled is not None and encoder_name not in compiled:
            logger.debug(f"Encoder '{encoder_name}' is not compiled into this FFmpeg.")
            return False

        if self.trial_run and not self._trial_encode(encoder_name):
            return False
        return True

    def probe(self, family: Optional[CodecFamily]) -> List[str]:
        """
        Returns the usable encoders for `family`, hardware encoders first.

        When no candidate passes, the full catalog list is returned so the
        user still gets a choice; a bad pick then surfaces when the encode
        runs. An unknown family yields an empty list.
        """
        candidates = self.catalog.candidates_for(family)
        if not candidates:
            return []

        available = [name for name in candidates if self.is_supported(name)]
        if not available:
            logger.warning(
                f"No {family.label} encoder passed the probe; offering all {len(candidates)} candidates."
            )
            return list(candidates)

        ordered = prioritize_hardware(available)
        logger.debug(f"Available {family.label} encoders: {ordered}")
        return ordered
