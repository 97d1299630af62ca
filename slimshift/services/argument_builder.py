"""
Builds the FFmpeg codec arguments for a chosen encoder.

Every function here is pure. An encoder name is first classified into an
`EncoderKind`; the argument layout, output container and preset ladder are
then chosen from that kind, so the name matching lives in one place.
"""
from typing import Tuple

from ..config.encoders import (
    AV1_CPU_USED,
    AV1_TILE_COLUMNS,
    AV1_TILE_ROWS,
    HARDWARE_PRESETS,
    OPEN_AUDIO_CODEC,
    SOFTWARE_ENCODER_PREFIX,
    SOFTWARE_PRESETS,
)
from ..config.video import (
    FALLBACK_EXTENSION,
    MKV_EXTENSION,
    MP4_EXTENSION,
    WEBM_EXTENSION,
)
from ..domain.models import EncoderKind

_EXTENSIONS = {
    EncoderKind.H264: MP4_EXTENSION,
    EncoderKind.H265: MP4_EXTENSION,
    EncoderKind.VP9: WEBM_EXTENSION,
    EncoderKind.AV1: MKV_EXTENSION,
    EncoderKind.GENERIC: FALLBACK_EXTENSION,
}


def classify_encoder(encoder_name: str) -> EncoderKind:
    """
    Classifies an encoder name by the codec it produces.

    Matching is case-insensitive and checked in a fixed order, so a name
    carrying several markers resolves to the first one: "264", then
    "265"/"hevc", then "vp9", then "av1". Unknown names are GENERIC.
    """
    name = encoder_name.lower()
    if "264" in name:
        return EncoderKind.H264
    if "265" in name or "hevc" in name:
        return EncoderKind.H265
    if "vp9" in name:
        return EncoderKind.VP9
    if "av1" in name:
        return EncoderKind.AV1
    return EncoderKind.GENERIC


def build_codec_argument(encoder_name: str, preset: str, quality: int) -> str:
    """
    Returns the codec part of the FFmpeg command line.

    Args:
        encoder_name: FFmpeg encoder, e.g. "libx264" or "hevc_nvenc".
        preset: Speed/quality preset. Ignored by the VP9, AV1 and generic layouts.
        quality: CRF-equivalent value, already validated to [0, 51].

    Returns:
        A space separated argument string, e.g.
        "-c:v libx264 -preset medium -crf 23 -c:a copy".
    """
    kind = classify_encoder(encoder_name)

    if kind in (EncoderKind.H264, EncoderKind.H265):
        args = [f"-c:v {encoder_name}", f"-preset {preset}", f"-crf {quality}"]
        if "nvenc" in encoder_name.lower():
            args.append("-rc vbr")
        args.append("-c:a copy")
    elif kind is EncoderKind.VP9:
        args = [
            f"-c:v {encoder_name}",
            "-b:v 0",
            f"-crf {quality}",
            "-row-mt 1",
            f"-c:a {OPEN_AUDIO_CODEC}",
        ]
    elif kind is EncoderKind.AV1:
        args = [
            f"-c:v {encoder_name}",
            f"-crf {quality}",
            "-b:v 0",
            f"-cpu-used {AV1_CPU_USED}",
            "-row-mt 1",
            f"-tile-columns {AV1_TILE_COLUMNS}",
            f"-tile-rows {AV1_TILE_ROWS}",
            f"-c:a {OPEN_AUDIO_CODEC}",
        ]
    else:
        # Unknown encoder: let FFmpeg pick its own defaults.
        args = [f"-c:v {encoder_name}", "-c:a copy"]

    return " ".join(args)


def default_extension(encoder_name: str) -> str:
    """Returns the output container extension for an encoder. Never fails."""
    return _EXTENSIONS[classify_encoder(encoder_name)]


def presets_for_encoder(encoder_name: str) -> Tuple[str, ...]:
    """
    Returns the preset ladder offered for an encoder.

    Library (software) encoders get the nine x264-style presets; hardware
    encoders get fast/medium/slow.
    """
    if encoder_name.startswith(SOFTWARE_ENCODER_PREFIX):
        return SOFTWARE_PRESETS
    return HARDWARE_PRESETS
