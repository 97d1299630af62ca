"""
Configuration settings related to video encoders.

Defines the hand-curated encoder catalog (which concrete FFmpeg encoders can
produce each codec family), the recommended quality per family and the
preset ladders offered for software and hardware encoders.
"""
from types import MappingProxyType

from ..domain.models import CodecFamily

# --- Encoder Catalog ---
# Candidates per family in source order: the software encoder first, then
# the Intel Quick Sync, NVIDIA and AMD hardware variants.
ENCODER_CANDIDATES = MappingProxyType(
    {
        CodecFamily.H264: ("libx264", "h264_qsv", "h264_nvenc", "h264_amf"),
        CodecFamily.H265: ("libx265", "hevc_qsv", "hevc_nvenc", "hevc_amf"),
        CodecFamily.VP9: ("libvpx-vp9", "vp9_qsv", "vp9_nvenc", "vp9_amf"),
        CodecFamily.AV1: ("libaom-av1", "av1_qsv", "av1_nvenc", "av1_amf"),
    }
)

# Recommended CRF-equivalent value per family.
DEFAULT_QUALITY_VALUES = MappingProxyType(
    {
        CodecFamily.H264: 23,
        CodecFamily.H265: 28,
        CodecFamily.VP9: 30,
        CodecFamily.AV1: 30,
    }
)

# Substrings identifying vendor hardware encoders (NVIDIA, Intel Quick Sync, AMD).
HARDWARE_ENCODER_MARKERS = ("nvenc", "qsv", "amf")

# Encoders whose name starts with this prefix are library (software) encoders.
SOFTWARE_ENCODER_PREFIX = "lib"

# --- Preset Ladders ---
SOFTWARE_PRESETS = (
    "ultrafast", "superfast", "veryfast", "faster", "fast",
    "medium", "slow", "slower", "veryslow",
)
HARDWARE_PRESETS = ("fast", "medium", "slow")

# --- Codec Family Specific Parameters ---
OPEN_AUDIO_CODEC = "libopus"
AV1_CPU_USED = 4
AV1_TILE_COLUMNS = 2
AV1_TILE_ROWS = 2

# --- Encoder Probe Settings ---
# Synthetic lavfi source used to construct a throwaway encode per candidate.
PROBE_SOURCE = "color=black:size=1x1:duration=0"
# Source used when a real trial encode is requested. Hardware encoders
# reject frames much smaller than this.
TRIAL_SOURCE = "color=black:size=256x256:duration=0.1"
