"""
Configuration Package for SlimShift.

Centralizes the static settings of the application so they can be adjusted
without touching the logic:
- common.py: program name, logging format, quality bounds, output folder
  naming and the optional read-only `config.user.yaml` overrides.
- encoders.py: the encoder catalog, recommended quality values and presets.
- toolchain.py: FFmpeg download URLs per platform and archive layout.
- video.py: recognised video extensions and output containers.
"""
