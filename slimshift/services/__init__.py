"""
Services Package for SlimShift.

- **ToolchainLocator / ToolchainFetcher:** find FFmpeg on disk, and download
  and install it for the running platform when it is missing.
- **EncoderCatalog / EncoderProbe:** list the encoder candidates per codec
  family and keep the ones the installed FFmpeg supports.
- **Argument builder:** pure functions turning an encoder choice into FFmpeg
  arguments, an output extension and a preset ladder.
- **ConversionService:** runs FFmpeg for a job and reports progress.
"""
