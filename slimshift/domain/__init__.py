"""
This package contains the core domain types of SlimShift.

Modules:
    exceptions.py: The exception hierarchy, split into setup-fatal toolchain
                   errors and recoverable workflow errors.
    models.py: Value types such as `PlatformTarget`, `ToolchainInstall`,
               `CodecFamily`, `EncoderSelection` and `ConversionJob`.
"""
