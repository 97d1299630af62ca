"""
Defines custom exception types for the SlimShift application.

Errors fall into two groups. Toolchain errors happen while making sure
FFmpeg is available; they are fatal and end the program before the menu is
shown. Workflow errors happen inside one menu action; they are reported and
control returns to the menu.

All custom exceptions inherit from the base `SlimShiftException`.
"""


class SlimShiftException(Exception):
    """Base class for all custom exceptions in the SlimShift application."""

    pass


# --- Toolchain (setup-fatal) Exceptions ---
class ToolchainException(SlimShiftException):
    """Base class for failures while locating, fetching or verifying FFmpeg."""

    pass


class PlatformNotSupportedException(ToolchainException):
    """
    Raised when no FFmpeg build is known for the running (OS, architecture) pair.

    This is raised before any network access is attempted and is never retried.
    """

    pass


class ToolchainFetchException(ToolchainException):
    """
    Raised when downloading, extracting or relocating the FFmpeg build fails.

    Wraps network errors, failed `tar` invocations and unexpected archive
    layouts into a single failure the caller can report.
    """

    pass


# --- Workflow (recoverable) Exceptions ---
class WorkflowException(SlimShiftException):
    """Base class for errors that end one menu action but not the program."""

    pass


class InvalidInputFileException(WorkflowException):
    """Raised when the input video is missing or the output folder is unusable."""

    pass


class NoEncodersAvailableException(WorkflowException):
    """Raised when no encoder candidate exists for the chosen codec family."""

    pass


class ConversionFailedException(WorkflowException):
    """
    Raised when the FFmpeg process cannot be started or exits with an error.

    Attributes:
        stderr_tail (str): The last lines FFmpeg wrote to stderr, if any.
    """

    def __init__(self, message: str, stderr_tail: str = ""):
        super().__init__(message)
        self.stderr_tail = stderr_tail

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr_tail:
            return f"{base}\n{self.stderr_tail}"
        return base


class OperationNotImplementedException(WorkflowException):
    """Raised by menu actions that are declared but not available yet."""

    pass
