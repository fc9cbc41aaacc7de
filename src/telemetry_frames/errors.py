"""
Error Taxonomy
==============

Schema errors are raised at load time and surfaced to the user.
FrameParseError is per-message and never leaves the decoder.
"""


class TelemetryFramesError(Exception):
    """Base class for all package errors."""
    pass


class SchemaError(TelemetryFramesError):
    """Raised when a project file cannot be loaded."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class SchemaParseError(SchemaError):
    """Project file is not valid JSON."""
    pass


class SchemaStructuralError(SchemaError):
    """Project file is valid JSON but has the wrong shape."""
    pass


class SchemaIOError(SchemaError):
    """Project file could not be opened or read."""
    pass


class FrameParseError(TelemetryFramesError):
    """A DeviceSendsJSON message could not be decoded into a frame."""
    pass
