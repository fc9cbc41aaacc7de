"""
Operation Modes
===============

Enumerations selecting how raw device data is decoded.

Modes:
    - DeviceSendsJSON: device emits a complete JSON frame per message
    - ProjectFile: device emits delimited raw fields mapped by a project file
    - QuickPlot: device emits comma-separated values, no project needed

Decoder Methods (ProjectFile mode only):
    - PlainText: bytes interpreted directly as UTF-8
    - Hexadecimal: bytes hex-encoded before parsing
    - Base64: bytes base64-encoded before parsing
"""

from enum import Enum, IntEnum


class OperationMode(str, Enum):
    """
    Active decoding strategy.

    Stored by name in the persisted builder state and exposed by name
    over the HTTP API.
    """

    DEVICE_SENDS_JSON = "DeviceSendsJSON"
    PROJECT_FILE = "ProjectFile"
    QUICK_PLOT = "QuickPlot"


class DecoderMethod(IntEnum):
    """
    Text representation applied to raw bytes before field parsing.

    Project files store this as an integer under the ``decoder`` key.
    """

    PLAIN_TEXT = 0
    HEXADECIMAL = 1
    BASE64 = 2
