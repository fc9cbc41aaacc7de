"""
Data Models
===========

Pydantic models for telemetry frames.

Models:
    Frame Model:
        - Frame: One schema template or decoded snapshot
        - Group: Widget-tagged collection of datasets
        - Dataset: One named, indexed value

    Modes:
        - OperationMode: DeviceSendsJSON, ProjectFile, QuickPlot
        - DecoderMethod: PlainText, Hexadecimal, Base64
"""

from telemetry_frames.models.frame import Dataset, Frame, Group
from telemetry_frames.models.modes import DecoderMethod, OperationMode

__all__ = [
    # Frame model
    "Frame",
    "Group",
    "Dataset",
    # Modes
    "OperationMode",
    "DecoderMethod",
]
