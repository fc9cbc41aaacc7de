"""
Telemetry Frames
================

Decodes raw byte frames from an external device into structured
telemetry records (Frame → Group → Dataset) for real-time visualization.

Components:
    - models: Frame, Group, Dataset and the operation mode enums
    - schema: Project file loading and validation
    - decoder: Operation modes, frame decoding, QuickPlot synthesis
    - stream: Transport boundary, delimiter framing, websocket link
    - builder: FrameBuilder service object tying everything together

Example:
    from telemetry_frames.builder import FrameBuilder
    from telemetry_frames.decoder import SeparatorFrameParser
    from telemetry_frames.models import OperationMode
    from telemetry_frames.stream import FrameReader

    reader = FrameReader()
    builder = FrameBuilder(transport=reader, parser=SeparatorFrameParser())
    builder.frame_ready.connect(print)
    builder.set_operation_mode(OperationMode.QUICK_PLOT)
    builder.read_data(b"1.0,2.0,3.0")
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
