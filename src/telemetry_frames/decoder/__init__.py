"""
Decoder Module
==============

Operation modes and the frame decoding engine.

Components:
    - OperationModeController: Active mode + transport delimiters
    - FrameDecoder: Per-mode decoding strategies
    - FrameParser / SeparatorFrameParser: Parsing capability
    - synthesize_quick_plot: Ad-hoc QuickPlot frames
"""

from telemetry_frames.decoder.frame_decoder import (
    FrameDecoder,
    decode_text,
    parse_json_frame,
)
from telemetry_frames.decoder.modes import OperationModeController
from telemetry_frames.decoder.parsing import FrameParser, SeparatorFrameParser
from telemetry_frames.decoder.quickplot import synthesize_quick_plot


__all__ = [
    "FrameDecoder",
    "OperationModeController",
    "FrameParser",
    "SeparatorFrameParser",
    "synthesize_quick_plot",
    "decode_text",
    "parse_json_frame",
]
