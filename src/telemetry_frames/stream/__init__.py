"""
Stream Module
=============

Transport boundary for raw device data.

This module provides the ingestion edge of the frame builder:
    - Transport / PlaybackSource: protocols the builder talks to
    - FrameReader: delimiter-aware byte stream splitter
    - WebSocketTransport: websocket device link with reconnection

Example:
    from telemetry_frames.stream import WebSocketTransport

    transport = WebSocketTransport(url="ws://localhost:9000/device")
    builder = FrameBuilder(transport=transport, state_store=state_store)
    transport.on_frame = builder.read_data

    task = asyncio.create_task(transport.run())
"""

from telemetry_frames.stream.transport import (
    NullPlayback,
    NullTransport,
    PlaybackSource,
    Transport,
)
from telemetry_frames.stream.reader import FrameReader
from telemetry_frames.stream.websocket import TransportMetrics, WebSocketTransport


__all__ = [
    "Transport",
    "PlaybackSource",
    "NullPlayback",
    "NullTransport",
    "FrameReader",
    "WebSocketTransport",
    "TransportMetrics",
]
