"""
Transport Boundary
==================

Protocols for the collaborators that surround the frame builder.

    - Transport: accepts start/finish delimiter configuration
    - PlaybackSource: reports whether recorded CSV playback is active

The builder only ever calls these methods; the device link itself
(serial port, socket, websocket) lives behind them.
"""

from typing import Protocol


class Transport(Protocol):
    """
    Raw byte source that splits its stream using delimiters.

    Empty sequences disable delimiter framing.
    """

    def set_start_sequence(self, sequence: bytes) -> None:
        ...

    def set_finish_sequence(self, sequence: bytes) -> None:
        ...


class PlaybackSource(Protocol):
    """
    Recorded-data source that can stand in for a live device.

    While open, ProjectFile messages are literal comma-separated text.
    """

    @property
    def is_open(self) -> bool:
        ...


class NullPlayback:
    """Playback source that is never open."""

    @property
    def is_open(self) -> bool:
        return False


class NullTransport:
    """Transport that only remembers its delimiter configuration."""

    def __init__(self) -> None:
        self.start_sequence: bytes = b""
        self.finish_sequence: bytes = b""

    def set_start_sequence(self, sequence: bytes) -> None:
        self.start_sequence = sequence

    def set_finish_sequence(self, sequence: bytes) -> None:
        self.finish_sequence = sequence
