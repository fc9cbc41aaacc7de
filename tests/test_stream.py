"""
Stream Tests
============

Delimiter framing and websocket message handling.
"""

import asyncio

import pytest
from websockets.exceptions import InvalidURI

from telemetry_frames.stream import FrameReader, WebSocketTransport


class TestFrameReader:
    """Tests for delimiter-aware framing."""

    def test_no_delimiters_pass_through(self):
        """Verify every chunk is a frame when framing is disabled."""
        reader = FrameReader()

        assert reader.feed(b"1,2,3") == [b"1,2,3"]
        assert reader.feed(b"4,5") == [b"4,5"]
        assert reader.buffered_bytes == 0

    def test_empty_chunk(self):
        assert FrameReader().feed(b"") == []

    def test_start_and_finish_across_chunks(self):
        reader = FrameReader()
        reader.set_start_sequence(b"/*")
        reader.set_finish_sequence(b"*/")

        assert reader.feed(b"noise/*1,2,") == []
        assert reader.feed(b"3*//*4,5*/") == [b"1,2,3", b"4,5"]
        assert reader.buffered_bytes == 0

    def test_garbage_before_start_discarded(self):
        reader = FrameReader()
        reader.set_start_sequence(b"$")
        reader.set_finish_sequence(b";")

        assert reader.feed(b"xx;yy$10,20;") == [b"10,20"]

    def test_partial_start_sequence_kept(self):
        """Verify a start sequence split between chunks is recognised."""
        reader = FrameReader()
        reader.set_start_sequence(b"/*")
        reader.set_finish_sequence(b"*/")

        assert reader.feed(b"xx/") == []
        assert reader.feed(b"*1*/") == [b"1"]

    def test_finish_only(self):
        reader = FrameReader()
        reader.set_finish_sequence(b"\n")

        assert reader.feed(b"1,2\n3,") == [b"1,2"]
        assert reader.feed(b"4\n") == [b"3,4"]

    def test_delimiter_change_resets_buffer(self):
        reader = FrameReader()
        reader.set_finish_sequence(b"\n")
        reader.feed(b"partial")

        reader.set_finish_sequence(b"")

        assert reader.buffered_bytes == 0
        assert reader.feed(b"whole") == [b"whole"]

    def test_overflow_discards_buffer(self):
        reader = FrameReader(max_buffer_size=8)
        reader.set_finish_sequence(b"\n")

        assert reader.feed(b"0123456789") == []
        assert reader.buffered_bytes == 0
        assert reader.overflow_count == 1

    def test_invalid_buffer_size(self):
        with pytest.raises(ValueError):
            FrameReader(max_buffer_size=0)


class TestWebSocketTransport:
    """Tests for websocket message handling (no network)."""

    def test_messages_framed_and_delivered(self):
        frames = []
        transport = WebSocketTransport(url="ws://localhost:9/device", on_frame=frames.append)
        transport.set_finish_sequence(b";")

        delivered = transport.handle_message(b"a;b;c")

        assert delivered == 2
        assert frames == [b"a", b"b"]
        assert transport.reader.buffered_bytes == 1

    def test_text_messages_encoded(self):
        frames = []
        transport = WebSocketTransport(url="ws://localhost:9/device", on_frame=frames.append)

        transport.handle_message("21.5,°C")

        assert frames == ["21.5,°C".encode("utf-8")]

    def test_metrics(self):
        transport = WebSocketTransport(url="ws://localhost:9/device")

        transport.handle_message(b"1,2")
        transport.handle_message(b"3")

        metrics = transport.metrics.to_dict()
        assert metrics["messages_received"] == 2
        assert metrics["frames_delivered"] == 2
        assert metrics["bytes_received"] == 4
        assert not transport.connected


class TestWebSocketReconnect:
    """Tests for the reconnect loop against unreachable endpoints."""

    def test_refused_connection_retried_until_limit(self):
        """Verify a refused link is retried max_reconnect_attempts times."""
        transport = WebSocketTransport(
            url="ws://127.0.0.1:9/device",
            reconnect_backoff_ms=0,
            max_reconnect_attempts=2,
        )

        asyncio.run(transport.run())

        assert transport.metrics.reconnect_count == 2
        assert not transport.connected

    def test_invalid_url_not_retried(self):
        transport = WebSocketTransport(url="http://127.0.0.1:9/device", reconnect_backoff_ms=0)

        with pytest.raises(InvalidURI):
            asyncio.run(transport.run())

        assert transport.metrics.reconnect_count == 0
