"""
WebSocket Transport
===================

Device link that receives raw telemetry over a websocket.

This module provides the WebSocketTransport class which:
    - Connects to a websocket endpoint relaying device bytes
    - Splits received messages into frames with a FrameReader
    - Hands every complete frame to a synchronous callback
    - Reconnects with a fixed backoff when the link drops
    - Exposes metrics for health monitoring

Design Rules:
    - Does NOT decode frames; the callback (FrameBuilder.read_data) does
    - Text messages are encoded as UTF-8 before framing
    - The callback runs to completion before the next message is read
"""

import asyncio
import logging
from typing import Callable, Optional, Union

import websockets
from websockets.exceptions import InvalidURI, WebSocketException

from telemetry_frames.stream.reader import FrameReader


logger = logging.getLogger(__name__)


class TransportMetrics:
    """Metrics for WebSocketTransport observability."""

    __slots__ = (
        "messages_received",
        "frames_delivered",
        "bytes_received",
        "reconnect_count",
    )

    def __init__(self) -> None:
        self.messages_received: int = 0
        self.frames_delivered: int = 0
        self.bytes_received: int = 0
        self.reconnect_count: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "messages_received": self.messages_received,
            "frames_delivered": self.frames_delivered,
            "bytes_received": self.bytes_received,
            "reconnect_count": self.reconnect_count,
        }


class WebSocketTransport:
    """
    Websocket device link with delimiter framing.

    Example:
        transport = WebSocketTransport(
            url="ws://localhost:9000/device",
            on_frame=builder.read_data,
        )
        builder = FrameBuilder(transport=transport, ...)

        task = asyncio.create_task(transport.run())
        ...
        await transport.stop()
        await task
    """

    def __init__(
        self,
        url: str,
        on_frame: Optional[Callable[[bytes], object]] = None,
        reconnect_backoff_ms: int = 500,
        max_reconnect_attempts: int = 0,
        max_buffer_size: int = 1024 * 1024,
    ) -> None:
        """
        Initialize websocket transport.

        Args:
            url: Websocket URL relaying device bytes
            on_frame: Callback receiving each complete frame
            reconnect_backoff_ms: Backoff between reconnect attempts
            max_reconnect_attempts: Max attempts (0 = unlimited)
            max_buffer_size: FrameReader buffer bound in bytes
        """
        self.url = url
        self.on_frame = on_frame
        self.reconnect_backoff_ms = reconnect_backoff_ms
        self.max_reconnect_attempts = max_reconnect_attempts

        self.reader = FrameReader(max_buffer_size=max_buffer_size)
        self.metrics = TransportMetrics()

        self._websocket = None
        self._connected: bool = False
        self._running: bool = False
        self._stop_event: asyncio.Event = asyncio.Event()

    @property
    def connected(self) -> bool:
        return self._connected

    def set_start_sequence(self, sequence: bytes) -> None:
        self.reader.set_start_sequence(sequence)

    def set_finish_sequence(self, sequence: bytes) -> None:
        self.reader.set_finish_sequence(sequence)

    def handle_message(self, message: Union[bytes, str]) -> int:
        """
        Frame one websocket message and deliver the results.

        Returns:
            Number of frames delivered to the callback
        """
        if isinstance(message, str):
            message = message.encode("utf-8")

        self.metrics.messages_received += 1
        self.metrics.bytes_received += len(message)

        delivered = 0
        for frame in self.reader.feed(message):
            if self.on_frame is not None:
                self.on_frame(frame)
            delivered += 1

        self.metrics.frames_delivered += delivered
        return delivered

    async def run(self) -> None:
        """
        Receive device data until stop() is called.

        A dropped link (handshake failure, refused connection, abnormal
        close) is retried after the configured backoff. An invalid URL
        or a failing callback ends the loop with the exception.
        """
        self._running = True
        self._stop_event.clear()

        logger.info(f"WebSocketTransport starting, connecting to {self.url}")

        while self._running:
            try:
                await self._connect_and_receive()
            except InvalidURI:
                raise
            except (WebSocketException, OSError, asyncio.TimeoutError) as e:
                logger.warning(f"Device link unavailable: {e}")

            if not self._running or not await self._wait_before_reconnect():
                break

        self._connected = False
        logger.info("WebSocketTransport stopped")

    async def stop(self) -> None:
        """Signal the run loop to exit and close the connection."""
        logger.info("WebSocketTransport stopping...")
        self._running = False
        self._stop_event.set()

        if self._websocket is not None:
            await self._websocket.close()

        self._connected = False

    async def _wait_before_reconnect(self) -> bool:
        """Back off; False when attempts are exhausted or stop() was called."""
        if (
            self.max_reconnect_attempts > 0
            and self.metrics.reconnect_count >= self.max_reconnect_attempts
        ):
            logger.error(
                f"Max reconnect attempts ({self.max_reconnect_attempts}) exceeded"
            )
            return False

        self.metrics.reconnect_count += 1
        backoff_sec = self.reconnect_backoff_ms / 1000.0
        logger.info(
            f"Reconnecting in {backoff_sec:.1f}s "
            f"(attempt {self.metrics.reconnect_count})"
        )

        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=backoff_sec)
            return False
        except asyncio.TimeoutError:
            return True

    async def _connect_and_receive(self) -> None:
        # Iteration ends on a normal close and raises ConnectionClosedError otherwise
        async with websockets.connect(
            self.url,
            ping_interval=20,
            ping_timeout=10,
            close_timeout=5,
        ) as ws:
            self._websocket = ws
            self._connected = True
            logger.info(f"Connected to device link: {self.url}")

            try:
                async for message in ws:
                    if not self._running:
                        break
                    self.handle_message(message)
                logger.info("Device link closed")
            finally:
                self._connected = False
                self._websocket = None
