"""
Operation Mode Controller
=========================

Holds the active operation mode and keeps transport framing in sync.

Delimiter Table:
    DeviceSendsJSON -> start = b"", finish = b""
    ProjectFile     -> start/finish from the loaded project file
    QuickPlot       -> start = b"", finish = b""

Persisting the selection is FrameBuilder's job; the controller only
pushes delimiters and notifies subscribers.
"""

import logging

from telemetry_frames.events import Signal
from telemetry_frames.models.modes import OperationMode
from telemetry_frames.stream.transport import Transport


logger = logging.getLogger(__name__)


class OperationModeController:
    """
    Owner of the active operation mode.

    Attributes:
        mode: Active operation mode
        mode_changed: Signal emitted after every set_mode call
    """

    def __init__(
        self,
        transport: Transport,
        mode: OperationMode = OperationMode.QUICK_PLOT,
    ) -> None:
        self.transport = transport
        self._mode = OperationMode(mode)
        self.mode_changed: Signal[OperationMode] = Signal("mode_changed")

    @property
    def mode(self) -> OperationMode:
        return self._mode

    def set_mode(
        self,
        mode: OperationMode,
        frame_start: bytes = b"",
        frame_end: bytes = b"",
    ) -> None:
        """
        Switch mode and reconfigure transport delimiters.

        Args:
            mode: New operation mode (names are accepted as well)
            frame_start: Active schema's start delimiter
            frame_end: Active schema's end delimiter

        Raises:
            ValueError: If ``mode`` is not a known operation mode
        """
        mode = OperationMode(mode)
        self._mode = mode

        if mode == OperationMode.PROJECT_FILE:
            self._push_delimiters(frame_start, frame_end)
        else:
            self._push_delimiters(b"", b"")

        logger.info(f"Operation mode set to {mode.value}")
        self.mode_changed.emit(mode)

    def apply_schema_delimiters(self, frame_start: bytes, frame_end: bytes) -> bool:
        """
        Push a newly loaded schema's delimiters if ProjectFile is active.

        Returns:
            True if the transport was reconfigured
        """
        if self._mode != OperationMode.PROJECT_FILE:
            return False

        self._push_delimiters(frame_start, frame_end)
        return True

    def _push_delimiters(self, frame_start: bytes, frame_end: bytes) -> None:
        self.transport.set_finish_sequence(frame_end)
        self.transport.set_start_sequence(frame_start)
        logger.debug(f"Transport delimiters: start={frame_start!r} end={frame_end!r}")
