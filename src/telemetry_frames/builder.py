"""
Frame Builder
=============

Service object that owns schema and mode state and turns raw device
messages into published frames.

Constructed once at startup and passed to every consumer; there is no
module-level instance.

Lifecycle:
    1. Persisted state is loaded from the injected StateStore
    2. The last project file (if any) is reloaded
    3. The last operation mode is re-applied, pushing delimiters
    4. read_data() is called for every complete message from the transport
    5. frame_ready emits one snapshot per accepted message

Signals:
    frame_ready(Frame)               - after every accepted message
    mode_changed(OperationMode)      - after every mode change
    schema_changed(SchemaInfo|None)  - after every load attempt
"""

import logging
from typing import Optional

from telemetry_frames.decoder.frame_decoder import FrameDecoder
from telemetry_frames.decoder.modes import OperationModeController
from telemetry_frames.decoder.parsing import FrameParser
from telemetry_frames.errors import SchemaError
from telemetry_frames.events import Signal
from telemetry_frames.models.frame import Frame
from telemetry_frames.models.modes import OperationMode
from telemetry_frames.schema.store import SchemaInfo, SchemaStore
from telemetry_frames.state import StateStore
from telemetry_frames.stream.transport import PlaybackSource, Transport


logger = logging.getLogger(__name__)


class FrameBuilder:
    """
    Single writer for schema, mode and decoded frames.

    Example:
        builder = FrameBuilder(
            transport=transport,
            state_store=StateStore("builder_state.yaml"),
            parser=SeparatorFrameParser(","),
        )
        builder.frame_ready.connect(dashboard.update)
        builder.load_schema("projects/weather.json")
        builder.set_operation_mode(OperationMode.PROJECT_FILE)
        builder.read_data(b"21.5,1013,40")
    """

    def __init__(
        self,
        transport: Transport,
        state_store: Optional[StateStore] = None,
        parser: Optional[FrameParser] = None,
        playback: Optional[PlaybackSource] = None,
        restore: bool = True,
    ) -> None:
        """
        Initialize frame builder.

        Args:
            transport: Device link receiving delimiter configuration
            state_store: Persisted mode / project path (in-memory if None)
            parser: Parsing capability for ProjectFile mode
            playback: Recorded-data source (never open if None)
            restore: Reload persisted project file and mode on startup
        """
        self.state_store = state_store if state_store is not None else StateStore()
        self.schema_store = SchemaStore()
        self.mode_controller = OperationModeController(transport)
        self.decoder = FrameDecoder(
            self.schema_store,
            self.mode_controller,
            parser=parser,
            playback=playback,
        )

        self.frame_ready: Signal[Frame] = Signal("frame_ready")
        self.schema_changed: Signal[Optional[SchemaInfo]] = Signal("schema_changed")

        self._latest_frame: Optional[Frame] = None
        self._published_count: int = 0

        if restore:
            self._restore()

    @property
    def mode_changed(self) -> Signal[OperationMode]:
        return self.mode_controller.mode_changed

    @property
    def operation_mode(self) -> OperationMode:
        return self.mode_controller.mode

    @property
    def latest_frame(self) -> Optional[Frame]:
        """Most recently published frame."""
        return self._latest_frame

    @property
    def published_count(self) -> int:
        return self._published_count

    @property
    def dropped_count(self) -> int:
        return self.decoder.dropped_count

    def set_parser(self, parser: Optional[FrameParser]) -> None:
        self.decoder.set_parser(parser)

    def load_schema(self, path: str) -> Optional[SchemaInfo]:
        """
        Load a project file and propagate its delimiters.

        On failure the schema is cleared and the persisted path reset.
        In ProjectFile mode the transport delimiters are emptied as well.

        Raises:
            SchemaIOError, SchemaParseError, SchemaStructuralError
        """
        if not path:
            return None

        try:
            info = self.schema_store.load(path)
        except SchemaError:
            self.state_store.set_schema_path("")
            self.mode_controller.apply_schema_delimiters(b"", b"")
            self.schema_changed.emit(None)
            raise

        self.state_store.set_schema_path(path)
        self.mode_controller.apply_schema_delimiters(info.frame_start, info.frame_end)
        self.schema_changed.emit(info)
        return info

    def set_operation_mode(self, mode: OperationMode) -> None:
        """Switch mode, reconfigure the transport and persist the choice."""
        self.mode_controller.set_mode(
            mode,
            frame_start=self.schema_store.frame_start,
            frame_end=self.schema_store.frame_end,
        )
        self.state_store.set_operation_mode(self.mode_controller.mode)

    def read_data(self, data: bytes) -> Optional[Frame]:
        """
        Decode one complete device message and publish the result.

        Args:
            data: Raw message bytes from the transport

        Returns:
            The published frame, or None if the message was dropped
        """
        frame = self.decoder.decode(data)
        if frame is None:
            return None

        self._latest_frame = frame
        self._published_count += 1
        self.frame_ready.emit(frame)
        return frame

    def metrics(self) -> dict:
        return {
            "operation_mode": self.operation_mode.value,
            "schema_loaded": self.schema_store.is_loaded,
            "frames_published": self._published_count,
            "frames_dropped": self.decoder.dropped_count,
            "subscribers": self.frame_ready.subscriber_count,
        }

    def _restore(self) -> None:
        state = self.state_store.load()

        if state.schema_path:
            try:
                self.load_schema(state.schema_path)
            except SchemaError as e:
                logger.warning(f"Could not restore project file: {e}")

        self.set_operation_mode(state.operation_mode)
