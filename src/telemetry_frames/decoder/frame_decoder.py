"""
Frame Decoder
=============

Turns one raw device message into a ready-to-publish Frame.

Strategies (selected by the active operation mode):
    DeviceSendsJSON:
        Message is a complete JSON frame. Malformed messages are dropped
        silently; noisy live links would otherwise flood the log.
    ProjectFile:
        Message is converted to text with the project's decoder method,
        split by the parsing capability, and written into the schema
        template by the mutation pass. During CSV playback the message is
        literal comma-separated text and the parser is bypassed.
    QuickPlot:
        Message is split on commas and a fresh frame is synthesized.

Design Rules:
    - One message is fully decoded before the next is accepted
    - The schema template's structure is never modified here
    - Returned frames are independent snapshots
"""

import base64
import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from telemetry_frames.decoder.modes import OperationModeController
from telemetry_frames.decoder.parsing import FrameParser
from telemetry_frames.decoder.quickplot import synthesize_quick_plot
from telemetry_frames.errors import FrameParseError
from telemetry_frames.models.frame import Frame
from telemetry_frames.models.modes import DecoderMethod, OperationMode
from telemetry_frames.schema.store import SchemaStore, format_validation_error
from telemetry_frames.stream.transport import NullPlayback, PlaybackSource


logger = logging.getLogger(__name__)


def decode_text(data: bytes, method: DecoderMethod) -> str:
    """
    Convert raw bytes to the text handed to the parsing capability.

    Args:
        data: Raw frame bytes
        method: Text representation configured by the project

    Returns:
        Decoded text (invalid UTF-8 sequences replaced)
    """
    if method == DecoderMethod.HEXADECIMAL:
        return data.hex()
    if method == DecoderMethod.BASE64:
        return base64.b64encode(data).decode("ascii")
    return data.decode("utf-8", errors="replace")


def split_csv_bytes(data: bytes) -> List[str]:
    """Split a raw message on commas, decoding each field as UTF-8."""
    return [field.decode("utf-8", errors="replace") for field in data.split(b",")]


def split_playback_text(data: bytes) -> List[str]:
    """Split a recorded CSV row after collapsing whitespace."""
    text = " ".join(data.decode("utf-8", errors="replace").split())
    return text.split(",")


def parse_json_frame(data: bytes) -> Frame:
    """
    Decode a DeviceSendsJSON message.

    Raises:
        FrameParseError: If the message is not a valid JSON frame
    """
    try:
        document = json.loads(data)
    except (ValueError, RecursionError) as e:
        # Covers oversized integer literals and excessive nesting
        raise FrameParseError(f"invalid JSON: {e}")

    try:
        return Frame.from_document(document)
    except ValidationError as e:
        raise FrameParseError(format_validation_error(e))


class FrameDecoder:
    """
    Mode-dispatching decoder.

    Attributes:
        schema_store: Holder of the ProjectFile schema template
        mode_controller: Source of the active operation mode
        parser: Parsing capability for ProjectFile mode (optional)
        playback: Recorded-data source that bypasses the parser
        dropped_count: Messages dropped since construction

    Example:
        decoder = FrameDecoder(store, controller, parser=SeparatorFrameParser())
        frame = decoder.decode(b"/*21.5,1013,40*/")
        if frame is not None:
            publish(frame)
    """

    def __init__(
        self,
        schema_store: SchemaStore,
        mode_controller: OperationModeController,
        parser: Optional[FrameParser] = None,
        playback: Optional[PlaybackSource] = None,
    ) -> None:
        self.schema_store = schema_store
        self.mode_controller = mode_controller
        self.parser = parser
        self.playback = playback if playback is not None else NullPlayback()
        self.dropped_count: int = 0

    def set_parser(self, parser: Optional[FrameParser]) -> None:
        """Register the parsing capability (None unregisters it)."""
        self.parser = parser

    def decode(self, data: bytes) -> Optional[Frame]:
        """
        Decode one raw message according to the active mode.

        Args:
            data: One complete device message (delimiters already stripped)

        Returns:
            Frame to publish, or None if the message was dropped
        """
        if not data:
            return None

        mode = self.mode_controller.mode
        if mode == OperationMode.DEVICE_SENDS_JSON:
            frame = self._decode_json(data)
        elif mode == OperationMode.PROJECT_FILE:
            frame = self._decode_project(data)
        else:
            frame = synthesize_quick_plot(split_csv_bytes(data))

        if frame is None:
            self.dropped_count += 1
        return frame

    def _decode_json(self, data: bytes) -> Optional[Frame]:
        try:
            return parse_json_frame(data)
        except FrameParseError as e:
            logger.debug(f"Dropping JSON frame: {e}")
            return None

    def _decode_project(self, data: bytes) -> Optional[Frame]:
        if not self.schema_store.is_loaded or self.parser is None:
            logger.debug("Dropping frame: no project loaded or no parser registered")
            return None

        if self.playback.is_open:
            fields = split_playback_text(data)
        else:
            text = decode_text(data, self.schema_store.decoder_method)
            try:
                fields = self.parser.parse(text)
            except Exception as e:
                logger.error(f"Frame parser failed, dropping frame: {e}")
                return None

        frame = self.schema_store.frame
        updated = frame.apply_fields(fields)
        logger.debug(f"Mutation pass: {len(fields)} fields, {updated} datasets updated")
        return frame.snapshot()
