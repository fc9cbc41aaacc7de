"""
Schema Store
============

Loads, validates and holds the active project file as a Frame template.

Design Rules:
    - The replacement Frame is fully built before it is installed
    - The active Frame is cleared to empty before the swap, so a reader
      sees either the old schema, empty, or the new schema
    - Any failure leaves the store empty (no schema loaded)
    - Does NOT touch the transport or persisted settings; FrameBuilder
      propagates delimiters and the schema path
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from telemetry_frames.errors import (
    SchemaIOError,
    SchemaParseError,
    SchemaStructuralError,
)
from telemetry_frames.models.frame import Frame
from telemetry_frames.models.modes import DecoderMethod


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SchemaInfo:
    """
    Summary of a successfully loaded project file.

    Attributes:
        path: File path the schema was loaded from
        title: Frame title
        group_count: Number of groups
        dataset_count: Total number of datasets
        frame_start: Start delimiter to push to the transport
        frame_end: End delimiter to push to the transport
        decoder: Text representation for ProjectFile mode
    """

    path: str
    title: str
    group_count: int
    dataset_count: int
    frame_start: bytes
    frame_end: bytes
    decoder: DecoderMethod

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "title": self.title,
            "group_count": self.group_count,
            "dataset_count": self.dataset_count,
            "frame_start": self.frame_start.decode("utf-8", errors="replace"),
            "frame_end": self.frame_end.decode("utf-8", errors="replace"),
            "decoder": self.decoder.name,
        }


def format_validation_error(error: ValidationError) -> str:
    """Condense a pydantic error into a single readable line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item["loc"]) or "<root>"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class SchemaStore:
    """
    Holder of the active schema template.

    The held Frame is mutated in place by the decoder's mutation pass
    and replaced wholesale on reload.

    Example:
        store = SchemaStore()
        info = store.load("projects/weather.json")
        print(info.group_count, store.frame.title)
    """

    def __init__(self) -> None:
        self._frame: Frame = Frame.empty()
        self._path: Optional[str] = None

    @property
    def frame(self) -> Frame:
        """Active schema template (empty when nothing is loaded)."""
        return self._frame

    @property
    def is_loaded(self) -> bool:
        return self._path is not None and self._frame.is_valid

    @property
    def path(self) -> Optional[str]:
        return self._path

    @property
    def filename(self) -> str:
        if self._path is None:
            return ""
        return Path(self._path).name

    @property
    def frame_start(self) -> bytes:
        return self._frame.frame_start

    @property
    def frame_end(self) -> bytes:
        return self._frame.frame_end

    @property
    def decoder_method(self) -> DecoderMethod:
        return self._frame.decoder

    def clear(self) -> None:
        """Drop the active schema."""
        self._frame = Frame.empty()
        self._path = None

    def load(self, path: str) -> Optional[SchemaInfo]:
        """
        Open, validate and install the project file at ``path``.

        An empty path is ignored.

        Args:
            path: Path to a JSON project file

        Returns:
            SchemaInfo on success, None if ``path`` is empty

        Raises:
            SchemaIOError: File cannot be read
            SchemaParseError: File is not valid JSON
            SchemaStructuralError: JSON does not describe a valid frame
        """
        if not path:
            return None

        try:
            frame = self._read(path)
        except (SchemaIOError, SchemaParseError, SchemaStructuralError) as e:
            self.clear()
            logger.error(f"Failed to load project file: {e}")
            raise

        # Swap: old schema cleared, then replacement installed
        self.clear()
        self._frame = frame
        self._path = path

        info = SchemaInfo(
            path=path,
            title=frame.title,
            group_count=frame.group_count,
            dataset_count=frame.dataset_count,
            frame_start=frame.frame_start,
            frame_end=frame.frame_end,
            decoder=frame.decoder,
        )
        logger.info(
            f"Loaded project '{info.title}' from {path}: "
            f"{info.group_count} groups, {info.dataset_count} datasets"
        )
        return info

    def _read(self, path: str) -> Frame:
        """Read and validate without touching the active schema."""
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise SchemaIOError(path, f"cannot read file: {e}")

        try:
            document = json.loads(data)
        except (ValueError, RecursionError) as e:
            raise SchemaParseError(path, str(e) or type(e).__name__)

        try:
            return Frame.from_document(document)
        except ValidationError as e:
            raise SchemaStructuralError(path, format_validation_error(e))
