"""
Frame Model
===========

Structural entities of a telemetry frame: Frame → Group → Dataset.

A Frame is used two ways:
    - as a schema template, loaded once from a project file and then
      mutated in place (only ``Dataset.value`` changes per message)
    - as a decoded snapshot, published to subscribers after every
      accepted message

Document Format (camelCase keys):
    {
        "title": "Weather Station",
        "frameStart": "/*",
        "frameEnd": "*/",
        "decoder": 0,
        "groups": [
            {
                "title": "Environment",
                "widget": "datagrid",
                "datasets": [
                    {"title": "Temperature", "index": 1, "units": "°C", "graph": true}
                ]
            }
        ]
    }

Design Rules:
    - Shape (group count, dataset count, indices) is fixed once validated
    - Group ids are positional and every dataset carries its group's id
    - Published frames are deep copies, never the live template
"""

from typing import Any, Iterator, List, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    field_validator,
)
from pydantic.alias_generators import to_camel

from telemetry_frames.models.modes import DecoderMethod


_MODEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Dataset(BaseModel):
    """
    One named, indexed value within a group.

    Attributes:
        group_id: Id of the owning group
        index: 1-based position in the decoded field list (0 = unassigned)
        title: Display name
        value: Latest decoded text
        widget: Widget kind used to render the value
        graph: Whether the value is plotted over time
        display_in_overview: Whether the value is promoted to the overview
        units: Measurement units label
        min_value: Lower bound for gauges/bars
        max_value: Upper bound for gauges/bars
        alarm: Alarm threshold for gauges/bars
        fft: Whether an FFT plot is shown
        led: Whether the value drives an LED indicator
        log: Whether the value is plotted on a log scale
    """

    model_config = _MODEL_CONFIG

    group_id: int = Field(default=0, description="Owning group id")
    index: StrictInt = Field(..., ge=0, description="Position in field list")
    title: str = Field(..., description="Display name")
    value: str = Field(default="", description="Latest decoded text")
    widget: str = Field(default="", description="Widget kind")
    graph: bool = Field(default=False, description="Plot over time")
    display_in_overview: bool = Field(default=False)
    units: str = Field(default="")
    min_value: float = Field(default=0.0, alias="min")
    max_value: float = Field(default=0.0, alias="max")
    alarm: float = Field(default=0.0)
    fft: bool = Field(default=False)
    led: bool = Field(default=False)
    log: bool = Field(default=False)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> Any:
        """Devices sending JSON may emit numbers or booleans as values."""
        if v is None:
            return ""
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v


class Group(BaseModel):
    """
    Named, widget-tagged collection of datasets displayed together.

    Attributes:
        group_id: Positional id within the owning frame
        title: Display name
        widget: Widget kind (may be empty)
        datasets: Ordered datasets
    """

    model_config = _MODEL_CONFIG

    group_id: int = Field(default=0)
    title: str = Field(default="")
    widget: str = Field(..., description="Widget kind (may be empty)")
    datasets: List[Dataset] = Field(...)

    @property
    def dataset_count(self) -> int:
        return len(self.datasets)


class Frame(BaseModel):
    """
    One schema template or decoded snapshot.

    Attributes:
        title: Frame title (required, non-empty)
        groups: Ordered groups (required, non-empty)
        frame_start: Start delimiter for ProjectFile mode
        frame_end: End delimiter for ProjectFile mode
        decoder: Text representation used in ProjectFile mode
    """

    model_config = _MODEL_CONFIG

    title: str = Field(..., min_length=1)
    groups: List[Group] = Field(..., min_length=1)
    frame_start: bytes = Field(default=b"")
    frame_end: bytes = Field(default=b"")
    decoder: DecoderMethod = Field(default=DecoderMethod.PLAIN_TEXT)

    @classmethod
    def empty(cls) -> "Frame":
        """Return a cleared frame holding no structure."""
        return cls.model_construct(
            title="",
            groups=[],
            frame_start=b"",
            frame_end=b"",
            decoder=DecoderMethod.PLAIN_TEXT,
        )

    @classmethod
    def from_document(cls, document: Any) -> "Frame":
        """
        Validate a parsed JSON document and build a Frame from it.

        Group ids are assigned positionally and propagated to datasets.

        Raises:
            pydantic.ValidationError: If the document has the wrong shape
        """
        frame = cls.model_validate(document)
        for group_id, group in enumerate(frame.groups):
            group.group_id = group_id
            for dataset in group.datasets:
                dataset.group_id = group_id
        return frame

    @property
    def is_valid(self) -> bool:
        return bool(self.title) and len(self.groups) > 0

    @property
    def group_count(self) -> int:
        return len(self.groups)

    @property
    def dataset_count(self) -> int:
        return sum(group.dataset_count for group in self.groups)

    def iter_datasets(self) -> Iterator[Dataset]:
        """Yield every dataset in group order, then dataset order."""
        for group in self.groups:
            yield from group.datasets

    def apply_fields(self, fields: Sequence[str]) -> int:
        """
        Overwrite dataset values in place from a decoded field list.

        Datasets whose index falls outside ``1..len(fields)`` keep their
        previous value. Structure is never touched.

        Returns:
            Number of datasets updated
        """
        count = len(fields)
        updated = 0
        for dataset in self.iter_datasets():
            if 0 < dataset.index <= count:
                dataset.value = fields[dataset.index - 1]
                updated += 1
        return updated

    def snapshot(self) -> "Frame":
        """Deep copy whose mutation window is independent of this frame."""
        return self.model_copy(deep=True)

    def to_json_dict(self) -> dict:
        """Serialize using document (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)
