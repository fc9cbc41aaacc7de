"""
Persisted Builder State
=======================

Settings that survive restarts: the operation mode and the path of the
last project file that loaded successfully.

Stored as YAML:
    operation_mode: ProjectFile
    schema_path: /home/user/projects/weather.json

The StateStore is injected into FrameBuilder, which saves after every
successful mode change or schema load.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from telemetry_frames.models.modes import OperationMode


logger = logging.getLogger(__name__)


class BuilderState(BaseModel):
    """
    Persisted frame builder state.

    Attributes:
        operation_mode: Last selected operation mode
        schema_path: Last successfully loaded project file ("" = none)
    """

    operation_mode: OperationMode = Field(
        default=OperationMode.QUICK_PLOT,
        description="Last selected operation mode",
    )
    schema_path: str = Field(
        default="",
        description="Last successfully loaded project file",
    )


class StateStore:
    """
    YAML-backed storage for BuilderState.

    A path of None keeps state in memory only.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path
        self.state = BuilderState()

    def load(self) -> BuilderState:
        """
        Read state from disk.

        A missing or unreadable file yields defaults.
        """
        if self.path is None or not Path(self.path).exists():
            self.state = BuilderState()
            return self.state

        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f) or {}
            self.state = BuilderState.model_validate(data)
            logger.info(f"Loaded builder state from: {self.path}")
        except (OSError, yaml.YAMLError, ValidationError) as e:
            logger.warning(f"Ignoring invalid builder state file {self.path}: {e}")
            self.state = BuilderState()

        return self.state

    def save(self) -> None:
        """Write the current state to disk."""
        if self.path is None:
            return

        path = Path(self.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(self.state.model_dump(mode="json"), f, sort_keys=False)

    def set_operation_mode(self, mode: OperationMode) -> None:
        self.state.operation_mode = OperationMode(mode)
        self.save()

    def set_schema_path(self, path: str) -> None:
        self.state.schema_path = path
        self.save()
