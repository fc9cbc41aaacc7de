"""
Test Configuration
==================

Pytest fixtures and test configuration for telemetry_frames.
"""

import json

import pytest


@pytest.fixture
def sample_project():
    """Provide a sample project document (2 groups, 5 datasets)."""
    return {
        "title": "Weather Station",
        "frameStart": "/*",
        "frameEnd": "*/",
        "groups": [
            {
                "title": "Environment",
                "widget": "datagrid",
                "datasets": [
                    {"title": "Temperature", "index": 1, "units": "C", "graph": True},
                    {"title": "Pressure", "index": 2, "units": "hPa"},
                    {"title": "Humidity", "index": 3, "units": "%"},
                ],
            },
            {
                "title": "Wind",
                "widget": "",
                "datasets": [
                    {"title": "Speed", "index": 4, "widget": "gauge", "min": 0, "max": 40},
                    {"title": "Direction", "index": 5, "widget": "compass"},
                ],
            },
        ],
    }


@pytest.fixture
def project_file(tmp_path, sample_project):
    """Write the sample project to disk and return its path."""
    path = tmp_path / "weather.json"
    path.write_text(json.dumps(sample_project))
    return str(path)


@pytest.fixture
def state_path(tmp_path):
    """Path for a persisted builder state file."""
    return str(tmp_path / "state" / "builder_state.yaml")


@pytest.fixture
def transport():
    """Transport that records the delimiters pushed to it."""
    from telemetry_frames.stream import NullTransport

    return NullTransport()


class RecordingParser:
    """Frame parser that records every text it is given."""

    def __init__(self, separator: str = ","):
        self.separator = separator
        self.calls = []

    def parse(self, text):
        self.calls.append(text)
        return text.split(self.separator)


@pytest.fixture
def recording_parser():
    return RecordingParser()


@pytest.fixture
def builder(transport, state_path, recording_parser):
    """FrameBuilder wired to a recording transport and parser."""
    from telemetry_frames.builder import FrameBuilder
    from telemetry_frames.state import StateStore

    return FrameBuilder(
        transport=transport,
        state_store=StateStore(state_path),
        parser=recording_parser,
    )
