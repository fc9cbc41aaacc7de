"""
Schema Store Tests
==================

Loading, validation failures and copy-then-swap replacement.
"""

import json
from pathlib import Path

import pytest

from telemetry_frames.errors import (
    SchemaError,
    SchemaIOError,
    SchemaParseError,
    SchemaStructuralError,
)
from telemetry_frames.schema import SchemaStore


class TestSchemaLoad:
    """Tests for successful loads."""

    def test_load_returns_info(self, project_file):
        """Verify load reports counts and delimiters."""
        store = SchemaStore()

        info = store.load(project_file)

        assert info.title == "Weather Station"
        assert info.group_count == 2
        assert info.dataset_count == 5
        assert info.frame_start == b"/*"
        assert info.frame_end == b"*/"
        assert store.is_loaded
        assert store.path == project_file
        assert store.filename == "weather.json"

    def test_empty_path_ignored(self):
        store = SchemaStore()
        assert store.load("") is None
        assert not store.is_loaded

    def test_reload_replaces_schema(self, tmp_path, project_file, sample_project):
        """Verify a second load swaps in the new schema wholesale."""
        store = SchemaStore()
        store.load(project_file)
        old_frame = store.frame

        sample_project["title"] = "Rover"
        sample_project["groups"] = sample_project["groups"][:1]
        other = tmp_path / "rover.json"
        other.write_text(json.dumps(sample_project))

        info = store.load(str(other))

        assert store.frame is not old_frame
        assert store.frame.title == "Rover"
        assert info.group_count == 1
        assert store.frame.dataset_count == 3

    def test_missing_delimiters_default_empty(self, tmp_path, sample_project):
        del sample_project["frameStart"]
        del sample_project["frameEnd"]
        path = tmp_path / "plain.json"
        path.write_text(json.dumps(sample_project))

        info = SchemaStore().load(str(path))

        assert info.frame_start == b""
        assert info.frame_end == b""


class TestSchemaErrors:
    """Tests for failed loads."""

    def test_bad_syntax_clears_previous_schema(self, tmp_path, project_file):
        """Verify malformed JSON raises SchemaParseError and clears the store."""
        store = SchemaStore()
        store.load(project_file)
        broken = tmp_path / "broken.json"
        broken.write_text('{"title": "Broken", "groups": [')

        with pytest.raises(SchemaParseError):
            store.load(str(broken))

        assert not store.is_loaded
        assert store.frame.group_count == 0
        assert store.path is None

    def test_oversized_integer_is_parse_error(self, tmp_path, project_file):
        """Verify integer literals past the digit limit raise SchemaParseError."""
        store = SchemaStore()
        store.load(project_file)
        huge = tmp_path / "huge.json"
        huge.write_text('{"title": ' + "1" * 5000 + "}")

        with pytest.raises(SchemaParseError):
            store.load(str(huge))

        assert not store.is_loaded
        assert store.path is None

    def test_deep_nesting_is_parse_error(self, tmp_path):
        nested = tmp_path / "nested.json"
        nested.write_text("[" * 200000)

        with pytest.raises(SchemaParseError):
            SchemaStore().load(str(nested))

    def test_structural_error(self, tmp_path, sample_project):
        sample_project["groups"][0]["datasets"][0]["index"] = "one"
        path = tmp_path / "bad_index.json"
        path.write_text(json.dumps(sample_project))
        store = SchemaStore()

        with pytest.raises(SchemaStructuralError) as excinfo:
            store.load(str(path))

        assert "index" in excinfo.value.message
        assert not store.is_loaded

    def test_empty_groups_is_structural(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"title": "Empty", "groups": []}))

        with pytest.raises(SchemaStructuralError):
            SchemaStore().load(str(path))

    def test_missing_file_is_io_error(self, tmp_path, project_file):
        store = SchemaStore()
        store.load(project_file)

        with pytest.raises(SchemaIOError):
            store.load(str(tmp_path / "missing.json"))

        assert not store.is_loaded

    def test_errors_share_base_class(self, tmp_path):
        with pytest.raises(SchemaError):
            SchemaStore().load(str(tmp_path / "missing.json"))


class TestBundledProject:
    """Tests for the example project shipped under data/projects."""

    def test_weather_station_loads(self):
        path = Path(__file__).parent.parent / "data" / "projects" / "weather_station.json"

        info = SchemaStore().load(str(path))

        assert info.group_count == 2
        assert info.dataset_count == 5
        assert info.frame_end == b"*/"
