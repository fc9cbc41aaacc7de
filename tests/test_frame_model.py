"""
Frame Model Tests
=================

Validation, group id assignment and the in-place mutation pass.
"""

import pytest
from pydantic import ValidationError

from telemetry_frames.models import DecoderMethod, Frame


class TestFrameDocument:
    """Tests for building frames from JSON documents."""

    def test_counts_and_indices_preserved(self, sample_project):
        """Verify group/dataset counts and indices survive validation."""
        frame = Frame.from_document(sample_project)

        assert frame.group_count == 2
        assert frame.dataset_count == 5
        assert [d.index for d in frame.iter_datasets()] == [1, 2, 3, 4, 5]
        assert frame.frame_start == b"/*"
        assert frame.frame_end == b"*/"
        assert frame.decoder == DecoderMethod.PLAIN_TEXT

    def test_group_ids_assigned_positionally(self, sample_project):
        """Verify every dataset carries its owning group's id."""
        frame = Frame.from_document(sample_project)

        assert [g.group_id for g in frame.groups] == [0, 1]
        assert all(d.group_id == 1 for d in frame.groups[1].datasets)

    def test_optional_metadata(self, sample_project):
        """Verify camelCase and short keys map to dataset fields."""
        sample_project["groups"][0]["datasets"][0]["displayInOverview"] = True
        frame = Frame.from_document(sample_project)

        temperature = frame.groups[0].datasets[0]
        speed = frame.groups[1].datasets[0]
        assert temperature.display_in_overview is True
        assert temperature.graph is True
        assert temperature.units == "C"
        assert speed.widget == "gauge"
        assert speed.max_value == 40.0

    def test_numeric_values_coerced_to_text(self, sample_project):
        """Verify numeric dataset values become text."""
        sample_project["groups"][0]["datasets"][0]["value"] = 21.5
        sample_project["groups"][0]["datasets"][1]["value"] = 1013
        frame = Frame.from_document(sample_project)

        assert frame.groups[0].datasets[0].value == "21.5"
        assert frame.groups[0].datasets[1].value == "1013"

    def test_decoder_method_read(self, sample_project):
        sample_project["decoder"] = 1
        frame = Frame.from_document(sample_project)
        assert frame.decoder == DecoderMethod.HEXADECIMAL

    def test_missing_title_rejected(self, sample_project):
        del sample_project["title"]
        with pytest.raises(ValidationError):
            Frame.from_document(sample_project)

    def test_empty_groups_rejected(self, sample_project):
        sample_project["groups"] = []
        with pytest.raises(ValidationError):
            Frame.from_document(sample_project)

    def test_missing_group_widget_rejected(self, sample_project):
        del sample_project["groups"][0]["widget"]
        with pytest.raises(ValidationError):
            Frame.from_document(sample_project)

    def test_missing_dataset_index_rejected(self, sample_project):
        del sample_project["groups"][1]["datasets"][0]["index"]
        with pytest.raises(ValidationError):
            Frame.from_document(sample_project)

    @pytest.mark.parametrize("index", ["3", 2.5, -1])
    def test_non_integer_index_rejected(self, sample_project, index):
        """Verify indices must be non-negative integers."""
        sample_project["groups"][0]["datasets"][0]["index"] = index
        with pytest.raises(ValidationError):
            Frame.from_document(sample_project)

    def test_root_must_be_object(self):
        with pytest.raises(ValidationError):
            Frame.from_document([1, 2, 3])


class TestMutationPass:
    """Tests for Frame.apply_fields."""

    def test_in_range_index_updated(self, sample_project):
        """Verify index=2 receives the second field."""
        frame = Frame.from_document(sample_project)

        frame.apply_fields(["10", "20", "30"])

        assert frame.groups[0].datasets[1].value == "20"

    def test_out_of_range_index_keeps_stale_value(self, sample_project):
        """Verify index=5 keeps its previous value with only 3 fields."""
        frame = Frame.from_document(sample_project)
        direction = frame.groups[1].datasets[1]
        direction.value = "NW"

        updated = frame.apply_fields(["10", "20", "30"])

        assert direction.value == "NW"
        assert updated == 3

    def test_unassigned_index_never_written(self, sample_project):
        sample_project["groups"][0]["datasets"][0]["index"] = 0
        frame = Frame.from_document(sample_project)

        frame.apply_fields(["10", "20", "30"])

        assert frame.groups[0].datasets[0].value == ""

    def test_structure_unchanged(self, sample_project):
        """Verify the mutation pass never reallocates datasets."""
        frame = Frame.from_document(sample_project)
        before = [id(d) for d in frame.iter_datasets()]

        frame.apply_fields([str(i) for i in range(20)])

        assert [id(d) for d in frame.iter_datasets()] == before
        assert frame.dataset_count == 5

    def test_shared_index(self, sample_project):
        """Verify several datasets may read the same field."""
        sample_project["groups"][1]["datasets"][0]["index"] = 1
        frame = Frame.from_document(sample_project)

        frame.apply_fields(["7", "8", "9", "10", "11"])

        assert frame.groups[0].datasets[0].value == "7"
        assert frame.groups[1].datasets[0].value == "7"


class TestSnapshot:
    """Tests for empty frames and snapshots."""

    def test_empty_frame_invalid(self):
        frame = Frame.empty()
        assert not frame.is_valid
        assert frame.group_count == 0
        assert frame.dataset_count == 0

    def test_snapshot_is_independent(self, sample_project):
        frame = Frame.from_document(sample_project)
        snapshot = frame.snapshot()

        snapshot.groups[0].datasets[0].value = "changed"

        assert frame.groups[0].datasets[0].value == ""

    def test_json_dict_uses_document_keys(self, sample_project):
        data = Frame.from_document(sample_project).to_json_dict()

        assert data["frameStart"] == "/*"
        assert "displayInOverview" in data["groups"][0]["datasets"][0]
        assert data["groups"][1]["datasets"][0]["groupId"] == 1
