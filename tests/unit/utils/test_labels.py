"""Unit tests for label encoding."""

from types import SimpleNamespace

from ghsync.utils.labels import decode_labels, encode_labels


class TestEncodeLabels:
    """Tests for encode_labels."""

    def test_label_objects(self) -> None:
        labels = [
            {"id": 1, "name": "type/feature", "color": "ededed"},
            {"id": 2, "name": "status/can-merge"},
        ]

        assert encode_labels(labels) == "type/feature,status/can-merge"

    def test_mixed_names_and_attribute_objects(self) -> None:
        labels = ["sig/planner", SimpleNamespace(name="priority/high")]

        assert encode_labels(labels) == "sig/planner,priority/high"

    def test_no_labels(self) -> None:
        assert encode_labels([]) == ""

    def test_label_without_name_keeps_its_slot(self) -> None:
        assert encode_labels([{"name": "a"}, {"id": 3}, {"name": "b"}]) == "a,,b"


class TestDecodeLabels:
    """Tests for decode_labels."""

    def test_splits_names(self) -> None:
        assert decode_labels("type/feature,status/can-merge") == [
            "type/feature",
            "status/can-merge",
        ]

    def test_empty_values(self) -> None:
        assert decode_labels("") == []
        assert decode_labels(None) == []
