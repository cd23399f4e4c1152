"""Tests for core data models."""

from __future__ import annotations

from pathlib import Path

import pytest

from brainindex.models import CategorySnapshot, IndexSnapshot, Record, SourceFile


class TestRecord:
    """Test the Record field accessor."""

    @pytest.mark.parametrize("value", [None, "", 0, 0.0, False])
    def test_falsy_values_are_absent(self, value) -> None:
        """Should treat JSON-falsy values as absent."""
        record = Record({"name": value})

        assert not record.has("name")
        assert record.get_field("name") is None
        assert record.get_text("name") is None

    @pytest.mark.parametrize("value", ["x", 1, True, [], {}])
    def test_present_values(self, value) -> None:
        """Should treat non-empty scalars and any container as present."""
        assert Record({"name": value}).has("name")

    def test_missing_field(self) -> None:
        """Should report a missing field as absent."""
        assert not Record({}).has("title")

    def test_get_text_joins_arrays(self) -> None:
        """Should join array values with spaces."""
        record = Record({"tags": ["widget", "create", 3, None, True]})

        assert record.get_text("tags") == "widget create 3  true"

    def test_get_text_scalars(self) -> None:
        """Should render numbers and objects as text."""
        record = Record({"version": 2.0, "meta": {"a": 1}})

        assert record.get_text("version") == "2"
        assert record.get_text("meta") == '{"a":1}'

    def test_identifier_precedence(self) -> None:
        """Should prefer id, then name, then title."""
        assert Record({"id": "r1", "name": "n", "title": "t"}).identifier() == "r1"
        assert Record({"id": "", "name": "n", "title": "t"}).identifier() == "n"
        assert Record({"title": "t"}).identifier() == "t"
        assert Record({"body": "b"}).identifier() is None

    def test_mapping_behaviour(self) -> None:
        """Should behave as a read-only mapping."""
        record = Record({"name": "Widget"})

        assert record["name"] == "Widget"
        assert dict(record) == {"name": "Widget"}
        assert len(record) == 1

    def test_annotated_adds_source(self) -> None:
        """Should copy fields and add the source path."""
        record = Record({"name": "Widget"})

        annotated = record.annotated(Path("/brain/apis/a.json"))

        assert annotated == {"name": "Widget", "_source": "/brain/apis/a.json"}
        assert "_source" not in record


class TestSnapshots:
    """Test snapshot containers."""

    def test_add_posting_is_idempotent(self) -> None:
        """Should not duplicate a file in a posting list."""
        snapshot = CategorySnapshot()

        snapshot.add_posting("widget", "a.json")
        snapshot.add_posting("widget", "b.json")
        snapshot.add_posting("widget", "a.json")

        assert snapshot.keywords == {"widget": ["a.json", "b.json"]}

    def test_total_records(self) -> None:
        """Should sum record counts across files."""
        snapshot = CategorySnapshot()
        for name, count in (("a.json", 2), ("b.json", 3)):
            snapshot.files[name] = SourceFile(
                file=name, path=Path(name), category="apis", size=10, records=count, indexed_at="now"
            )

        assert snapshot.total_records == 5

    def test_index_snapshot_defaults(self) -> None:
        """Should start empty and not ready."""
        snapshot = IndexSnapshot()

        assert snapshot.ready is False
        assert snapshot.rebuilt_at is None
        assert set(snapshot.categories) == {"apis", "docs", "concepts"}
        assert snapshot.unique_keywords == 0
