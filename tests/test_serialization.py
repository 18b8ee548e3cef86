"""Tests for JSON import and export."""

import json

import pytest

from vertexdb import ParseError, SchemaValidationError


class TestToJson:
    """Tests for to_json."""

    def test_export_is_indented_array(self, seeded_db):
        """Test rows are exported as a two-space indented JSON array."""
        text = seeded_db.to_json("users")

        assert json.loads(text)[0]["name"] == "John Doe"
        assert text.startswith('[\n  {\n    "id": 1')

    def test_export_honours_query(self, seeded_db):
        """Test only matching rows are exported."""
        text = seeded_db.where("id", 2).to_json("users")

        assert [row["id"] for row in json.loads(text)] == [2]

    def test_export_skips_soft_deleted(self, soft_db):
        """Test soft-deleted rows are not exported."""
        soft_db.set_table("t", [{"id": 1}, {"id": 2}])
        soft_db.where("id", 1).delete("t")

        assert json.loads(soft_db.to_json("t")) == [{"id": 2}]


class TestFromJson:
    """Tests for from_json."""

    def test_import_replaces_rows(self, seeded_db):
        """Test an export can be loaded into another table."""
        seeded_db.from_json("copy", seeded_db.to_json("posts"))

        assert seeded_db.get("copy") == seeded_db.get("posts")

    def test_invalid_json(self, db):
        """Test malformed text raises ParseError and records the cause."""
        with pytest.raises(ParseError, match="Invalid JSON data"):
            db.from_json("t", "{not json")

        assert isinstance(db.get_last_error(), json.JSONDecodeError)
        assert "t" not in db

    @pytest.mark.parametrize("text", ['{"id": 1}', "[1, 2]", '"rows"'])
    def test_non_array_of_objects(self, db, text):
        """Test valid JSON that is not a list of objects is rejected."""
        with pytest.raises(ParseError):
            db.from_json("t", text)

        assert db.get_last_error() is not None

    def test_import_validates_schema(self, seeded_db):
        """Test imported rows are checked against the stored schema."""
        with pytest.raises(SchemaValidationError):
            seeded_db.from_json("users", '[{"id": 9, "name": "No Email"}]')

        assert seeded_db.count("users") == 2

    def test_last_error_starts_empty(self, db):
        """Test no error is recorded before a failure."""
        assert db.get_last_error() is None
