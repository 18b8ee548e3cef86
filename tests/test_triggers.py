"""Tests for row-level triggers."""

import pytest

from vertexdb import (
    AUTO_INCREMENT,
    TableNotFoundError,
    TriggerAlreadyExistsError,
    TriggerEvent,
    TriggerNotFoundError,
    VertexDB,
)


class TestTriggerRegistration:
    """Tests for creating and dropping triggers."""

    def test_duplicate_name(self, seeded_db):
        """Test trigger names are unique per table."""
        seeded_db.create_trigger("users", "audit", lambda event: None)

        with pytest.raises(TriggerAlreadyExistsError):
            seeded_db.create_trigger("users", "audit", lambda event: None)

    def test_same_name_on_other_table(self, seeded_db):
        """Test the same name may be used on another table."""
        seeded_db.create_trigger("users", "audit", lambda event: None)
        seeded_db.create_trigger("posts", "audit", lambda event: None)

    def test_create_on_missing_table(self, db):
        """Test triggers need an existing table."""
        with pytest.raises(TableNotFoundError):
            db.create_trigger("ghost", "audit", lambda event: None)

    def test_drop_missing_trigger(self, seeded_db):
        """Test dropping an unknown trigger fails."""
        with pytest.raises(TriggerNotFoundError):
            seeded_db.drop_trigger("users", "audit")
        with pytest.raises(TriggerNotFoundError):
            seeded_db.drop_trigger("ghost", "audit")

    def test_drop_clears_every_trigger_on_table(self, seeded_db):
        """Test dropping one trigger removes all triggers of that table."""
        calls = []
        seeded_db.create_trigger("users", "first", lambda event: calls.append("first"))
        seeded_db.create_trigger("users", "second", lambda event: calls.append("second"))
        seeded_db.create_trigger("posts", "other", lambda event: calls.append("other"))

        seeded_db.drop_trigger("users", "first")
        seeded_db.where("id", 1).update("users", {"age": 31})
        seeded_db.where("id", 1).update("posts", {"title": "Edited"})

        assert calls == ["other"]
        with pytest.raises(TriggerNotFoundError):
            seeded_db.drop_trigger("users", "second")


class TestTriggerFiring:
    """Tests for trigger events and vetoes."""

    def test_insert_event(self, seeded_db):
        """Test insert triggers get no old row and the new row."""
        events = []
        seeded_db.create_trigger("posts", "capture", events.append)

        seeded_db.insert(
            "posts",
            {"id": AUTO_INCREMENT, "user_id": 2, "title": "Hi", "content": "..."},
        )

        assert events == [
            TriggerEvent(
                operation="insert",
                old=None,
                new={"id": 3, "user_id": 2, "title": "Hi", "content": "..."},
            )
        ]

    def test_update_event(self, seeded_db):
        """Test update triggers see the old row and the merged row."""
        events = []
        seeded_db.create_trigger("users", "capture", events.append)

        seeded_db.where("id", 2).update("users", {"age": 26})

        assert len(events) == 1
        assert events[0].operation == "update"
        assert events[0].old["age"] == 25
        assert events[0].new["age"] == 26
        assert events[0].new["name"] == "Jane Smith"

    def test_delete_event(self, seeded_db):
        """Test delete triggers get the old row and no new row."""
        events = []
        seeded_db.create_trigger("posts", "capture", events.append)

        seeded_db.where("id", 1).delete("posts")

        assert events[0].operation == "delete"
        assert events[0].old["title"] == "First Post"
        assert events[0].new is None

    def test_veto_blocks_insert(self, seeded_db):
        """Test returning False prevents the insert."""
        seeded_db.create_trigger(
            "users",
            "no_minors",
            lambda event: event.operation != "insert" or event.new["age"] >= 21,
        )

        seeded_db.insert(
            "users",
            {"id": AUTO_INCREMENT, "name": "Teen", "email": "teen@example.com", "age": 19},
        )

        assert seeded_db.count("users") == 2
        assert seeded_db.get_last_insert_id() == 2

    def test_veto_blocks_update_and_delete(self, seeded_db):
        """Test a veto leaves the row untouched."""
        seeded_db.create_trigger("users", "freeze", lambda event: False)

        seeded_db.where("id", 1).update("users", {"age": 99})
        seeded_db.where("id", 1).delete("users")

        assert seeded_db.where("id", 1).get_one("users")["age"] == 30

    def test_only_false_vetoes(self, seeded_db):
        """Test falsy values other than False do not veto."""
        seeded_db.create_trigger("posts", "zero", lambda event: 0)
        seeded_db.create_trigger("posts", "none", lambda event: None)

        seeded_db.where("id", 2).delete("posts")

        assert seeded_db.count("posts") == 1

    def test_all_triggers_run_after_veto(self, seeded_db):
        """Test later triggers still run when an earlier one vetoes."""
        calls = []
        seeded_db.create_trigger("users", "veto", lambda event: False)
        seeded_db.create_trigger("users", "after", lambda event: calls.append(event))

        seeded_db.where("id", 1).delete("users")

        assert len(calls) == 1
        assert seeded_db.count("users") == 2

    def test_failing_trigger_does_not_block(self, log_lines):
        """Test a raising trigger is logged and the write goes through."""
        db = VertexDB(logging=log_lines.append)
        db.create_table("t")

        def explode(event):
            raise RuntimeError("boom")

        db.create_trigger("t", "explode", explode)
        db.insert("t", {"id": 1})

        assert db.count("t") == 1
        trigger_lines = [line for line in log_lines if "insert trigger:" in line]
        assert len(trigger_lines) == 1
        assert "boom" in trigger_lines[0]
        assert '"trigger_name": "explode"' in trigger_lines[0]


class TestTriggerSnapshots:
    """Tests that callbacks work on copies of the rows."""

    def test_vetoed_update_ignores_changes_to_old(self, db):
        """Test editing event.old and vetoing leaves the stored row as it was."""
        db.set_table("t", [{"id": 1, "v": 1}])

        def tamper(event):
            event.old["v"] = 999
            return False

        db.create_trigger("t", "tamper", tamper)
        db.update("t", {"v": 2})

        assert db.get_one("t")["v"] == 1

    def test_vetoed_delete_ignores_changes_to_old(self, db):
        """Test a delete veto keeps the original row content."""
        db.set_table("t", [{"id": 1, "tags": ["a"]}])

        def tamper(event):
            event.old["tags"].append("b")
            return False

        db.create_trigger("t", "tamper", tamper)
        db.delete("t")

        assert db.get("t") == [{"id": 1, "tags": ["a"]}]

    def test_insert_stores_pipeline_row(self, db):
        """Test editing event.new does not change the inserted row."""
        db.create_table("t")

        def tamper(event):
            event.new["v"] = "changed"

        db.create_trigger("t", "tamper", tamper)
        db.insert("t", {"id": 1, "v": "original"})

        assert db.get_one("t") == {"id": 1, "v": "original"}

    def test_update_stores_merged_row(self, db):
        """Test editing event.new does not change the updated row."""
        db.set_table("t", [{"id": 1, "v": 1}])
        db.create_trigger("t", "tamper", lambda event: event.new.update(v=999))

        db.update("t", {"v": 2})

        assert db.get_one("t")["v"] == 2
