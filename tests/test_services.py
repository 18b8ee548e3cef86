"""Tests for logging, configuration, DataFrame interop and display."""

import polars as pl
import pytest
from rich.console import Console

from vertexdb import InvalidInputError, VertexDB
from vertexdb.core.config import ENV_LOGGING, ENV_SOFT_DELETE, ENV_TIMESTAMPS, StoreConfig
from vertexdb.services.display_service import DisplayService
from vertexdb.services.log_service import OperationLogger


class TestStoreConfig:
    """Tests for option resolution."""

    def test_defaults(self):
        """Test every option is off without arguments or environment."""
        assert StoreConfig.resolve() == StoreConfig(False, False, False)

    def test_environment_fallback(self, monkeypatch):
        """Test environment variables fill unset options."""
        monkeypatch.setenv(ENV_TIMESTAMPS, "true")
        monkeypatch.setenv(ENV_SOFT_DELETE, "1")
        monkeypatch.setenv(ENV_LOGGING, "off")

        config = StoreConfig.resolve()

        assert config.timestamps is True
        assert config.soft_delete is True
        assert config.logging is False

    def test_arguments_win(self, monkeypatch):
        """Test explicit arguments override the environment."""
        monkeypatch.setenv(ENV_SOFT_DELETE, "yes")

        assert VertexDB(soft_delete=False).soft_delete is False

    def test_repr(self):
        """Test the store repr shows table count and options."""
        db = VertexDB(timestamps=True)
        db.create_table("t")

        assert repr(db) == "VertexDB(tables=1, timestamps=True, soft_delete=False)"


class TestOperationLogger:
    """Tests for operation logging."""

    def test_sink_receives_formatted_lines(self, log_lines):
        """Test each operation produces one bracketed line."""
        db = VertexDB(logging=log_lines.append)
        db.create_table("users")

        assert len(log_lines) == 1
        assert log_lines[0].startswith("[")
        assert log_lines[0].endswith(
            'create_table: {"table_name": "users", "has_schema": false}'
        )

    def test_disabled_by_default(self, log_lines):
        """Test nothing is logged until logging is enabled."""
        db = VertexDB()
        db.create_table("t")
        db.set_logging(log_lines.append)
        db.insert("t", {"id": 1})
        db.set_logging(False)
        db.get("t")

        assert len(log_lines) == 1
        assert "] insert: " in log_lines[0]

    def test_console_output(self):
        """Test True prints events to the console."""
        logger = OperationLogger(True)
        logger.console = Console(record=True, width=120)

        logger.log("get", {"table_name": "users", "result_count": 2})

        text = logger.console.export_text()
        assert "get:" in text
        assert "result_count" in text

    def test_get_last_insert_id_logs(self, db, log_lines):
        """Test reading the last insert id is logged once an id exists."""
        db.create_table("t").insert("t", {"id": 5})
        db.set_logging(log_lines.append)

        assert db.get_last_insert_id() == 5
        assert '{"id": 5}' in log_lines[0]


class TestFrames:
    """Tests for Polars interop."""

    def test_to_frame(self, seeded_db):
        """Test visible rows become DataFrame rows."""
        frame = seeded_db.to_frame("users")

        assert frame.shape == (2, 4)
        assert frame["name"].to_list() == ["John Doe", "Jane Smith"]

    def test_to_frame_empty(self, db):
        """Test an empty table gives an empty frame."""
        db.create_table("t")

        assert db.to_frame("t").is_empty()

    def test_to_frame_with_query(self, seeded_db):
        """Test the builder query narrows the frame."""
        frame = seeded_db.where("age", 25).to_frame("users")

        assert frame["id"].to_list() == [2]

    def test_from_frame(self, db):
        """Test DataFrame rows replace a table's rows."""
        frame = pl.DataFrame({"id": [1, 2], "name": ["a", "b"]})

        db.from_frame("t", frame)

        assert db.get("t") == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]

    def test_from_frame_rejects_other_types(self, db):
        """Test only DataFrames are accepted."""
        with pytest.raises(InvalidInputError):
            db.from_frame("t", [{"id": 1}])

    def test_profile(self, db):
        """Test per-column nulls and unique counts."""
        db.set_table("t", [{"id": 1, "tag": "x"}, {"id": 2, "tag": "x"}, {"id": 3}])

        profile = db.profile("t")

        assert profile["row_count"] == 3
        assert profile["column_count"] == 2
        assert profile["column_stats"]["tag"]["null_count"] == 1
        assert profile["column_stats"]["tag"]["unique_count"] == 2
        assert profile["column_stats"]["id"]["dtype"] == "Int64"


class TestDisplay:
    """Tests for Rich rendering."""

    @pytest.fixture
    def console(self):
        return Console(record=True, width=120)

    def test_show_rows(self, console):
        """Test rows render with a titled table and placeholders."""
        DisplayService(console).show_rows("users", [{"id": 1, "name": "Ann"}, {"id": 2}])

        text = console.export_text()
        assert "users (2 rows)" in text
        assert "Ann" in text
        assert "-" in text

    def test_show_stats(self, seeded_db, console):
        """Test stats render row counts and index keys."""
        seeded_db.create_index("users", ["email"])

        DisplayService(console).show_stats(seeded_db.get_stats())

        text = console.export_text()
        assert "Total records: 4" in text
        assert "users:email" in text
