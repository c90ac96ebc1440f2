"""Tests for the collabdb shell."""

from pathlib import Path

from collabdb.client import BackendConfig, create_client
from collabdb.parsing.query_parser import QueryParser
from collabdb.repl import format_value, main, print_result, run_file, run_statement
from collabdb.statements import StatementExecutor, StatementResult


def _client():
    return create_client(BackendConfig(query_latency=0.001, storage_latency=0.001))


class TestHelperFunctions:
    """Tests for REPL helper functions."""

    def test_format_scalars(self):
        """Test formatting of scalar values."""
        assert format_value(None) == "NULL"
        assert format_value(True) == "true"
        assert format_value(42) == "42"
        assert format_value(2.5) == "2.5"
        assert format_value("abc") == "'abc'"

    def test_format_long_string(self):
        """Test that long strings are truncated."""
        assert format_value("x" * 50) == repr("x" * 37 + "...")

    def test_format_collections(self):
        """Test formatting of embedded objects and lists."""
        assert format_value({"name": "IIT Delhi"}) == "{name: 'IIT Delhi'}"
        assert format_value([1, 2, 3], max_items=2) == "[1, 2, ...+1 more]"

    def test_print_rows(self, capsys):
        """Test the tabular output."""
        print_result(StatementResult(columns=["id", "name"], rows=[{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]))
        out = capsys.readouterr().out
        assert out.splitlines()[0].startswith("id | name")
        assert "(2 rows)" in out

    def test_format_embedded_list_is_clipped(self):
        """Test that a wide embed is cut to the cell width."""
        logs = [{"action": "Prototype milestone reached"}, {"action": "Grant approved"}]
        text = format_value(logs)
        assert len(text) == 40
        assert text.startswith("[{action: 'Prototype milestone")
        assert text.endswith("...")

    def test_print_clips_wide_cells(self, capsys):
        """Test that columns never grow past the cell width."""
        print_result(StatementResult(columns=["abstract"], rows=[{"abstract": "y" * 100}]))
        lines = capsys.readouterr().out.splitlines()
        assert len(lines[0]) == 40
        assert len(lines[2]) == 40
        assert lines[2].endswith("...")

    def test_run_statement(self, capsys):
        """Test that run_statement reports success and failure."""
        executor, parser = StatementExecutor(_client()), QueryParser()
        assert run_statement(executor, parser, "count expertise_areas")
        assert not run_statement(executor, parser, "from widgets")
        assert not run_statement(executor, parser, "count")
        captured = capsys.readouterr()
        assert "12" in captured.out
        assert "Error: Unknown table: widgets" in captured.out
        assert "Syntax error" in captured.err

    def test_print_message_and_error(self, capsys):
        """Test message-only and error results."""
        print_result(StatementResult(message="Deleted 3 rows from activity_logs"))
        print_result(StatementResult(error="Unknown table: widgets"))
        print_result(StatementResult())
        out = capsys.readouterr().out.splitlines()
        assert out == ["Deleted 3 rows from activity_logs", "Error: Unknown table: widgets", "(no results)"]


class TestRunFile:
    """Tests for file execution."""

    def test_run_file(self, tmp_path: Path, capsys):
        """Test running a script of several statements."""
        script = tmp_path / "demo.cdb"
        script.write_text("""
-- Add an area and look it up
insert into expertise_areas (name = "Edge AI");
from expertise_areas select id, name where name = "Edge AI";
count expertise_areas
""")
        client = _client()
        assert run_file(script, client) == 0
        out = capsys.readouterr().out
        assert "Inserted 1 row into expertise_areas" in out
        assert "'Edge AI'" in out
        assert client.store.count("expertise_areas") == 13

    def test_run_file_verbose(self, tmp_path: Path, capsys):
        """Test that verbose mode echoes statements."""
        script = tmp_path / "demo.cdb"
        script.write_text("show tables;")
        assert run_file(script, _client(), verbose=True) == 0
        assert ">>> show tables" in capsys.readouterr().out

    def test_run_file_stops_on_error(self, tmp_path: Path, capsys):
        """Test that execution stops at the first failing statement."""
        script = tmp_path / "demo.cdb"
        script.write_text('from widgets; insert into colleges (name = "never")')
        client = _client()
        assert run_file(script, client) == 1
        assert "Error: Unknown table: widgets" in capsys.readouterr().out
        assert client.store.count("colleges") == 30

    def test_run_file_syntax_error(self, tmp_path: Path, capsys):
        """Test that a syntax error fails the run."""
        script = tmp_path / "demo.cdb"
        script.write_text("from colleges where")
        assert run_file(script, _client()) == 1
        assert "Syntax error" in capsys.readouterr().err

    def test_run_file_empty(self, tmp_path: Path, capsys):
        """Test that a file with only comments is rejected."""
        script = tmp_path / "demo.cdb"
        script.write_text("-- nothing here\n")
        assert run_file(script, _client()) == 1
        assert "No statements found" in capsys.readouterr().err


class TestMain:
    """Tests for the command line entry point."""

    def test_command(self, capsys):
        """Test running a single statement."""
        assert main(["-c", "count colleges"]) == 0
        out = capsys.readouterr().out
        assert "count" in out
        assert "30" in out

    def test_command_empty(self, capsys):
        """Test starting without demo content."""
        assert main(["--empty", "-c", "count colleges"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[2].strip() == "0"

    def test_command_error(self, capsys):
        """Test that a failing statement sets the exit code."""
        assert main(["-c", "from widgets"]) == 1
        assert "Error: Unknown table: widgets" in capsys.readouterr().out

    def test_command_syntax_error(self, capsys):
        """Test that a syntax error sets the exit code."""
        assert main(["-c", "from"]) == 1
        assert "Syntax error" in capsys.readouterr().err

    def test_invalid_latency(self, capsys):
        """Test that a non-positive latency is rejected."""
        assert main(["--latency", "0", "-c", "show tables"]) == 1
        assert "query_latency must be positive" in capsys.readouterr().err

    def test_file(self, tmp_path: Path):
        """Test running a file from the command line."""
        script = tmp_path / "demo.cdb"
        script.write_text("describe colleges")
        assert main(["-f", str(script)]) == 0

    def test_missing_file(self, tmp_path: Path, capsys):
        """Test that a missing file is reported."""
        assert main(["-f", str(tmp_path / "missing.cdb")]) == 1
        assert "File not found" in capsys.readouterr().err
