"""
End-to-end tests for the student records CLI.

These drive the Typer app the way a user would and verify that:
1. Commands given on the command line run in order against one session
2. The database file written by SAVE is read back by --open
3. The SQL dump loads into a real SQLite database
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest
from typer.testing import CliRunner

from student_records.config import Settings
from student_records.dispatcher import CommandDispatcher, Session
from student_records.main import app

INSERT_ANN = 'INSERT ID=1 Name="Ann" Programme="CS" Mark=70'
INSERT_BO = 'INSERT ID=2 Name="Bo" Programme="EE" Mark=95.5'

runner = CliRunner()


@pytest.fixture
def cli_env(monkeypatch: pytest.MonkeyPatch, data_dir: Path) -> Path:
    monkeypatch.setenv("RECORDS_DATA_DIR", str(data_dir))
    monkeypatch.delenv("RECORDS_DATABASE", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return data_dir


class TestRunCommand:
    """Non-interactive `run` subcommand."""

    def test_insert_and_save(self, cli_env: Path):
        """Inserted records are written to the database file."""
        result = runner.invoke(app, ["run", "--plain", INSERT_ANN, INSERT_BO, "SAVE db.txt"])

        assert result.exit_code == 0, result.stdout
        assert "CMS: A new record with ID=1 is successfully inserted." in result.stdout
        assert "CMS: The database file is successfully saved." in result.stdout
        assert (cli_env / "db.txt").read_text(encoding="utf-8").splitlines() == [
            "1\tAnn\tCS\t70.0",
            "2\tBo\tEE\t95.5",
        ]

    def test_open_then_sorted_listing(self, cli_env: Path):
        """--open loads the database before the commands run."""
        (cli_env / "db.txt").write_text("1\tAnn\tCS\t70.0\n2\tBo\tEE\t95.5\n", encoding="utf-8")

        result = runner.invoke(
            app, ["run", "--open", "db.txt", "--plain", "SHOW ALL SORT BY MARK DESC"]
        )

        assert result.exit_code == 0, result.stdout
        lines = result.stdout.splitlines()
        assert 'CMS: The database file "db.txt" is successfully opened.' in lines
        assert lines.index("2 Bo EE 95.5") < lines.index("1 Ann CS 70.0")

    def test_failed_command_sets_exit_code(self, cli_env: Path):
        """Any failed command makes the run exit with status 1."""
        result = runner.invoke(app, ["run", "--plain", "SHOW ALL", "DROP TABLE"])

        assert result.exit_code == 1
        assert "CMS: Unknown command. Type HELP." in result.stdout

    def test_delete_needs_yes_flag(self, cli_env: Path):
        """Without --yes a DELETE is cancelled; with it the record is removed."""
        declined = runner.invoke(app, ["run", "--plain", INSERT_ANN, "DELETE ID=1", "QUERY ID=1"])
        assert "CMS: Delete cancelled." in declined.stdout
        assert declined.exit_code == 0

        confirmed = runner.invoke(
            app, ["run", "--plain", "--yes", INSERT_ANN, "DELETE ID=1", "QUERY ID=1"]
        )
        assert "CMS: The record with ID=1 is successfully deleted." in confirmed.stdout
        assert "CMS: The record with ID=1 does not exist." in confirmed.stdout
        assert confirmed.exit_code == 1

    def test_exit_stops_processing(self, cli_env: Path):
        """Commands after EXIT are not run."""
        result = runner.invoke(app, ["run", "--plain", "EXIT", INSERT_ANN])

        assert result.exit_code == 0
        assert "CMS: Goodbye." in result.stdout
        assert "inserted" not in result.stdout

    def test_table_output(self, cli_env: Path):
        """Default output renders a table of records."""
        result = runner.invoke(app, ["run", INSERT_BO, "SHOW ALL"])

        assert result.exit_code == 0, result.stdout
        assert "Programme" in result.stdout
        assert "95.5" in result.stdout


class TestShellCommand:
    """Interactive `shell` subcommand fed from stdin."""

    def test_shell_reads_until_exit(self, cli_env: Path):
        """Lines are executed until EXIT; a DELETE reads its own Y/N answer."""
        script = "\n".join([INSERT_ANN, "DELETE ID=1", "y", "SHOW ALL", "EXIT", INSERT_BO, ""])

        result = runner.invoke(app, ["shell", "--plain"], input=script)

        assert result.exit_code == 0, result.stdout
        assert "CMS: The record with ID=1 is successfully deleted." in result.stdout
        assert "CMS: Goodbye." in result.stdout
        assert "ID=2" not in result.stdout

    def test_shell_stops_at_end_of_input(self, cli_env: Path):
        """End of input ends the session without error."""
        result = runner.invoke(app, ["shell", "--plain"], input="SHOW SUMMARY\n")

        assert result.exit_code == 0, result.stdout
        assert "CMS: No records loaded." in result.stdout

    def test_prompt_is_printed_literally(self, cli_env: Path, monkeypatch: pytest.MonkeyPatch):
        """A prompt containing brackets is shown as typed, not read as markup."""
        monkeypatch.setenv("RECORDS_PROMPT", "[db]")

        result = runner.invoke(app, ["shell", "--plain"], input="EXIT\n")

        assert result.exit_code == 0, result.stdout
        assert "[db]: Goodbye." in result.stdout


class TestInterchange:
    """File formats produced by one session and consumed elsewhere."""

    def test_sql_dump_loads_into_sqlite(self, test_settings: Settings, data_dir: Path):
        """The exported dump recreates the table with identical rows."""
        dispatcher = CommandDispatcher(test_settings, confirm=lambda prompt: True)
        session = Session()
        for line in [
            'INSERT ID=3 Name="Sean O\'Neil" Programme="Applied \'AI\'" Mark=64.5',
            INSERT_BO,
            INSERT_ANN,
            "EXPORT SQL dump.sql",
        ]:
            assert dispatcher.execute(session, line).ok, line

        connection = sqlite3.connect(":memory:")
        try:
            connection.executescript((data_dir / "dump.sql").read_text(encoding="utf-8"))
            rows = connection.execute(
                "SELECT id, name, programme, mark FROM StudentRecords ORDER BY id"
            ).fetchall()
        finally:
            connection.close()

        assert rows == [
            (1, "Ann", "CS", 70.0),
            (2, "Bo", "EE", 95.5),
            (3, "Sean O'Neil", "Applied 'AI'", 64.5),
        ]

    def test_csv_export_survives_import_into_opened_database(
        self, test_settings: Settings, data_dir: Path
    ):
        """Quoted text survives CSV export, import and a database save/open cycle."""
        dispatcher = CommandDispatcher(test_settings, confirm=lambda prompt: True)
        source = Session()
        dispatcher.execute(
            source, 'INSERT ID=5 Name="Goh, Brian" Programme="Digital Supply Chain" Mark=88.8'
        )
        assert dispatcher.execute(source, "EXPORT CSV people.csv").ok

        target = Session()
        assert dispatcher.execute(target, "IMPORT CSV people.csv").ok
        assert dispatcher.execute(target, "SAVE merged.txt").ok

        reopened = Session()
        assert dispatcher.execute(reopened, "OPEN merged.txt").ok
        assert reopened.store.snapshot() == source.store.snapshot()
