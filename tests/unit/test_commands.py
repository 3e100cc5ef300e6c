import pytest

from student_records.domain.errors import (
    InvalidNumberError,
    InvalidTextError,
    MissingKeyError,
    ParseError,
)
from student_records.parsing.commands import (
    SHOW_ALL_USAGE,
    BackupCommand,
    DeleteCommand,
    ExitCommand,
    ExportCsvCommand,
    ExportSqlCommand,
    FindCommand,
    HelpCommand,
    ImportCsvCommand,
    InsertCommand,
    OpenCommand,
    QueryCommand,
    SaveCommand,
    ShowAllCommand,
    ShowSummaryCommand,
    UnknownCommand,
    UpdateCommand,
    parse_command,
)
from student_records.query import SearchField, SortDirection, SortField


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("OPEN records.txt", OpenCommand("records.txt")),
        ('open "my records.txt"', OpenCommand("my records.txt")),
        ("SAVE", SaveCommand(None)),
        ("save backup.txt", SaveCommand("backup.txt")),
        ("SHOW ALL", ShowAllCommand()),
        ("show all sort by mark desc", ShowAllCommand(SortField.MARK, SortDirection.DESC)),
        ("SHOW ALL SORT BY ID", ShowAllCommand(SortField.ID, SortDirection.ASC)),
        ("SHOW SUMMARY", ShowSummaryCommand()),
        ("QUERY ID=7", QueryCommand(7)),
        ("DELETE ID = 7", DeleteCommand(7)),
        ("FIND NAME bri", FindCommand(SearchField.NAME, "bri")),
        (
            'find programme "Computing Science"',
            FindCommand(SearchField.PROGRAMME, "Computing Science"),
        ),
        ("FIND NAME", FindCommand(SearchField.NAME, "")),
        ("IMPORT CSV in.csv", ImportCsvCommand("in.csv")),
        ("EXPORT CSV out.csv", ExportCsvCommand("out.csv")),
        ("EXPORT SQL out.sql", ExportSqlCommand("out.sql")),
        ("BACKUP", BackupCommand()),
        ("HELP", HelpCommand()),
        ("exit", ExitCommand()),
        ("QUIT", ExitCommand()),
    ],
)
def test_recognised_commands(line, expected):
    assert parse_command(line) == expected


@pytest.mark.parametrize(
    "line", ["", "SHOW ALLOCATE", "SHOW SUMMARY NOW", "EXIT NOW", "FIND ID 3", "DROP TABLE"]
)
def test_unrecognised_commands(line):
    assert parse_command(line) == UnknownCommand(line)


def test_insert_extracts_all_fields():
    command = parse_command(
        'INSERT ID=2301234 Name="Brian Goh" Programme="Digital Supply Chain" Mark=88.8'
    )
    assert command == InsertCommand(2301234, "Brian Goh", "Digital Supply Chain", 88.8)


def test_insert_reports_first_missing_key():
    with pytest.raises(MissingKeyError) as excinfo:
        parse_command('INSERT ID=1 Name="Ann" Programme="CS"')
    assert str(excinfo.value) == "Missing Mark="


def test_insert_rejects_non_numeric_id():
    with pytest.raises(InvalidNumberError) as excinfo:
        parse_command('INSERT ID=abc Name="Ann" Programme="CS" Mark=1')
    assert str(excinfo.value) == "Invalid ID."


def test_update_keeps_absent_fields_unset():
    assert parse_command("UPDATE ID=1 Mark=90") == UpdateCommand(1, mark=90.0)


def test_update_requires_id():
    with pytest.raises(MissingKeyError) as excinfo:
        parse_command('UPDATE Name="Ann"')
    assert str(excinfo.value) == "Missing ID="


@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("OPEN", "Please provide a filename."),
        ("IMPORT CSV", "Please provide CSV filename."),
        ("EXPORT CSV   ", "Please provide CSV filename."),
        ("EXPORT SQL", "Please provide SQL filename."),
    ],
)
def test_missing_file_names(line, message):
    with pytest.raises(ParseError) as excinfo:
        parse_command(line)
    assert str(excinfo.value) == message


@pytest.mark.parametrize(
    "line",
    [
        "SHOW ALL SORT BY NAME",
        "SHOW ALL SORT BY NONE",
        "SHOW ALL SORT MARK",
        "SHOW ALL SORT BY MARK UP",
        "SHOW ALL SORT BY MARK ASC EXTRA",
    ],
)
def test_bad_sort_clause_reports_usage(line):
    with pytest.raises(ParseError) as excinfo:
        parse_command(line)
    assert str(excinfo.value) == SHOW_ALL_USAGE


@pytest.mark.parametrize(
    ("line", "field"),
    [
        ('INSERT ID=1 Name="" Programme="CS" Mark=1', "Name"),
        ('INSERT ID=1 Name="Ann" Programme="" Mark=1', "Programme"),
        ('UPDATE ID=1 Name=""', "Name"),
        ('UPDATE ID=1 Programme="Data\tScience"', "Programme"),
    ],
)
def test_text_that_cannot_be_saved_is_rejected(line, field):
    with pytest.raises(InvalidTextError) as excinfo:
        parse_command(line)
    assert str(excinfo.value) == f"Invalid {field}: must be non-empty and contain no tabs."
