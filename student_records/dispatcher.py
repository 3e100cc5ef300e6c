"""
Command dispatcher: one command line in, one CommandResult out.

The dispatcher owns no records. It receives a Session (the RecordStore plus
the name of the currently opened database file), runs the parsed command
against it, and describes the outcome for the caller to render. It never
reads stdin; the DELETE confirmation goes through the `confirm` callback the
boundary supplies.

Usage:
    session = Session()
    dispatcher = CommandDispatcher(confirm=lambda prompt: True)
    result = dispatcher.execute(session, 'INSERT ID=1 Name="Ann" Programme="CS" Mark=70')
    print(result.message)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from student_records.config import Settings, get_settings
from student_records.domain.errors import (
    CapacityOverflowError,
    OpenFailedError,
    RecordNotFoundError,
    RecordsError,
    WriteFailedError,
)
from student_records.domain.models import Record, format_mark
from student_records.infrastructure import persistence
from student_records.parsing.commands import (
    BackupCommand,
    Command,
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
from student_records.query import find, sorted_view, summarize
from student_records.store import RecordStore
from student_records.utils.logging import get_logger

log = get_logger(__name__)

DELETE_PROMPT = "Type Y to Confirm or N to cancel"

HELP_LINES = [
    "OPEN / SAVE",
    "  OPEN <file>                 e.g.  OPEN db.txt",
    "  SAVE                        (saves back to last OPEN file)",
    "  SAVE <file>                 e.g.  SAVE db.txt",
    "",
    "VIEW",
    "  SHOW ALL                    list all rows",
    "  SHOW ALL SORT BY ID ASC     or DESC",
    "  SHOW ALL SORT BY MARK ASC   or DESC",
    "  SHOW SUMMARY                show count/average/highest/lowest",
    "",
    "ADD / LOOKUP / EDIT / REMOVE",
    '  INSERT ID=<int> Name="..." Programme="..." Mark=<float>',
    '    e.g. INSERT ID=2501066 Name="Brian Goh" Programme="Digital Supply Chain" Mark=88.8',
    "  QUERY ID=<int>              e.g. QUERY ID=2501066",
    "  UPDATE ID=<int> [Name=...] [Programme=...] [Mark=<float>]",
    '    e.g. UPDATE ID=2501066 Programme="Game Development" Mark=95.5',
    "  DELETE ID=<int>             comes with Y/N confirmation",
    "",
    "SEARCH",
    '  FIND NAME "..."             e.g. FIND NAME "brian"',
    '  FIND PROGRAMME "..."        e.g. FIND PROGRAMME "Digital Supply Chain"',
    "",
    "IMPORT / EXPORT / BACKUP",
    "  IMPORT CSV <file.csv>       Header in CSV must be: ID,Name,Programme,Mark",
    "  EXPORT CSV <file.csv>       Open in Excel/Sheets to verify",
    "  EXPORT SQL <file.sql>       SQLite/MySQL compatible INSERTs",
    "  BACKUP                      writes <stem>.bak-YYYYMMDD-HHMMSS.txt",
    "",
    "OTHER",
    "  HELP",
    "  EXIT",
]


@dataclass
class Session:
    """Mutable state carried between commands of one shell session."""

    store: RecordStore = field(default_factory=RecordStore)
    database: Optional[str] = None


@dataclass
class CommandResult:
    """
    Outcome of one command.

    `records` are shown as a table when `table` is set (even when empty);
    `details` are extra plain lines such as summary statistics or help text.
    """

    ok: bool
    message: str
    records: List[Record] = field(default_factory=list)
    details: List[str] = field(default_factory=list)
    table: bool = False
    exit: bool = False


def _decline(prompt: str) -> bool:
    del prompt
    return False


def _success(message: str, **kwargs) -> CommandResult:
    return CommandResult(ok=True, message=message, **kwargs)


def _failure(message: str) -> CommandResult:
    return CommandResult(ok=False, message=message)


class CommandDispatcher:
    """Map typed commands onto store, query and persistence operations."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._confirm = confirm or _decline
        self._handlers: Dict[type, Callable[[Session, Command], CommandResult]] = {
            OpenCommand: self._open,
            SaveCommand: self._save,
            ShowAllCommand: self._show_all,
            ShowSummaryCommand: self._show_summary,
            InsertCommand: self._insert,
            QueryCommand: self._query,
            UpdateCommand: self._update,
            DeleteCommand: self._delete,
            FindCommand: self._find,
            ImportCsvCommand: self._import_csv,
            ExportCsvCommand: self._export_csv,
            ExportSqlCommand: self._export_sql,
            BackupCommand: self._backup,
            HelpCommand: self._help,
            ExitCommand: self._exit,
            UnknownCommand: self._unknown,
        }

    def handled_types(self) -> List[type]:
        return list(self._handlers)

    def execute(self, session: Session, line: str) -> CommandResult:
        """
        Parse and run one command line.

        Recoverable errors become a failed CommandResult. CapacityOverflowError
        is not recoverable and propagates.
        """
        if not line.strip():
            return _success("")
        try:
            command = parse_command(line)
            return self.dispatch(session, command)
        except CapacityOverflowError:
            raise
        except RecordsError as exc:
            log.debug("Command rejected", extra={"error": type(exc).__name__, "reason": str(exc)})
            return _failure(str(exc))

    def dispatch(self, session: Session, command: Command) -> CommandResult:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"No handler registered for {type(command).__name__}")
        log.debug("Dispatching command", extra={"command": type(command).__name__})
        return handler(session, command)

    # Files

    def _open(self, session: Session, command: OpenCommand) -> CommandResult:
        try:
            loaded = persistence.load_tsv(command.path, self._settings)
        except OpenFailedError as exc:
            return _failure(f'Failed to open file "{command.path}": {exc.reason}')
        session.store.replace_all(loaded.records)
        session.database = command.path
        return _success(f'The database file "{command.path}" is successfully opened.')

    def _save(self, session: Session, command: SaveCommand) -> CommandResult:
        name = command.path or session.database
        if not name:
            return _failure("Failed to save. Please OPEN a file first or provide a filename.")
        try:
            persistence.save_tsv(session.store.snapshot(), name, self._settings)
        except WriteFailedError as exc:
            return _failure(f"Failed to save: {exc.reason}")
        return _success("The database file is successfully saved.")

    def _import_csv(self, session: Session, command: ImportCsvCommand) -> CommandResult:
        try:
            report = persistence.import_csv(session.store, command.path, self._settings)
        except OpenFailedError as exc:
            return _failure(f"Failed to import CSV: {exc.reason}")
        return _success(
            f'CSV imported from "{command.path}" ({report.added} added, {report.skipped} skipped).'
        )

    def _export_csv(self, session: Session, command: ExportCsvCommand) -> CommandResult:
        try:
            persistence.export_csv(session.store.snapshot(), command.path, self._settings)
        except WriteFailedError as exc:
            return _failure(f"Failed to export CSV: {exc.reason}")
        return _success(f'CSV exported to "{command.path}".')

    def _export_sql(self, session: Session, command: ExportSqlCommand) -> CommandResult:
        try:
            persistence.export_sql(session.store.snapshot(), command.path, self._settings)
        except WriteFailedError as exc:
            return _failure(f"Failed to export SQL: {exc.reason}")
        return _success(f'SQL exported to "{command.path}".')

    def _backup(self, session: Session, command: BackupCommand) -> CommandResult:
        del command
        if not session.database:
            return _failure("Backup failed. Please OPEN and SAVE first.")
        try:
            path = persistence.backup(session.store.snapshot(), session.database, self._settings)
        except WriteFailedError as exc:
            return _failure(f"Backup failed: {exc.reason}")
        return _success(f'Backup file created: "{path}".')

    # Views

    def _show_all(self, session: Session, command: ShowAllCommand) -> CommandResult:
        records = sorted_view(session.store.snapshot(), command.field, command.direction)
        return _success(
            'Here are all the records found in the table "StudentRecords".',
            records=records,
            table=True,
        )

    def _show_summary(self, session: Session, command: ShowSummaryCommand) -> CommandResult:
        del command
        summary = summarize(session.store.snapshot())
        if summary is None:
            return _success("No records loaded.")
        return _success(
            "SUMMARY",
            details=[
                f"Total students: {summary.total}",
                f"Average mark: {summary.average:.2f}",
                f"Highest: {format_mark(summary.highest.mark)} ({summary.highest.name})",
                f"Lowest : {format_mark(summary.lowest.mark)} ({summary.lowest.name})",
            ],
        )

    def _find(self, session: Session, command: FindCommand) -> CommandResult:
        matches = find(session.store.snapshot(), command.field, command.needle)
        return _success(
            f'Search results for {command.field.name} contains "{command.needle}":',
            records=matches,
            details=[] if matches else ["(no matches)"],
            table=True,
        )

    # Records

    def _insert(self, session: Session, command: InsertCommand) -> CommandResult:
        record = Record(
            id=command.record_id,
            name=command.name,
            programme=command.programme,
            mark=command.mark,
        )
        session.store.insert(record)
        return _success(f"A new record with ID={record.id} is successfully inserted.")

    def _query(self, session: Session, command: QueryCommand) -> CommandResult:
        record = session.store.get(command.record_id)
        if record is None:
            raise RecordNotFoundError(command.record_id)
        return _success(
            f"The record with ID={record.id} is found in the data table.",
            records=[record],
            table=True,
        )

    def _update(self, session: Session, command: UpdateCommand) -> CommandResult:
        session.store.update(
            command.record_id,
            name=command.name,
            programme=command.programme,
            mark=command.mark,
        )
        return _success(f"The record with ID={command.record_id} is successfully updated.")

    def _delete(self, session: Session, command: DeleteCommand) -> CommandResult:
        if command.record_id not in session.store:
            raise RecordNotFoundError(command.record_id)
        if not self._confirm(DELETE_PROMPT):
            return _success("Delete cancelled.")
        session.store.delete(command.record_id)
        return _success(f"The record with ID={command.record_id} is successfully deleted.")

    # Shell

    def _help(self, session: Session, command: HelpCommand) -> CommandResult:
        del session, command
        return _success("Commands (examples included!):", details=list(HELP_LINES))

    def _exit(self, session: Session, command: ExitCommand) -> CommandResult:
        del session, command
        return CommandResult(ok=True, message="Goodbye.", exit=True)

    def _unknown(self, session: Session, command: UnknownCommand) -> CommandResult:
        del session, command
        return _failure("Unknown command. Type HELP.")


__all__ = ["CommandDispatcher", "CommandResult", "DELETE_PROMPT", "HELP_LINES", "Session"]
