from __future__ import annotations

import sys
from typing import List, Optional

import typer
from rich.console import Console

from student_records.config import get_settings
from student_records.dispatcher import CommandDispatcher, Session
from student_records.domain.errors import CapacityOverflowError
from student_records.reporter import print_result
from student_records.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Student records manager CLI.")
log = get_logger(__name__)


def _start_session(
    dispatcher: CommandDispatcher, database: Optional[str], console: Console, plain: bool
) -> Session:
    session = Session()
    if database:
        result = dispatcher.execute(session, f"OPEN {database}")
        print_result(result, console, prompt=get_settings().prompt, plain=plain)
    return session


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"data_dir={settings.data_dir or '.'} database={settings.database or '-'} | "
        f"prompt={settings.prompt} write_retries={settings.write_retries} "
        f"log_level={settings.log_level}"
    )


@app.command()
def run(
    commands: List[str] = typer.Argument(
        ..., help='Command lines, e.g. "SHOW ALL SORT BY MARK DESC".'
    ),
    database: Optional[str] = typer.Option(
        None,
        "--open",
        "-o",
        help="Database file to OPEN before running the commands.",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Confirm DELETE commands without asking.",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Print records as plain text instead of a table.",
    ),
) -> None:
    """
    Run command lines non-interactively. Exits with status 1 if any command fails.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    console = Console()

    dispatcher = CommandDispatcher(settings, confirm=lambda prompt: yes)
    session = _start_session(dispatcher, database or settings.database, console, plain)

    failed = 0
    for line in commands:
        result = dispatcher.execute(session, line)
        print_result(result, console, prompt=settings.prompt, plain=plain)
        if not result.ok:
            failed += 1
        if result.exit:
            break

    if failed:
        raise typer.Exit(code=1)


@app.command()
def shell(
    database: Optional[str] = typer.Option(
        None,
        "--open",
        "-o",
        help="Database file to OPEN at startup (default from settings).",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Print records as plain text instead of a table.",
    ),
) -> None:
    """
    Interactive command prompt. Type HELP for commands, EXIT to leave.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    console = Console()

    def confirm(prompt: str) -> bool:
        try:
            answer = console.input(f"{settings.prompt}: {prompt}: ", markup=False)
        except EOFError:
            return False
        return answer.strip()[:1].lower() == "y"

    dispatcher = CommandDispatcher(settings, confirm=confirm)
    session = _start_session(dispatcher, database or settings.database, console, plain)
    typer.echo("Type HELP for available commands.")

    while True:
        try:
            line = console.input(f"{settings.prompt}: ", markup=False)
        except EOFError:
            break
        result = dispatcher.execute(session, line)
        print_result(result, console, prompt=settings.prompt, plain=plain)
        if result.exit:
            break


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
    except CapacityOverflowError as exc:
        log.critical("Out of memory, cannot continue", extra={"reason": str(exc)})
        typer.echo(f"CMS: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
