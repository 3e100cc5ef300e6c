from __future__ import annotations

from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from student_records.dispatcher import CommandResult
from student_records.domain.models import Record, format_mark

COLUMNS = ("ID", "Name", "Programme", "Mark")


def build_table(records: Sequence[Record], title: Optional[str] = None) -> Table:
    """
    Render records as a rich table.

    Cell values are wrapped in Text so that brackets in names are never read
    as console markup.
    """
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Name", style="magenta")
    table.add_column("Programme", style="green")
    table.add_column("Mark", justify="right", style="bold yellow")

    for record in records:
        table.add_row(
            Text(str(record.id)),
            Text(record.name),
            Text(record.programme),
            Text(format_mark(record.mark)),
        )
    return table


def format_lines(result: CommandResult, prompt: str = "CMS") -> List[str]:
    """
    Plain-text rendering: status line, column header and space-separated rows.
    """
    lines: List[str] = []
    if result.message:
        lines.append(f"{prompt}: {result.message}")
    if result.table:
        lines.append(" ".join(COLUMNS))
        for record in result.records:
            lines.append(f"{record.id} {record.name} {record.programme} {format_mark(record.mark)}")
    lines.extend(result.details)
    return lines


def print_result(
    result: CommandResult,
    console: Optional[Console] = None,
    prompt: str = "CMS",
    plain: bool = False,
) -> None:
    """
    Print a CommandResult. Failures are shown in red; record listings as a table
    unless `plain` is set.
    """
    console = console or Console()

    if plain:
        for line in format_lines(result, prompt):
            console.print(line, markup=False, highlight=False, soft_wrap=True)
        return

    if result.message:
        style = None if result.ok else "red"
        console.print(f"{prompt}: {result.message}", style=style, markup=False, highlight=False)
    if result.table and result.records:
        console.print(build_table(result.records))
    for line in result.details:
        console.print(line, markup=False, highlight=False)
