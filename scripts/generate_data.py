"""
Sample data generation script for the student records manager.

Implements deterministic pseudo-random student generation and writes the
result as a CSV file (for IMPORT CSV) or a tab-separated database file (for
OPEN), using the same writers as the application.
"""

from __future__ import annotations

import random
import sys
import time
from pathlib import Path
from typing import List

import typer

from student_records.config import Settings
from student_records.domain.models import Record
from student_records.infrastructure.persistence import export_csv, save_tsv

app = typer.Typer(help="Generate synthetic student records as CSV or TSV.")

FIRST_NAMES = ["Ann", "Brian", "Chloe", "Darius", "Eun-ji", "Farah", "Gao", "Hana", "Ivan", "Jo"]
LAST_NAMES = ["Goh", "Han", "Lim", "O'Neil", "Tan", "Ng", "Wong", "Kumar", "Lee", "Teo"]
PROGRAMMES = [
    "Computing Science",
    "Digital Supply Chain",
    "Game Development",
    "Electrical Engineering",
    'Applied "AI" Studies',
]


def _generate_records(rows: int, seed: int, first_id: int = 2_500_000) -> List[Record]:
    rng = random.Random(seed)
    ids = rng.sample(range(first_id, first_id + rows * 10), rows)
    records = []
    for record_id in ids:
        records.append(
            Record(
                id=record_id,
                name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
                programme=rng.choice(PROGRAMMES),
                mark=round(rng.uniform(0, 100), 1),
            )
        )
    return records


@app.command()
def main(
    output: Path = typer.Argument(..., help="File to write (.csv for CSV, anything else for TSV)."),
    rows: int = typer.Option(
        100,
        "--rows",
        "-r",
        min=1,
        help="Number of records to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
) -> None:
    """
    Generate synthetic student records and write them to OUTPUT.
    """
    start = time.perf_counter()
    output.parent.mkdir(parents=True, exist_ok=True)
    settings = Settings(data_dir=None)
    records = _generate_records(rows, seed)

    if output.suffix.lower() == ".csv":
        path = export_csv(records, str(output), settings)
    else:
        path = save_tsv(records, str(output), settings)

    duration = time.perf_counter() - start
    typer.echo(f"Wrote {rows:,} records -> {path} in {duration:.2f}s (seed={seed})")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
