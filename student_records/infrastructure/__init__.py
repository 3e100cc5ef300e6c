"""
Infrastructure package for the student records manager.

Centralizes file I/O: path resolution, retried writes, and the TSV, CSV and
SQL text formats. Keep this layer focused on I/O, decoupled from command
parsing and dispatch.
"""

from student_records.infrastructure.file_factory import read_lines, resolve_write_path, write_lines
from student_records.infrastructure.persistence import (
    backup,
    export_csv,
    export_sql,
    import_csv,
    load_tsv,
    save_tsv,
)

__all__ = [
    "backup",
    "export_csv",
    "export_sql",
    "import_csv",
    "load_tsv",
    "read_lines",
    "resolve_write_path",
    "save_tsv",
    "write_lines",
]
