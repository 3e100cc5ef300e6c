"""
Parsing package for the student records manager.

Text in, typed values out: the key=value tokenizer, the four-column CSV codec,
and the command-line parser built on both.
"""

from student_records.parsing.commands import Command, parse_command
from student_records.parsing.csv_codec import CSV_HEADER, format_row, is_header, split_row
from student_records.parsing.tokenizer import extract_value, parse_float, parse_int

__all__ = [
    "CSV_HEADER",
    "Command",
    "extract_value",
    "format_row",
    "is_header",
    "parse_command",
    "parse_float",
    "parse_int",
    "split_row",
]
