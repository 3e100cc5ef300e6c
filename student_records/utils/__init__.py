"""
Utilities package for the student records manager.

Exports shared helpers for logging and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from student_records.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
