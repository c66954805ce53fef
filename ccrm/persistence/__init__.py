"""
Persistence module for CSV import/export and backups.
"""

from .csv_store import CsvParser, ImportExportService, STUDENT_HEADER, COURSE_HEADER
from .backup_manager import BackupService, calculate_directory_size

__all__ = [
    "CsvParser",
    "ImportExportService",
    "STUDENT_HEADER",
    "COURSE_HEADER",
    "BackupService",
    "calculate_directory_size",
]
