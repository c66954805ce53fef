"""
Backups of the CSV data files into timestamped folders.
"""

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..config import AppConfig
from ..core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "backup_"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


class BackupService:
    """Copies the student and course files into ``backups/backup_<timestamp>``."""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig()

    @property
    def backup_path(self) -> Path:
        return self._config.backup_path

    def perform_backup(self) -> Path:
        """Create a new backup folder and copy whichever data files exist."""
        folder = self._new_backup_folder()
        try:
            for source in (self._config.students_file, self._config.courses_file):
                if source.exists():
                    shutil.copy2(source, folder / source.name)
                else:
                    logger.warning("Data file missing, not backed up: %s", source)
        except OSError as e:
            raise PersistenceError(f"Backup to {folder} failed: {e}")

        logger.info("Backup created at %s", folder)
        return folder

    def _new_backup_folder(self) -> Path:
        stamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        try:
            self.backup_path.mkdir(parents=True, exist_ok=True)
            folder = self.backup_path / f"{BACKUP_PREFIX}{stamp}"
            suffix = 1
            while folder.exists():
                folder = self.backup_path / f"{BACKUP_PREFIX}{stamp}_{suffix}"
                suffix += 1
            folder.mkdir()
        except OSError as e:
            raise PersistenceError(f"Cannot create backup folder in {self.backup_path}: {e}")
        return folder

    def list_backups(self) -> List[Path]:
        """Backup folders, oldest first."""
        if not self.backup_path.is_dir():
            return []
        return sorted(p for p in self.backup_path.iterdir()
                      if p.is_dir() and p.name.startswith(BACKUP_PREFIX))

    def total_backup_size(self) -> int:
        return calculate_directory_size(self.backup_path)


def calculate_directory_size(path) -> int:
    """Total size in bytes of every file below ``path`` (0 if it is missing)."""
    path = Path(path)
    if not path.exists():
        return 0
    if path.is_file():
        return path.stat().st_size

    total = 0
    try:
        with os.scandir(path) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    total += calculate_directory_size(entry.path)
                elif entry.is_file(follow_symlinks=False):
                    total += entry.stat(follow_symlinks=False).st_size
    except OSError as e:
        raise PersistenceError(f"Cannot read {path}: {e}")
    return total
