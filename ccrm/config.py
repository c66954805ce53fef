"""
Application configuration for the CCRM platform.

Defaults can be overridden from a JSON file (``--config``) or a plain dict.
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .core.exceptions import ConfigurationError


@dataclass
class AppConfig:
    """Central configuration consumed by every CCRM service."""
    data_folder: str = "data"
    backup_folder: str = "backups"
    students_csv_name: str = "students.csv"
    courses_csv_name: str = "courses.csv"
    max_credits_per_semester: int = 18
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def __post_init__(self):
        if (not isinstance(self.max_credits_per_semester, int)
                or isinstance(self.max_credits_per_semester, bool)
                or self.max_credits_per_semester <= 0):
            raise ConfigurationError(
                "max_credits_per_semester must be a positive integer",
                details={'max_credits_per_semester': self.max_credits_per_semester})
        for name in ("students_csv_name", "courses_csv_name"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name} cannot be empty")

    @classmethod
    def from_dict(cls, values: Optional[Dict[str, Any]] = None) -> "AppConfig":
        """Build a config from a dict; unknown keys are ignored."""
        values = values or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

    @classmethod
    def load(cls, path) -> "AppConfig":
        """Load configuration from a JSON file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                values = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}")
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Invalid JSON in configuration file {path}: {e}")
        if not isinstance(values, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
        return cls.from_dict(values)

    @property
    def data_path(self) -> Path:
        return Path(self.data_folder)

    @property
    def backup_path(self) -> Path:
        return Path(self.backup_folder)

    @property
    def students_file(self) -> Path:
        return self.data_path / self.students_csv_name

    @property
    def courses_file(self) -> Path:
        return self.data_path / self.courses_csv_name
