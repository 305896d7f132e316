"""Loading entity-to-table mappings from JSON files."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path


class ConfigError(Exception):
    """Raised when a table mapping configuration cannot be loaded."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"configuration error: {self.message}"


@dataclass
class TableMappingConfig:
    """Maps entity names to database table names."""

    mappings: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_json_file(cls, path: str | os.PathLike[str]) -> "TableMappingConfig":
        """Load a mapping from a JSON object of string to string."""
        file_path = Path(path)
        if not file_path.exists():
            raise ConfigError(f"config file does not exist: {file_path}")

        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"cannot read config file {file_path}: {exc}") from exc

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"cannot parse JSON config file {file_path}: {exc}") from exc

        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            raise ConfigError(
                f"cannot parse JSON config file {file_path}: expected an object of strings"
            )
        return cls(dict(data))

    def get_table_name(self, entity: str) -> str:
        """Return the table for ``entity``, or the entity name in lower case."""
        return self.mappings.get(entity, entity.lower())

    @classmethod
    def default(cls) -> "TableMappingConfig":
        """A built-in mapping used when no file is available."""
        return cls(
            {
                "Test": "tests",
                "Run": "test_runs",
                "Project": "projects",
                "Task": "tasks",
                "User": "users",
                "Issue": "issues",
            }
        )