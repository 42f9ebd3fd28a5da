"""Undo system data models.

This module provides the records persisted by the undo ledger:
- BackupFile: Where a file's pre-mutation copy was stored
- ChangeSet: The backups taken for one applied batch
- UndoHistory: Ordered change sets, oldest first

Example:
    change_set = ChangeSet(description="Applied plan changes")
    change_set.add(BackupFile("/src/app.py", "/data/backups/1234-app.py"))

    history = UndoHistory()
    history.push(change_set)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass
class BackupFile:
    """Pairing of an original path with its backup copy.

    Attributes:
        original_path: Absolute path of the file that was backed up.
        backup_path: Location of the copied bytes.
    """

    original_path: str
    backup_path: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "original_path": self.original_path,
            "backup_path": self.backup_path,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BackupFile:
        return cls(
            original_path=data["original_path"],
            backup_path=data["backup_path"],
        )


@dataclass
class ChangeSet:
    """Backups taken to make one batch undoable as a unit.

    Attributes:
        id: Unique identifier for this change set.
        description: Human-readable description of the batch.
        timestamp: When the change set was created.
        backups: Backups in the order they were taken.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    backups: list[BackupFile] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to undo."""
        return not self.backups

    def has_backup_for(self, path: str) -> bool:
        return self.get_backup(path) is not None

    def get_backup(self, path: str) -> BackupFile | None:
        """Find the backup recorded for an original path."""
        for backup in self.backups:
            if backup.original_path == path:
                return backup
        return None

    def add(self, backup: BackupFile) -> None:
        self.backups.append(backup)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "timestamp": self.timestamp.isoformat(),
            "backups": [b.to_dict() for b in self.backups],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChangeSet:
        backups = data.get("backups", [])
        if not isinstance(backups, list):
            raise TypeError(f"backups must be a list, got {type(backups).__name__}")

        timestamp_str = data.get("timestamp", "")
        if timestamp_str:
            timestamp = datetime.fromisoformat(timestamp_str)
        else:
            timestamp = datetime.now(UTC)

        return cls(
            id=data.get("id", str(uuid.uuid4())),
            description=data.get("description", ""),
            timestamp=timestamp,
            backups=[BackupFile.from_dict(b) for b in backups],
        )


@dataclass
class UndoHistory:
    """Ordered change sets, oldest first. Undo targets the last one.

    Attributes:
        change_sets: Persisted change sets.
    """

    change_sets: list[ChangeSet] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.change_sets

    def __len__(self) -> int:
        return len(self.change_sets)

    def push(self, change_set: ChangeSet) -> None:
        """Append a change set.

        Raises:
            ValueError: If the change set has no backups.
        """
        if change_set.is_empty:
            raise ValueError("Cannot record a change set without backups")
        self.change_sets.append(change_set)

    def pop_last(self) -> ChangeSet | None:
        """Remove and return the most recent change set."""
        if not self.change_sets:
            return None
        return self.change_sets.pop()

    def find_backup(self, path: str) -> tuple[ChangeSet, BackupFile] | None:
        """Find the most recent backup of a path.

        Args:
            path: Absolute original path.

        Returns:
            The (change set, backup) pair, or None if never backed up.
        """
        for change_set in reversed(self.change_sets):
            backup = change_set.get_backup(path)
            if backup is not None:
                return change_set, backup
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"change_sets": [c.to_dict() for c in self.change_sets]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UndoHistory:
        change_sets = data.get("change_sets", [])
        if not isinstance(change_sets, list):
            raise TypeError(
                f"change_sets must be a list, got {type(change_sets).__name__}"
            )
        return cls(change_sets=[ChangeSet.from_dict(c) for c in change_sets])
