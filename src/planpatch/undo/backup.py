"""Backup store.

Point-in-time copies of files kept in an application-private directory.
Copies are never deleted automatically.
"""

from __future__ import annotations

import contextlib
import shutil
import uuid
from pathlib import Path

from planpatch.core.errors import BackupError
from planpatch.core.logging import get_logger

logger = get_logger("undo.backup")


class BackupStore:
    """Creates and restores file copies.

    Attributes:
        backup_dir: Directory holding the copies.
    """

    def __init__(self, backup_dir: Path | str) -> None:
        self.backup_dir = Path(backup_dir)

    def _ensure_directory(self) -> None:
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackupError(f"Failed to create backup directory: {e}") from e
        with contextlib.suppress(OSError):
            self.backup_dir.chmod(0o700)

    def backup(self, path: str | Path) -> Path:
        """Copy a file into the store under a fresh unique name.

        Args:
            path: File to copy.

        Returns:
            Path of the backup copy.

        Raises:
            BackupError: If the source is missing, not a file, or unreadable.
        """
        source = Path(path)

        if not source.exists():
            raise BackupError(f"File does not exist: {path}", str(path))
        if not source.is_file():
            raise BackupError(f"Path is not a file: {path}", str(path))

        self._ensure_directory()

        backup_path = self.backup_dir / f"{uuid.uuid4()}-{source.name}"
        while backup_path.exists():
            backup_path = self.backup_dir / f"{uuid.uuid4()}-{source.name}"

        try:
            shutil.copy2(source, backup_path)
        except OSError as e:
            raise BackupError(f"Failed to create backup of {path}: {e}", str(path)) from e

        logger.debug("Backed up %s to %s", path, backup_path)
        return backup_path

    def restore(self, backup_path: str | Path, destination: str | Path) -> None:
        """Copy a backup over a destination path.

        Args:
            backup_path: Copy created by :meth:`backup`.
            destination: File to overwrite. Parent directories are created.

        Raises:
            BackupError: If the backup is gone or the copy fails.
        """
        backup = Path(backup_path)
        dest = Path(destination)

        if not backup.is_file():
            raise BackupError(f"Backup file does not exist: {backup_path}", str(destination))

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(backup, dest)
        except OSError as e:
            raise BackupError(
                f"Failed to restore backup to {destination}: {e}", str(destination)
            ) from e

        logger.debug("Restored %s from %s", destination, backup_path)

    def discard(self, backup_path: str | Path) -> bool:
        """Delete a backup copy that is no longer referenced.

        Returns:
            True if the copy was removed.
        """
        try:
            Path(backup_path).unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Failed to discard backup %s: %s", backup_path, e)
            return False
        return True
