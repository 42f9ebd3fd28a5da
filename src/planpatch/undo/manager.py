"""Undo manager for plan application.

This module provides the UndoManager class that backs up files before a
batch of changes is applied, records those backups in the ledger, and
restores them on request.

Example:
    from planpatch.undo.manager import UndoManager

    manager = UndoManager(BackupStore(backup_dir), Ledger(history_file))

    # Apply a parsed plan with undo tracking
    results = await manager.apply_with_undo_tracking(changes, "Rename module")

    # Later, revert the whole batch
    description = await manager.undo_last()

    # Or revert one file to its most recent backup
    restored = await manager.undo_file("/path/to/file.py")
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable, Sequence
from functools import partial
from typing import Any, TypeVar

from planpatch.apply.applier import ChangeApplier
from planpatch.core.errors import BackupError
from planpatch.core.logging import get_logger
from planpatch.protocol.models import ChangeResult, FileChange

from .backup import BackupStore
from .ledger import Ledger
from .models import BackupFile, ChangeSet, UndoHistory

logger = get_logger("undo.manager")

T = TypeVar("T")

DEFAULT_DESCRIPTION = "Applied plan changes"


class UndoManager:
    """Coordinates backups, the ledger and the change applier.

    Ledger load-modify-save sequences run under one asyncio lock per
    manager, so concurrent calls on the same manager cannot lose a change
    set. Separate managers sharing a ledger file are not coordinated.
    """

    def __init__(
        self,
        backup_store: BackupStore,
        ledger: Ledger,
        applier: ChangeApplier | None = None,
    ) -> None:
        """Initialize the undo manager.

        Args:
            backup_store: Where pre-mutation copies are written.
            ledger: Persisted undo history.
            applier: Change applier. Creates a default one if None.
        """
        self._backup_store = backup_store
        self._ledger = ledger
        self._applier = applier or ChangeApplier()
        self._lock = asyncio.Lock()

    @property
    def backup_store(self) -> BackupStore:
        return self._backup_store

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def applier(self) -> ChangeApplier:
        return self._applier

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        """Run blocking file work in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args))

    async def apply(self, changes: Sequence[FileChange]) -> list[ChangeResult]:
        """Apply changes without undo tracking."""
        return await self._applier.apply_all(changes)

    async def apply_with_undo_tracking(
        self,
        changes: Sequence[FileChange],
        description: str = DEFAULT_DESCRIPTION,
    ) -> list[ChangeResult]:
        """Back up affected files, apply changes, then record the backups.

        Every non-create target is backed up once before any change is
        applied. Changes are applied regardless of their individual
        outcomes, and the change set is persisted only if it holds at
        least one backup.

        Args:
            changes: Batch to apply, in order.
            description: Shown when the batch is undone.

        Returns:
            One ChangeResult per change, in order.

        Raises:
            BackupError: If a backup fails. Nothing is applied and copies
                already made for this batch are discarded.
            LedgerError: If the history cannot be loaded or saved. The
                changes have been applied at that point.
        """
        async with self._lock:
            change_set = await self._backup_batch(changes, description)

            results = await self._applier.apply_all(changes)

            if change_set.is_empty:
                logger.debug("No backups taken, change set discarded")
                return results

            history = await self._run(self._ledger.load)
            history.push(change_set)
            await self._run(self._ledger.save, history)

            logger.info(
                "Recorded change set: %s (%d files)",
                description,
                len(change_set.backups),
            )
            return results

    async def _backup_batch(
        self,
        changes: Sequence[FileChange],
        description: str,
    ) -> ChangeSet:
        change_set = ChangeSet(description=description)

        try:
            for change in changes:
                if not change.action.needs_backup:
                    continue

                path = os.path.abspath(change.path)
                if change_set.has_backup_for(path):
                    continue

                backup_path = await self._run(self._backup_store.backup, path)
                change_set.add(BackupFile(original_path=path, backup_path=str(backup_path)))
        except BackupError as e:
            logger.error("Backup failed, batch aborted: %s", e)
            for backup in change_set.backups:
                await self._run(self._backup_store.discard, backup.backup_path)
            raise

        return change_set

    async def undo_last(self) -> str | None:
        """Revert the most recent change set.

        Returns:
            The undone change set's description, or None if there was
            nothing to undo.

        Raises:
            BackupError: If a backup cannot be restored. The ledger is left
                unchanged.
            LedgerError: If the history cannot be loaded or saved.
        """
        async with self._lock:
            history = await self._run(self._ledger.load)

            change_set = history.pop_last()
            if change_set is None:
                logger.info("Nothing to undo")
                return None

            for backup in change_set.backups:
                await self._run(
                    self._backup_store.restore,
                    backup.backup_path,
                    backup.original_path,
                )

            await self._run(self._ledger.save, history)

            logger.info(
                "Undone: %s (%d files)", change_set.description, len(change_set.backups)
            )
            return change_set.description

    async def undo_file(self, path: str) -> bool:
        """Restore one file from its most recent backup.

        The ledger is not modified, so a later :meth:`undo_last` still
        restores the whole change set.

        Args:
            path: File to restore.

        Returns:
            True if a backup was found and restored, False otherwise.

        Raises:
            BackupError: If the backup copy cannot be restored.
            LedgerError: If the history cannot be loaded.
        """
        abs_path = os.path.abspath(path)

        async with self._lock:
            history = await self._run(self._ledger.load)

            found = history.find_backup(abs_path)
            if found is None:
                logger.info("No backup recorded for %s", abs_path)
                return False

            change_set, backup = found
            await self._run(self._backup_store.restore, backup.backup_path, abs_path)

            logger.info("Restored %s from change set %s", abs_path, change_set.id)
            return True

    async def load_history(self) -> UndoHistory:
        """Load the persisted undo history."""
        return await self._run(self._ledger.load)

    async def get_history(self, limit: int = 10) -> list[dict[str, Any]]:
        """Get summary of undo history.

        Args:
            limit: Maximum number of change sets to return.

        Returns:
            List of change set summaries (most recent first).
        """
        history = await self.load_history()
        entries = []
        for change_set in reversed(history.change_sets[-limit:]):
            entries.append({
                "id": change_set.id,
                "description": change_set.description,
                "files": [b.original_path for b in change_set.backups],
                "timestamp": change_set.timestamp.isoformat(),
            })
        return entries
