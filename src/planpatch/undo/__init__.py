"""Undo system for applied plans.

This package backs up files before a plan batch mutates them and lets
the batch, or a single file, be restored afterwards.

Example:
    from planpatch.undo import BackupStore, Ledger, UndoManager

    manager = UndoManager(BackupStore(backup_dir), Ledger(history_file))

    results = await manager.apply_with_undo_tracking(changes, "Refactor")

    description = await manager.undo_last()
"""

from planpatch.undo.backup import BackupStore
from planpatch.undo.ledger import Ledger
from planpatch.undo.manager import UndoManager
from planpatch.undo.models import BackupFile, ChangeSet, UndoHistory

__all__ = [
    "BackupFile",
    "BackupStore",
    "ChangeSet",
    "Ledger",
    "UndoHistory",
    "UndoManager",
]
