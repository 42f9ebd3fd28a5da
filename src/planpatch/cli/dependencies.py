"""Dependency injection container for CLI.

This module wires the applier and undo components together from a
configuration, making it easy to swap implementations in tests.
"""

from __future__ import annotations

from dataclasses import dataclass

from planpatch.apply.applier import ChangeApplier
from planpatch.config.models import PlanPatchConfig
from planpatch.undo.backup import BackupStore
from planpatch.undo.ledger import Ledger
from planpatch.undo.manager import UndoManager


@dataclass
class Dependencies:
    """Container for CLI dependencies.

    Example:
        ```python
        # Production use
        deps = Dependencies.create(config)

        # Testing
        deps = Dependencies(config=config, undo_manager=fake_manager)
        ```
    """

    config: PlanPatchConfig
    undo_manager: UndoManager

    @classmethod
    def create(cls, config: PlanPatchConfig) -> Dependencies:
        """Build all components from configuration.

        Args:
            config: Loaded configuration.

        Returns:
            Wired dependencies.
        """
        applier = ChangeApplier(detect_encoding=config.apply.detect_encoding)
        manager = UndoManager(
            backup_store=BackupStore(config.storage.backups_path),
            ledger=Ledger(config.storage.history_path),
            applier=applier,
        )
        return cls(config=config, undo_manager=manager)
