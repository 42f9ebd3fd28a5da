"""Exception hierarchy for PlanPatch.

Parse, backup and ledger errors propagate to the caller. Apply errors
are raised per file and captured into ChangeResult values by the applier.
"""

from __future__ import annotations


class PlanPatchError(Exception):
    """Base class for all PlanPatch errors."""

    pass


class ConfigError(PlanPatchError):
    """Configuration could not be loaded or validated."""

    pass


class ProtocolError(PlanPatchError):
    """Plan markup is malformed or carries an invalid attribute."""

    pass


class ApplyError(PlanPatchError):
    """A single file change could not be applied."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class BackupError(PlanPatchError):
    """A backup copy could not be created or restored."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class LedgerError(PlanPatchError):
    """The persisted undo history could not be read or written."""

    pass
