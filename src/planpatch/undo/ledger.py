"""Undo history persistence."""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from pathlib import Path

from planpatch.core.errors import LedgerError
from planpatch.core.logging import get_logger

from .models import UndoHistory

logger = get_logger("undo.ledger")


class Ledger:
    """Stores the whole undo history as one JSON file.

    Every save rewrites the file. There is no record-level locking, so
    callers serialise load-modify-save sequences themselves.

    Attributes:
        history_file: Location of the JSON record.
    """

    def __init__(self, history_file: Path | str) -> None:
        self.history_file = Path(history_file)

    def exists(self) -> bool:
        return self.history_file.exists()

    def load(self) -> UndoHistory:
        """Load the history.

        Returns:
            The persisted history, or an empty one if none exists yet.

        Raises:
            LedgerError: If the file cannot be read or parsed.
        """
        if not self.history_file.exists():
            return UndoHistory()

        try:
            content = self.history_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LedgerError(f"Failed to read undo history file: {e}") from e

        try:
            data = json.loads(content)
            if not isinstance(data, dict):
                raise TypeError(f"expected object, got {type(data).__name__}")
            history = UndoHistory.from_dict(data)
        except (
            json.JSONDecodeError, TypeError, KeyError, ValueError, AttributeError
        ) as e:
            raise LedgerError(f"Failed to parse undo history file: {e}") from e

        logger.debug("Loaded undo history with %d change sets", len(history))
        return history

    def save(self, history: UndoHistory) -> None:
        """Persist the full history, replacing the previous record.

        Uses atomic write (write to temp file, then rename).

        Raises:
            LedgerError: If the history cannot be written.
        """
        try:
            json_data = json.dumps(history.to_dict(), indent=2)
        except (TypeError, ValueError) as e:
            raise LedgerError(f"Failed to serialize undo history: {e}") from e

        directory = self.history_file.parent

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(json_data)

                # Rename temp file to target (atomic on POSIX)
                Path(temp_path).replace(self.history_file)

            except Exception:
                with contextlib.suppress(OSError):
                    Path(temp_path).unlink()
                raise

        except OSError as e:
            raise LedgerError(f"Failed to write undo history file: {e}") from e

        logger.debug("Saved undo history with %d change sets", len(history))
