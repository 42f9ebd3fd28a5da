"""Change applier.

Executes FileChange records against the filesystem. The applier knows
nothing about backups; undo tracking is layered on top by
:class:`planpatch.undo.manager.UndoManager`.

Example:
    applier = ChangeApplier()
    results = await applier.apply_all(parse_plan(text))
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from functools import partial

from planpatch.core.errors import ApplyError
from planpatch.core.logging import get_logger
from planpatch.protocol.models import ChangeAction, ChangeResult, FileChange

from .files import delete_file, read_text_with_encoding, write_text

logger = get_logger("apply.applier")


class ChangeApplier:
    """Applies file changes one at a time, in order.

    Attributes:
        detect_encoding: Detect and preserve encoding on modify.
    """

    def __init__(self, detect_encoding: bool = True) -> None:
        self.detect_encoding = detect_encoding

    async def apply_one(self, change: FileChange) -> None:
        """Apply a single file change.

        Raises:
            ApplyError: With the specific cause on failure.
        """
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, partial(self.apply_sync, change))

    async def apply_all(self, changes: Sequence[FileChange]) -> list[ChangeResult]:
        """Apply changes sequentially, capturing each outcome.

        A failure never stops later changes from being attempted.

        Returns:
            One ChangeResult per input, in input order.
        """
        results: list[ChangeResult] = []

        for change in changes:
            try:
                await self.apply_one(change)
            except ApplyError as e:
                logger.warning("Failed to %s %s: %s", change.action.value, change.path, e)
                results.append(ChangeResult.fail(change, str(e)))
            else:
                logger.debug("Applied %s to %s", change.action.value, change.path)
                results.append(ChangeResult.ok(change))

        return results

    def apply_sync(self, change: FileChange) -> None:
        """Blocking implementation of :meth:`apply_one`."""
        if change.action in (ChangeAction.CREATE, ChangeAction.REWRITE):
            self._write_whole(change)
        elif change.action is ChangeAction.MODIFY:
            self._modify(change)
        else:
            delete_file(change.path)

    def _write_whole(self, change: FileChange) -> None:
        if not change.changes:
            raise ApplyError(
                f"{change.action.value.capitalize()} action requires a content section",
                change.path,
            )
        write_text(change.path, change.changes[0].content)

    def _modify(self, change: FileChange) -> None:
        content, encoding = read_text_with_encoding(
            change.path, detect=self.detect_encoding
        )

        for edit in change.changes:
            if edit.search is None:
                raise ApplyError("Modify action requires a search section", change.path)
            if edit.search not in content:
                raise ApplyError(
                    f"Search text not found in file: {change.path}", change.path
                )
            content = content.replace(edit.search, edit.content)

        write_text(change.path, content, encoding=encoding)
