"""Plan data models.

This module provides the records produced by the plan parser and
consumed by the change applier:
- ChangeAction: What to do with a file
- Change: One edit unit inside a file element
- FileChange: All edits for one target path
- ChangeResult: Outcome of applying one FileChange
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from planpatch.core.errors import ProtocolError


class ChangeAction(str, Enum):
    """Mutation semantics for a file element."""

    CREATE = "create"
    REWRITE = "rewrite"
    MODIFY = "modify"
    DELETE = "delete"

    @classmethod
    def parse(cls, value: str | None) -> ChangeAction:
        """Map a wire attribute value to an action.

        Matching is exact and case-sensitive.

        Args:
            value: The ``action`` attribute value, or None if absent.

        Returns:
            The matching ChangeAction.

        Raises:
            ProtocolError: If the value is missing or not recognised.
        """
        if value is None:
            raise ProtocolError("Missing action attribute on file element")
        for action in cls:
            if action.value == value:
                return action
        raise ProtocolError(f"Invalid action: {value}")

    @property
    def needs_backup(self) -> bool:
        """Whether the target's prior content must be backed up."""
        return self is not ChangeAction.CREATE


@dataclass
class Change:
    """One edit unit.

    Attributes:
        description: Free text, informational only.
        search: Text to locate. Required for modify, ignored otherwise.
        content: Replacement text, or the full file for create/rewrite.
    """

    description: str = ""
    search: str | None = None
    content: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "search": self.search,
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Change:
        return cls(
            description=data.get("description", ""),
            search=data.get("search"),
            content=data.get("content", ""),
        )


@dataclass
class FileChange:
    """All edits targeting one path.

    Attributes:
        path: Target file, used as given.
        action: Mutation semantics.
        changes: Edits in application order. Create and rewrite use only
            the first entry.
    """

    path: str
    action: ChangeAction
    changes: list[Change] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "action": self.action.value,
            "changes": [c.to_dict() for c in self.changes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileChange:
        return cls(
            path=data.get("path", ""),
            action=ChangeAction.parse(data.get("action")),
            changes=[Change.from_dict(c) for c in data.get("changes", [])],
        )


@dataclass
class ChangeResult:
    """Outcome of applying one FileChange.

    Attributes:
        path: Target path, as given in the FileChange.
        action: The attempted action.
        success: Whether the change was applied.
        message: Human-readable failure cause.
    """

    path: str
    action: ChangeAction
    success: bool
    message: str | None = None

    @classmethod
    def ok(cls, change: FileChange) -> ChangeResult:
        """Build a successful result for a change."""
        return cls(path=change.path, action=change.action, success=True)

    @classmethod
    def fail(cls, change: FileChange, message: str) -> ChangeResult:
        """Build a failed result for a change."""
        return cls(
            path=change.path,
            action=change.action,
            success=False,
            message=message,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "action": self.action.value,
            "success": self.success,
            "message": self.message,
        }
