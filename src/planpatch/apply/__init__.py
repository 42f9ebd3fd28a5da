"""Change application against the filesystem."""

from planpatch.apply.applier import ChangeApplier
from planpatch.apply.files import delete_file, read_text, write_text

__all__ = [
    "ChangeApplier",
    "delete_file",
    "read_text",
    "write_text",
]
