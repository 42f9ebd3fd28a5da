"""Shared test fixtures for PlanPatch tests.

Fixture Dependency Hierarchy
============================

::

    temp_dir (base temporary directory)
    ├── temp_home (isolated HOME with XDG paths)
    │   └── data_dir (~/.local/share/planpatch)
    │       ├── backup_store
    │       ├── ledger
    │       └── undo_manager
    └── temp_project (isolated project directory, also the cwd)
        └── sample_file (sample.py)

    make_plan (factory building plan markup)
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from planpatch.apply.applier import ChangeApplier
from planpatch.undo.backup import BackupStore
from planpatch.undo.ledger import Ledger
from planpatch.undo.manager import UndoManager


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove PLANPATCH_* variables that would leak into config tests."""
    for name in (
        "PLANPATCH_DATA_DIR",
        "PLANPATCH_LOG_LEVEL",
        "PLANPATCH_FILE_LOGGING",
        "PLANPATCH_DETECT_ENCODING",
    ):
        monkeypatch.delenv(name, raising=False)


# ============================================================
# Directory Fixtures
# ============================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests.

    Yields:
        Path to temporary directory that is cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory with XDG paths."""
    home = temp_dir / "home"
    home.mkdir(parents=True)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    return home


@pytest.fixture
def temp_project(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary project directory and make it the cwd."""
    project = temp_dir / "project"
    project.mkdir(parents=True)
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def data_dir(temp_home: Path) -> Path:
    """Create the PlanPatch data directory."""
    path = temp_home / ".local" / "share" / "planpatch"
    path.mkdir(parents=True)
    return path


# ============================================================
# File Fixtures
# ============================================================


@pytest.fixture
def sample_file(temp_project: Path) -> Path:
    """Create a sample Python file for editing."""
    file_path = temp_project / "sample.py"
    file_path.write_text(
        'def hello():\n    print("Hello, World!")\n\n'
        'def goodbye():\n    print("Goodbye, World!")\n'
    )
    return file_path


# ============================================================
# Component Fixtures
# ============================================================


@pytest.fixture
def backup_store(data_dir: Path) -> BackupStore:
    return BackupStore(data_dir / "backups")


@pytest.fixture
def ledger(data_dir: Path) -> Ledger:
    return Ledger(data_dir / "history" / "undo_history.json")


@pytest.fixture
def undo_manager(backup_store: BackupStore, ledger: Ledger) -> UndoManager:
    return UndoManager(backup_store, ledger, ChangeApplier())


# ============================================================
# Plan Fixtures
# ============================================================


def fenced(text: str) -> str:
    """Wrap a body in marker lines."""
    return f"\n===\n{text}\n===\n"


@pytest.fixture
def make_plan() -> Callable[..., str]:
    """Factory building plan markup from (path, action, changes) tuples.

    Each change is a dict with optional description, search and content.
    """

    def _make(*files: tuple[str, str, list[dict[str, str]]]) -> str:
        parts = ["<Plan>"]
        for path, action, changes in files:
            parts.append(f'  <file path="{path}" action="{action}">')
            for change in changes:
                parts.append("    <change>")
                if "description" in change:
                    parts.append(f"      <description>{change['description']}</description>")
                if "search" in change:
                    parts.append(f"      <search>{fenced(change['search'])}</search>")
                if "content" in change:
                    parts.append(f"      <content>{fenced(change['content'])}</content>")
                parts.append("    </change>")
            parts.append("  </file>")
        parts.append("</Plan>")
        return "\n".join(parts)

    return _make
