"""Command line interface for PlanPatch."""

from planpatch.cli.main import main

__all__ = ["main"]
