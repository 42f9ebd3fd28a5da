"""PlanPatch - apply structured file-edit plans with undo."""

try:
    from importlib.metadata import version

    __version__ = version("planpatch")
except Exception:
    __version__ = "0.0.0"  # Fallback for development/testing

__all__ = ["__version__"]
