"""CLI entry point for PlanPatch."""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from planpatch import __version__
from planpatch.cli.dependencies import Dependencies
from planpatch.config import ConfigLoader, PlanPatchConfig
from planpatch.core import ConfigError, PlanPatchError, get_logger, setup_logging
from planpatch.core.logging import get_default_log_file, parse_log_level
from planpatch.protocol import ChangeResult, generate_plan_prompt, parse_plan

logger = get_logger("cli")


class UsageError(Exception):
    """Invalid command line arguments."""

    pass


class Output:
    """Renders command results as rich text or JSON."""

    def __init__(self, json_output: bool = False, console: Console | None = None) -> None:
        self.json_output = json_output
        self.console = console or Console()

    def emit_json(self, data: Any) -> None:
        print(json.dumps(data, indent=2))

    def error(self, message: str) -> None:
        if self.json_output:
            self.emit_json({"error": message})
        else:
            self.console.print(f"[red]Error:[/red] {escape(message)}")

    def results(self, results: list[ChangeResult]) -> None:
        if self.json_output:
            self.emit_json([r.to_dict() for r in results])
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Path")
        table.add_column("Action")
        table.add_column("Status")
        table.add_column("Message")
        for result in results:
            status = "[green]ok[/green]" if result.success else "[red]failed[/red]"
            table.add_row(
                escape(result.path),
                result.action.value,
                status,
                escape(result.message or ""),
            )
        self.console.print(table)


def _pop_option(args: list[str], name: str) -> str | None:
    """Remove ``name VALUE`` from args and return VALUE."""
    if name not in args:
        return None
    index = args.index(name)
    if index + 1 >= len(args):
        raise UsageError(f"{name} requires a value")
    value = args[index + 1]
    del args[index:index + 2]
    return value


def _pop_flag(args: list[str], name: str) -> bool:
    if name in args:
        args.remove(name)
        return True
    return False


def _read_plan(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise UsageError(f"Cannot read plan file {source}: {e}") from e


def _single_argument(args: list[str], name: str) -> str:
    if len(args) != 1:
        raise UsageError(f"Expected exactly one {name}")
    return args[0]


async def cmd_parse(deps: Dependencies, args: list[str], out: Output) -> int:
    changes = parse_plan(_read_plan(_single_argument(args, "PLAN_FILE")))

    if out.json_output:
        out.emit_json([c.to_dict() for c in changes])
    else:
        for change in changes:
            out.console.print(
                f"[bold]{change.action.value}[/bold] {escape(change.path)} "
                f"({len(change.changes)} changes)"
            )
    return 0


async def cmd_apply(deps: Dependencies, args: list[str], out: Output) -> int:
    description = _pop_option(args, "--description")
    no_undo = _pop_flag(args, "--no-undo")
    changes = parse_plan(_read_plan(_single_argument(args, "PLAN_FILE")))

    manager = deps.undo_manager
    if no_undo:
        results = await manager.apply(changes)
    else:
        results = await manager.apply_with_undo_tracking(
            changes,
            description or deps.config.apply.default_description,
        )

    out.results(results)
    return 0 if all(r.success for r in results) else 1


async def cmd_undo(deps: Dependencies, args: list[str], out: Output) -> int:
    if args:
        raise UsageError("undo takes no arguments")

    description = await deps.undo_manager.undo_last()

    if out.json_output:
        out.emit_json({"undone": description})
    elif description is None:
        out.console.print("Nothing to undo")
    else:
        out.console.print(f"Undone: {escape(description)}")
    return 0


async def cmd_undo_file(deps: Dependencies, args: list[str], out: Output) -> int:
    path = _single_argument(args, "PATH")
    restored = await deps.undo_manager.undo_file(path)

    if out.json_output:
        out.emit_json({"path": path, "restored": restored})
    elif restored:
        out.console.print(f"Restored {escape(path)}")
    else:
        out.console.print(f"No backup found for {escape(path)}")
    return 0 if restored else 1


async def cmd_history(deps: Dependencies, args: list[str], out: Output) -> int:
    limit_str = _pop_option(args, "--limit")
    if args:
        raise UsageError("history takes no positional arguments")
    try:
        limit = int(limit_str) if limit_str is not None else 10
    except ValueError as e:
        raise UsageError(f"--limit must be an integer, got: {limit_str}") from e

    entries = await deps.undo_manager.get_history(limit=limit)

    if out.json_output:
        out.emit_json(entries)
    elif not entries:
        out.console.print("No undo history")
    else:
        for entry in entries:
            out.console.print(
                f"[dim]{entry['timestamp']}[/dim] {escape(entry['description'])} "
                f"({len(entry['files'])} files)"
            )
    return 0


async def cmd_prompt(deps: Dependencies, args: list[str], out: Output) -> int:
    instructions = _pop_option(args, "--instructions")
    if instructions is None:
        raise UsageError("prompt requires --instructions")
    if not args:
        raise UsageError("prompt requires at least one FILE")

    prompt = generate_plan_prompt(args, instructions)

    if out.json_output:
        out.emit_json({"prompt": prompt})
    else:
        sys.stdout.write(prompt)
    return 0


CommandHandler = Callable[[Dependencies, list[str], Output], Awaitable[int]]

COMMANDS: dict[str, CommandHandler] = {
    "parse": cmd_parse,
    "apply": cmd_apply,
    "undo": cmd_undo,
    "undo-file": cmd_undo_file,
    "history": cmd_history,
    "prompt": cmd_prompt,
}


def configure_logging(config: PlanPatchConfig) -> None:
    """Apply logging settings from configuration."""
    log_file = config.logging.log_file or get_default_log_file(config.storage.data_dir)
    setup_logging(
        level=parse_log_level(config.logging.level),
        log_file=log_file,
        file_logging=config.logging.file_logging,
    )


def main(argv: list[str] | None = None, loader: ConfigLoader | None = None) -> int:
    """Main entry point for PlanPatch CLI.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].
        loader: Configuration loader. Defaults to the standard hierarchy.

    Returns:
        Exit code (0 for success, 1 for failure, 2 for usage errors).
    """
    args = list(sys.argv[1:] if argv is None else argv)

    if "--version" in args or "-v" in args:
        print(f"planpatch {__version__}")
        return 0

    if not args or "--help" in args or "-h" in args:
        print_help()
        return 0

    out = Output(json_output=_pop_flag(args, "--json"))
    command, rest = args[0], args[1:]

    handler = COMMANDS.get(command)
    if handler is None:
        out.error(f"Unknown command: {command}")
        return 2

    try:
        config = (loader or ConfigLoader()).config
    except ConfigError as e:
        out.error(str(e))
        return 1

    configure_logging(config)
    deps = Dependencies.create(config)

    try:
        return asyncio.run(handler(deps, rest, out))
    except UsageError as e:
        out.error(str(e))
        return 2
    except PlanPatchError as e:
        logger.debug("Command %s failed", command, exc_info=True)
        out.error(str(e))
        return 1


def print_help() -> None:
    """Print help message."""
    help_text = """
PlanPatch - apply structured file-edit plans with undo

Usage: planpatch [--json] COMMAND [ARGS]

Commands:
  parse PLAN_FILE                 Show the file changes in a plan
  apply PLAN_FILE                 Apply a plan, recording backups for undo
      --description TEXT          Description stored with the change set
      --no-undo                   Apply without backups
  undo                            Revert the most recent applied plan
  undo-file PATH                  Restore one file from its latest backup
  history [--limit N]             List recorded change sets
  prompt FILE... --instructions TEXT
                                  Build a plan request for the given files

Use - as PLAN_FILE to read from stdin.

Options:
  -v, --version     Show version and exit
  -h, --help        Show this help message
  --json            Output results in JSON format
"""
    print(help_text.strip())


if __name__ == "__main__":
    sys.exit(main())
