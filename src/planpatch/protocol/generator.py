"""Plan prompt generation.

Builds the request text handed to a plan author: a map of the selected
files, their contents, instructions describing the plan format accepted
by :func:`planpatch.protocol.parser.parse_plan`, and the user's request.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath

from planpatch.apply.files import read_text
from planpatch.core.logging import get_logger

logger = get_logger("protocol.generator")

LANGUAGE_BY_EXTENSION = {
    "js": "javascript",
    "ts": "typescript",
    "jsx": "tsx",
    "tsx": "tsx",
    "py": "python",
    "rs": "rust",
    "go": "go",
    "java": "java",
    "cpp": "cpp",
    "c": "cpp",
    "h": "cpp",
}

PLAN_FORMAT_INSTRUCTIONS = """\
Respond with a plan describing every file edit:

<Plan>
  <file path="path/to/file" action="modify">
    <change>
      <description>What this change does</description>
      <search>
===
exact text to find
===
      </search>
      <content>
===
replacement text
===
      </content>
    </change>
  </file>
</Plan>

Rules:
- action is one of create, rewrite, modify, delete.
- create and rewrite take a single change whose content is the full file.
- modify needs a search section; every occurrence of the search text is
  replaced, and multiple changes apply in order.
- delete needs no change elements.
- Wrap search and content bodies in lines containing only ===."""


def language_for(path: str) -> str:
    """Code fence language tag for a file path."""
    extension = os.path.splitext(path)[1].lstrip(".")
    return LANGUAGE_BY_EXTENSION.get(extension, extension)


def render_file_tree(paths: Iterable[str]) -> str:
    """Render paths as an indented tree.

    Paths sharing leading directories are grouped under them.

    Args:
        paths: File paths, in any order.

    Returns:
        One line per directory or file, directories suffixed with ``/``.
    """
    tree: dict[str, dict] = {}
    for path in paths:
        node = tree
        for part in PurePosixPath(path.replace(os.sep, "/")).parts:
            node = node.setdefault(part, {})

    lines: list[str] = []

    def walk(node: dict[str, dict], depth: int) -> None:
        for name in sorted(node):
            children = node[name]
            suffix = "/" if children and name != "/" else ""
            lines.append(f"{'  ' * depth}{name}{suffix}")
            walk(children, depth + 1)

    walk(tree, 0)
    return "\n".join(lines)


def generate_plan_prompt(file_paths: Sequence[str], user_instructions: str) -> str:
    """Build a plan request for the given files.

    Paths that are not regular files appear in the file map only.

    Args:
        file_paths: Files to include.
        user_instructions: What the user wants changed.

    Returns:
        The prompt text.
    """
    sections: list[str] = []

    sections.append(f"<file_map>\n{render_file_tree(file_paths)}\n</file_map>")

    contents: list[str] = []
    for path in file_paths:
        if not os.path.isfile(path):
            continue
        content = read_text(path, lossy=True)
        contents.append(f"File: {path}\n```{language_for(path)}\n{content}\n```\n")
    sections.append("<file_contents>\n" + "\n".join(contents) + "</file_contents>")

    sections.append(
        f"<xml_formatting_instructions>\n{PLAN_FORMAT_INSTRUCTIONS}\n"
        "</xml_formatting_instructions>"
    )
    sections.append(f"<user_instructions>\n{user_instructions}\n</user_instructions>")

    logger.debug("Generated plan prompt for %d paths", len(file_paths))
    return "\n\n".join(sections) + "\n"
