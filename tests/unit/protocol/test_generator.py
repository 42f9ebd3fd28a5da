"""Tests for plan prompt generation."""

from __future__ import annotations

from pathlib import Path

from planpatch.protocol.generator import (
    PLAN_FORMAT_INSTRUCTIONS,
    generate_plan_prompt,
    language_for,
    render_file_tree,
)
from planpatch.protocol.parser import parse_plan


class TestLanguageFor:
    """Tests for language_for."""

    def test_known_extensions(self) -> None:
        assert language_for("main.py") == "python"
        assert language_for("app.tsx") == "tsx"
        assert language_for("lib.h") == "cpp"

    def test_unknown_extension_passes_through(self) -> None:
        assert language_for("notes.md") == "md"

    def test_no_extension(self) -> None:
        assert language_for("Makefile") == ""


class TestRenderFileTree:
    """Tests for render_file_tree."""

    def test_groups_by_directory(self) -> None:
        tree = render_file_tree(["src/b.py", "src/a.py", "README.md"])

        assert tree.splitlines() == [
            "README.md",
            "src/",
            "  a.py",
            "  b.py",
        ]

    def test_empty(self) -> None:
        assert render_file_tree([]) == ""


class TestGeneratePlanPrompt:
    """Tests for generate_plan_prompt."""

    def test_sections_in_order(self, temp_project: Path) -> None:
        source = temp_project / "app.py"
        source.write_text("print('hi')\n")

        prompt = generate_plan_prompt(["app.py"], "Say hello")

        order = [
            prompt.index("<file_map>"),
            prompt.index("<file_contents>"),
            prompt.index("<xml_formatting_instructions>"),
            prompt.index("<user_instructions>"),
        ]
        assert order == sorted(order)
        assert "File: app.py\n```python\nprint('hi')\n\n```" in prompt
        assert "Say hello" in prompt

    def test_missing_files_only_in_map(self, temp_project: Path) -> None:
        prompt = generate_plan_prompt(["gone.py"], "x")

        assert "gone.py" in prompt
        assert "File: gone.py" not in prompt

    def test_format_example_parses(self) -> None:
        """The embedded example is a valid plan."""
        start = PLAN_FORMAT_INSTRUCTIONS.index("<Plan>")
        end = PLAN_FORMAT_INSTRUCTIONS.index("</Plan>") + len("</Plan>")

        changes = parse_plan(PLAN_FORMAT_INSTRUCTIONS[start:end])

        assert len(changes) == 1
        assert changes[0].changes[0].search == "exact text to find"
        assert changes[0].changes[0].content == "replacement text"
