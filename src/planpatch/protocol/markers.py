"""Marker fence extraction for plan text bodies.

Search and content bodies are usually fenced by lines holding only
``===`` so that arbitrary source code can be embedded without escaping:

    <content>
    ===
    def main():
        pass
    ===
    </content>
"""

from __future__ import annotations

MARKER = "==="


def split_lines(text: str) -> list[str]:
    """Split on newlines, dropping a trailing carriage return per line."""
    return [line.removesuffix("\r") for line in text.split("\n")]


def extract_between_markers(text: str) -> str:
    """Return the payload between the first two marker lines.

    A marker line is one whose stripped value is exactly ``===``. When
    fewer than two marker lines exist, or they are adjacent, the raw text
    is returned unchanged.

    Args:
        text: Raw element text.

    Returns:
        The fenced payload, or ``text`` itself.
    """
    lines = split_lines(text)
    markers = [i for i, line in enumerate(lines) if line.strip() == MARKER][:2]

    if len(markers) == 2:
        start, end = markers
        if start + 1 < end:
            return "\n".join(lines[start + 1:end])

    return text
