"""Plan parser.

Converts plan markup into an ordered list of FileChange records. The
document is a sequence of ``file`` elements, optionally wrapped in a
``Plan`` element:

    <Plan>
      <file path="src/app.py" action="modify">
        <change>
          <description>Rename greeting</description>
          <search>
    ===
    print("hi")
    ===
          </search>
          <content>
    ===
    print("hello")
    ===
          </content>
        </change>
      </file>
    </Plan>

Parsing runs over a streaming event reader with an explicit state
machine. Unknown elements are transparent in structural positions and
treated as text inside field bodies.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from enum import Enum

from planpatch.core.errors import ProtocolError
from planpatch.core.logging import get_logger

from .markers import extract_between_markers
from .models import Change, ChangeAction, FileChange

logger = get_logger("protocol.parser")

# Synthetic root so a bare sequence of file elements is well-formed
_WRAPPER_TAG = "planpatch-document"

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")

PLAN_TAG = "Plan"
FILE_TAG = "file"
CHANGE_TAG = "change"
DESCRIPTION_TAG = "description"
SEARCH_TAG = "search"
CONTENT_TAG = "content"


class ParserState(Enum):
    """Position of the parser within the plan structure."""

    OUTSIDE = "outside"
    IN_FILE = "in_file"
    IN_CHANGE = "in_change"
    IN_DESCRIPTION = "in_description"
    IN_SEARCH = "in_search"
    IN_CONTENT = "in_content"

    @property
    def is_field(self) -> bool:
        return self in _FIELD_STATES


_FIELD_STATES = frozenset({
    ParserState.IN_DESCRIPTION,
    ParserState.IN_SEARCH,
    ParserState.IN_CONTENT,
})

_FIELD_TAGS = {
    DESCRIPTION_TAG: ParserState.IN_DESCRIPTION,
    SEARCH_TAG: ParserState.IN_SEARCH,
    CONTENT_TAG: ParserState.IN_CONTENT,
}


class PlanParser:
    """Single-use parser for one plan document.

    Example:
        changes = PlanParser().parse(text)
    """

    def __init__(self) -> None:
        self._state = ParserState.OUTSIDE
        # One entry per open element: whether it drove a state transition
        self._open: list[bool] = []
        self._file: FileChange | None = None
        self._change: Change | None = None
        self._results: list[FileChange] = []

    @property
    def state(self) -> ParserState:
        return self._state

    def parse(self, wire_text: str) -> list[FileChange]:
        """Parse plan markup.

        Elements left unterminated at end of input are dropped.

        Args:
            wire_text: The plan document.

        Returns:
            FileChange records in document order.

        Raises:
            ProtocolError: On malformed markup or an invalid action.
        """
        body = _XML_DECLARATION.sub("", wire_text, count=1)
        reader = ET.XMLPullParser(events=("start", "end"))

        try:
            reader.feed(f"<{_WRAPPER_TAG}>")
            reader.feed(body)
            for event, elem in reader.read_events():
                if event == "start":
                    self._on_start(elem)
                else:
                    self._on_end(elem)
        except ET.ParseError as e:
            raise ProtocolError(f"Error parsing plan: {e}") from e

        if self._file is not None:
            logger.debug("Dropping unterminated file element: %s", self._file.path)

        logger.debug("Parsed %d file changes", len(self._results))
        return self._results

    def _on_start(self, elem: ET.Element) -> None:
        tag = elem.tag
        state = self._state

        if state is ParserState.OUTSIDE and tag == FILE_TAG:
            self._file = FileChange(
                path=elem.get("path", ""),
                action=ChangeAction.parse(elem.get("action")),
            )
            self._enter(ParserState.IN_FILE)
        elif state is ParserState.IN_FILE and tag == CHANGE_TAG:
            self._change = Change()
            self._enter(ParserState.IN_CHANGE)
        elif state is ParserState.IN_CHANGE and tag in _FIELD_TAGS:
            self._enter(_FIELD_TAGS[tag])
        else:
            self._open.append(False)

    def _on_end(self, elem: ET.Element) -> None:
        if not self._open or not self._open.pop():
            return

        state = self._state

        if state.is_field:
            self._store_field(state, elem)
            self._state = ParserState.IN_CHANGE
        elif state is ParserState.IN_CHANGE:
            if self._file is not None and self._change is not None:
                self._file.changes.append(self._change)
            self._change = None
            self._state = ParserState.IN_FILE
        elif state is ParserState.IN_FILE:
            if self._file is not None:
                self._results.append(self._file)
            self._file = None
            self._state = ParserState.OUTSIDE
            elem.clear()

    def _enter(self, state: ParserState) -> None:
        self._open.append(True)
        self._state = state

    def _store_field(self, state: ParserState, elem: ET.Element) -> None:
        if self._change is None:
            return

        text = "".join(elem.itertext()).strip()

        if state is ParserState.IN_DESCRIPTION:
            self._change.description = text
        elif state is ParserState.IN_SEARCH:
            self._change.search = extract_between_markers(text) if text else None
        else:
            self._change.content = extract_between_markers(text)


def parse_plan(wire_text: str) -> list[FileChange]:
    """Parse plan markup into FileChange records.

    Raises:
        ProtocolError: On malformed markup or an invalid action.
    """
    return PlanParser().parse(wire_text)
