"""Plan protocol: data model, parser and prompt generator."""

from planpatch.protocol.generator import generate_plan_prompt
from planpatch.protocol.markers import extract_between_markers
from planpatch.protocol.models import Change, ChangeAction, ChangeResult, FileChange
from planpatch.protocol.parser import ParserState, PlanParser, parse_plan

__all__ = [
    "Change",
    "ChangeAction",
    "ChangeResult",
    "FileChange",
    "ParserState",
    "PlanParser",
    "extract_between_markers",
    "generate_plan_prompt",
    "parse_plan",
]
