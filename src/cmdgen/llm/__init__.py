"""Model-facing types, tools, parsing and the republic gateway."""

from .gateway import RepublicGateway
from .parse import command_from_arguments, map_tool_output, parse_candidate_text, question_from_arguments
from .tools import build_generation_tools
from .types import (
    COMMAND_TOOL_NAME,
    QUESTION_TOOL_NAME,
    TEXT_QUESTION_TOOL_NAME,
    ClarificationKind,
    ClarificationQuestion,
    CommandCandidate,
    CommandExplanation,
    GenerationOutput,
)

__all__ = [
    "COMMAND_TOOL_NAME",
    "QUESTION_TOOL_NAME",
    "TEXT_QUESTION_TOOL_NAME",
    "ClarificationKind",
    "ClarificationQuestion",
    "CommandCandidate",
    "CommandExplanation",
    "GenerationOutput",
    "RepublicGateway",
    "build_generation_tools",
    "command_from_arguments",
    "map_tool_output",
    "parse_candidate_text",
    "question_from_arguments",
]
