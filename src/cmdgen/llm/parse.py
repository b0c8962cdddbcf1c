"""Normalize tool-call arguments and plain-text answers into model outputs."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..errors import GenerationError
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


def command_from_arguments(arguments: Mapping[str, Any] | str) -> CommandCandidate:
    """Build a trimmed command candidate; items with an empty field are dropped."""

    payload = _load_arguments(arguments, "command")
    try:
        candidate = CommandCandidate.model_validate(payload)
    except ValidationError as exc:
        raise GenerationError(f"failed to parse command tool arguments: {exc}") from exc

    command = candidate.command.strip()
    if not command:
        raise GenerationError("generated command is empty")
    explanations = [
        CommandExplanation(kind=item.kind.strip(), value=item.value.strip(), explanation=item.explanation.strip())
        for item in candidate.explanations
    ]
    return CommandCandidate(
        command=command,
        reason=candidate.reason.strip(),
        explanations=[item for item in explanations if item.kind and item.value and item.explanation],
    )


def question_from_arguments(
    arguments: Mapping[str, Any] | str,
    kind: ClarificationKind = ClarificationKind.YES_NO,
) -> ClarificationQuestion:
    payload = _load_arguments(arguments, "question")
    try:
        parsed = ClarificationQuestion.model_validate({**payload, "kind": kind})
    except ValidationError as exc:
        raise GenerationError(f"failed to parse question tool arguments: {exc}") from exc

    question = parsed.question.strip()
    if not question:
        raise GenerationError("clarification question is empty")
    return ClarificationQuestion(question=question, reason=parsed.reason.strip(), kind=kind)


def map_tool_output(name: str, arguments: Mapping[str, Any] | str) -> GenerationOutput:
    """Map one tool call to a command or a clarification question."""

    if name == COMMAND_TOOL_NAME:
        return command_from_arguments(arguments)
    if name == QUESTION_TOOL_NAME:
        return question_from_arguments(arguments, ClarificationKind.YES_NO)
    if name == TEXT_QUESTION_TOOL_NAME:
        return question_from_arguments(arguments, ClarificationKind.TEXT)
    raise GenerationError(f"unsupported tool call returned from model: {name}")


def parse_candidate_text(raw: str) -> CommandCandidate:
    """Parse a plain-text answer as (optionally fenced) JSON command data."""

    text = strip_fences(raw)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        payload = None
    if isinstance(payload, dict):
        return command_from_arguments(payload)

    fragment = extract_first_json_object(text)
    if fragment is None:
        raise GenerationError("model output does not contain valid command data")
    try:
        payload = json.loads(fragment)
    except json.JSONDecodeError as exc:
        raise GenerationError(f"failed to parse JSON fragment: {exc}") from exc
    return command_from_arguments(payload)


def strip_fences(raw: str) -> str:
    trimmed = raw.strip()
    if not (trimmed.startswith("```") and trimmed.endswith("```")):
        return trimmed

    body: list[str] = []
    for line in trimmed.splitlines()[1:]:
        if line.strip() == "```":
            break
        body.append(line)
    return "\n".join(body).strip()


def extract_first_json_object(raw: str) -> str | None:
    """Return the first balanced `{...}` block, ignoring braces inside strings."""

    start: int | None = None
    depth = 0
    in_string = False
    escaped = False
    for idx, ch in enumerate(raw):
        if escaped:
            escaped = False
            continue
        if ch == "\\" and in_string:
            escaped = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "{":
            if depth == 0:
                start = idx
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start is not None:
                return raw[start : idx + 1]
    return None


def _load_arguments(arguments: Mapping[str, Any] | str, context: str) -> dict[str, Any]:
    if isinstance(arguments, str):
        try:
            loaded = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError as exc:
            raise GenerationError(f"failed to parse {context} tool arguments: {exc}") from exc
    else:
        loaded = dict(arguments)
    if not isinstance(loaded, dict):
        raise GenerationError(f"{context} tool arguments must be a JSON object")
    return loaded
