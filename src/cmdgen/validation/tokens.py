"""Segment tokenizing and command head resolution."""

from __future__ import annotations

import re

from .segments import split_segments
from .types import CommandHead, SegmentToken

ASSIGNMENT_NAME_RE = re.compile(r"^[A-Za-z0-9_]+$")
WRAPPER_COMMANDS = frozenset({"sudo", "env", "nohup", "time", "nice"})
GROUPING_TOKENS = frozenset({"(", ")", "{", "}"})


def tokenize_segment(segment: str) -> list[SegmentToken]:
    """Split one segment into shell words, keeping both raw and dequoted text."""

    tokens: list[SegmentToken] = []
    raw: list[str] = []
    cooked: list[str] = []
    in_token = False
    token_start = 0
    in_single = False
    in_double = False
    escaped = False

    for idx, ch in enumerate(segment):
        if not in_token:
            if ch.isspace():
                continue
            in_token = True
            token_start = idx

        if escaped:
            raw.append(ch)
            cooked.append(ch)
            escaped = False
            continue
        if ch == "\\" and not in_single:
            raw.append(ch)
            escaped = True
            continue
        if ch == "'" and not in_double:
            raw.append(ch)
            in_single = not in_single
            continue
        if ch == '"' and not in_single:
            raw.append(ch)
            in_double = not in_double
            continue
        if not in_single and not in_double and ch.isspace():
            tokens.append(SegmentToken(raw="".join(raw), cooked="".join(cooked), start=token_start))
            raw.clear()
            cooked.clear()
            in_token = False
            continue

        raw.append(ch)
        cooked.append(ch)

    if in_token:
        tokens.append(SegmentToken(raw="".join(raw), cooked="".join(cooked), start=token_start))
    return tokens


def locate_head_token(tokens: list[SegmentToken]) -> CommandHead | None:
    """Find the effective command word after assignments, wrappers and bypass prefixes."""

    index = 0
    while index < len(tokens) and looks_like_assignment(tokens[index].cooked):
        index += 1

    prefixed_builtin = False
    prefixed_command = False
    while index < len(tokens):
        token = tokens[index]
        name = _head_name(token)
        if not name:
            index += 1
            continue

        lowered = name.lower()
        if lowered == "builtin":
            prefixed_builtin = True
            index += 1
            continue
        if lowered == "command":
            prefixed_command = True
            index += 1
            continue
        if lowered in WRAPPER_COMMANDS:
            index += 1
            continue
        return CommandHead(
            name=name,
            prefixed_builtin=prefixed_builtin,
            prefixed_command=prefixed_command,
            prefixed_backslash=token.raw.lstrip().startswith("\\"),
            token_index=index,
        )
    return None


def extract_head_command(segment: str) -> CommandHead | None:
    return locate_head_token(tokenize_segment(segment))


def collect_command_heads(command: str) -> list[CommandHead]:
    """Resolve the head of every top-level segment, in order."""

    heads: list[CommandHead] = []
    for segment in split_segments(command):
        head = extract_head_command(segment)
        if head is not None:
            heads.append(head)
    return heads


def _head_name(token: SegmentToken) -> str:
    if not token.raw.strip() or token.raw.strip() in GROUPING_TOKENS:
        return ""
    name = token.cooked.strip()
    if name[:1] in ("(", "{"):
        name = name[1:].strip()
    # closing word of a grouped list, e.g. `pwd)` in `(cd src && pwd) || true`
    if token.raw.endswith(")") and not token.raw.endswith("\\)") and name.endswith(")"):
        name = name[:-1].strip()
    return name


def looks_like_assignment(token: str) -> bool:
    if token.startswith("-") or "=" not in token:
        return False
    name, _ = token.split("=", 1)
    return bool(name) and ASSIGNMENT_NAME_RE.fullmatch(name) is not None
