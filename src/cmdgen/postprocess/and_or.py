"""Make mixed `&&`/`||` grouping explicit."""

from __future__ import annotations


class AndOrPrecedenceStage:
    """Wrap the `&&` chain left of the first top-level `||` in parentheses."""

    def process(self, shell: str, command: str) -> str:
        return normalize_and_or_precedence(command)


def normalize_and_or_precedence(command: str) -> str:
    trimmed = command.strip()
    if not trimmed:
        return command

    first_or = find_top_level_op(trimmed, "||")
    if first_or is None:
        return trimmed
    left = trimmed[:first_or].strip()
    if not left:
        return trimmed
    if find_top_level_op(left, "&&") is None:
        return trimmed
    if is_wrapped_with_parens(left):
        return trimmed
    return f"({left}) {trimmed[first_or:].lstrip()}"


def find_top_level_op(text: str, op: str) -> int | None:
    """Index of the first `op` outside quotes and parentheses."""

    in_single = False
    in_double = False
    escaped = False
    depth = 0
    for idx, ch in enumerate(text):
        if escaped:
            escaped = False
            continue
        if ch == "\\" and not in_single:
            escaped = True
            continue
        if ch == "'" and not in_double:
            in_single = not in_single
            continue
        if ch == '"' and not in_single:
            in_double = not in_double
            continue
        if in_single or in_double:
            continue
        if ch == "(":
            depth += 1
        elif ch == ")" and depth > 0:
            depth -= 1
        if depth == 0 and text.startswith(op, idx):
            return idx
    return None


def is_wrapped_with_parens(text: str) -> bool:
    """True when one parenthesized group spans the whole text."""

    trimmed = text.strip()
    if not (trimmed.startswith("(") and trimmed.endswith(")")):
        return False

    depth = 0
    in_single = False
    in_double = False
    escaped = False
    last = len(trimmed) - 1
    for idx, ch in enumerate(trimmed):
        if escaped:
            escaped = False
            continue
        if ch == "\\" and not in_single:
            escaped = True
            continue
        if ch == "'" and not in_double:
            in_single = not in_single
            continue
        if ch == '"' and not in_single:
            in_double = not in_double
            continue
        if in_single or in_double:
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0 and idx != last:
                return False
    return depth == 0
