"""Default `echo` to escape interpretation."""

from __future__ import annotations

from ..validation.segments import rewrite_segments
from ..validation.tokens import tokenize_segment

ECHO_WORDS = frozenset({"echo", "\\echo"})
BYPASS_WORDS = frozenset({"builtin", "command"})


class EchoDefaultStage:
    """Insert `-e` after `echo` unless an explicit flag is already there."""

    def process(self, shell: str, command: str) -> str:
        return normalize_echo_default(command)


def normalize_echo_default(command: str) -> str:
    return rewrite_segments(command, _normalize_echo_segment).strip()


def _normalize_echo_segment(segment: str) -> str:
    tokens = tokenize_segment(segment)
    if not tokens:
        return segment

    echo_index = 0
    if tokens[0].raw in BYPASS_WORDS:
        echo_index = 1
    if echo_index >= len(tokens) or tokens[echo_index].raw not in ECHO_WORDS:
        return segment

    arg_index = echo_index + 1
    if arg_index >= len(tokens):
        echo_end = tokens[echo_index].end
        return f"{segment[:echo_end]} -e{segment[echo_end:]}"

    arg = tokens[arg_index]
    if arg.raw.startswith("-"):
        return segment
    return f"{segment[: arg.start]}-e {segment[arg.start :]}"
