"""Request-level guards on candidates and questions."""

from __future__ import annotations

from ..validation.segments import split_segments
from ..validation.tokens import WRAPPER_COMMANDS, looks_like_assignment, tokenize_segment

INPUT_PROMPT_COMMANDS = frozenset({"read", "vared"})
INPUT_PROMPT_FEEDBACK = (
    "Do not use runtime read prompts in the final command. Ask a text clarification question first via tool."
)

# words after which the next word is still in command position
_COMMAND_POSITION_WORDS = WRAPPER_COMMANDS | {
    "!",
    "(",
    "{",
    "builtin",
    "command",
    "do",
    "elif",
    "else",
    "exec",
    "if",
    "then",
    "until",
    "while",
}


def has_runtime_input_prompt(command: str) -> bool:
    """True when a segment invokes `read`/`vared` as a command word."""
    for segment in split_segments(command):
        for token in tokenize_segment(segment):
            word = token.raw.lower()
            if word not in _COMMAND_POSITION_WORDS:
                word = word.lstrip("({")
            if word in INPUT_PROMPT_COMMANDS:
                return True
            if word in _COMMAND_POSITION_WORDS or looks_like_assignment(token.cooked):
                continue
            break
    return False


def normalize_question_text(raw: str) -> str:
    return " ".join(raw.strip().lower().split())
