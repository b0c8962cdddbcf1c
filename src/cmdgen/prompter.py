"""Clarification prompters."""

from __future__ import annotations

import sys
from typing import Protocol, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout

from .errors import ClarificationAbortedError
from .llm.types import ClarificationKind

CLARIFICATION_ABORTED = "clarification aborted"
YES_NO_RETRY_HINT = "please answer with y or n"
TEXT_RETRY_HINT = "please input a non-empty value"

_YES_ANSWERS = frozenset({"y", "yes", "true", "1"})
_NO_ANSWERS = frozenset({"n", "no", "false", "0"})


class ClarificationPrompter(Protocol):
    def ask(self, kind: ClarificationKind, question: str) -> str: ...


def normalize_yes_no_answer(raw: str) -> str | None:
    normalized = raw.strip().lower()
    if normalized in _YES_ANSWERS:
        return "yes"
    if normalized in _NO_ANSWERS:
        return "no"
    return None


def format_question(kind: ClarificationKind, question: str) -> str:
    if kind is ClarificationKind.YES_NO:
        return f"? {question.strip()} [y/n]: "
    return f"? {question.strip()}: "


def accept_answer(kind: ClarificationKind, line: str) -> str | None:
    """Normalized answer, or None when the line must be asked again."""
    if kind is ClarificationKind.YES_NO:
        return normalize_yes_no_answer(line)
    answer = line.strip()
    return answer or None


def _retry_hint(kind: ClarificationKind) -> str:
    return YES_NO_RETRY_HINT if kind is ClarificationKind.YES_NO else TEXT_RETRY_HINT


class StdioPrompter:
    """Line-based prompter over plain streams."""

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr

    def ask(self, kind: ClarificationKind, question: str) -> str:
        while True:
            self._stdout.write(format_question(kind, question))
            self._stdout.flush()
            line = self._stdin.readline()
            if not line:
                raise ClarificationAbortedError(CLARIFICATION_ABORTED)
            answer = accept_answer(kind, line)
            if answer is not None:
                return answer
            print(_retry_hint(kind), file=self._stderr)


class ToolkitPrompter:
    """Interactive prompter on a prompt_toolkit session."""

    def __init__(self, session: PromptSession[str] | None = None) -> None:
        self._session: PromptSession[str] = session or PromptSession()

    def ask(self, kind: ClarificationKind, question: str) -> str:
        while True:
            try:
                with patch_stdout(raw=True):
                    line = self._session.prompt(format_question(kind, question))
            except (KeyboardInterrupt, EOFError) as exc:
                raise ClarificationAbortedError(CLARIFICATION_ABORTED) from exc
            answer = accept_answer(kind, line)
            if answer is not None:
                return answer
            print(_retry_hint(kind), file=sys.stderr)
