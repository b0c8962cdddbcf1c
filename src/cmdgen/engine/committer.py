"""Commit validated commands to the session."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from loguru import logger

from ..clipboard import copy_text
from ..errors import ClipboardError
from ..llm.types import CommandExplanation
from ..session import SessionRecord, SessionStore
from ..validation.report import ValidationReport
from .types import HandleResult


class CommandCommitter(Protocol):
    def commit(
        self,
        user_input: str,
        session: SessionRecord,
        command: str,
        reason: str,
        explanations: list[CommandExplanation],
        report: ValidationReport,
    ) -> HandleResult: ...


class SessionCommandCommitter:
    """Append the turn, persist the session and optionally copy the command."""

    def __init__(
        self,
        store: SessionStore,
        *,
        copy: bool = False,
        explanation: bool = False,
        copy_fn: Callable[[str], None] = copy_text,
    ) -> None:
        self._store = store
        self._copy = copy
        self._explanation = explanation
        self._copy_fn = copy_fn

    def commit(
        self,
        user_input: str,
        session: SessionRecord,
        command: str,
        reason: str,
        explanations: list[CommandExplanation],
        report: ValidationReport,
    ) -> HandleResult:
        if self._copy:
            try:
                self._copy_fn(command)
            except ClipboardError as exc:
                logger.warning("clipboard.copy_failed error={}", exc)

        session.push_turn(user_input, command, reason, explanations, report)
        self._store.save(session)
        return HandleResult(command=command, explanations=list(explanations) if self._explanation else [])
