"""Engine result and phase types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..llm.types import CommandExplanation


@dataclass(frozen=True)
class HandleResult:
    """Committed command returned to the caller."""

    command: str
    explanations: list[CommandExplanation] = field(default_factory=list)


class EnginePhase(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    COMMAND_RECEIVED = "command_received"
    QUESTION_RECEIVED = "question_received"
    RETRY = "retry"
    SUCCESS = "success"
    FAILURE = "failure"
