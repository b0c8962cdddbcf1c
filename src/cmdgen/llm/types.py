"""Model output types."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

COMMAND_TOOL_NAME = "deliver_command"
QUESTION_TOOL_NAME = "ask_yes_no_question"
TEXT_QUESTION_TOOL_NAME = "ask_text_question"


class CommandExplanation(BaseModel):
    """One explained piece of a generated command."""

    model_config = ConfigDict(populate_by_name=True)

    kind: str = Field(..., alias="type")
    value: str
    explanation: str


class CommandCandidate(BaseModel):
    command: str
    reason: str = ""
    explanations: list[CommandExplanation] = Field(default_factory=list)


class ClarificationKind(str, Enum):
    YES_NO = "yes_no"
    TEXT = "text"

    @property
    def answer_mode(self) -> str:
        return "y/n" if self is ClarificationKind.YES_NO else "text"


class ClarificationQuestion(BaseModel):
    question: str
    reason: str = ""
    kind: ClarificationKind = ClarificationKind.YES_NO


GenerationOutput = CommandCandidate | ClarificationQuestion
