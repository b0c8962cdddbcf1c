"""Tool declarations offered to the model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from republic import Tool, tool_from_model

from .types import COMMAND_TOOL_NAME, QUESTION_TOOL_NAME, TEXT_QUESTION_TOOL_NAME


class ExplanationItemInput(BaseModel):
    """One explained piece of the command."""

    model_config = ConfigDict(populate_by_name=True)

    kind: str = Field(..., alias="type", description="What is explained: command, option, argument, ...")
    value: str = Field(..., description="The exact text being explained")
    explanation: str = Field(..., description="Short explanation")


class DeliverCommandInput(BaseModel):
    """Return a single shell command for the user request."""

    command: str = Field(..., description="Single shell command line.")
    reason: str = Field(..., description="Short reason for the chosen command.")
    explanations: list[ExplanationItemInput] = Field(
        default_factory=list,
        description="Optional explanation items when explanation mode is enabled.",
    )


class YesNoQuestionInput(BaseModel):
    """Ask a required yes/no clarification question."""

    question: str = Field(..., description="One clear yes/no question.")
    reason: str = Field(..., description="Short reason for asking this clarification.")


class TextQuestionInput(BaseModel):
    """Ask a required free-text clarification question."""

    question: str = Field(..., description="One clear question to collect a concrete value from user.")
    reason: str = Field(..., description="Short reason for asking this clarification.")


def _echo(params: BaseModel) -> str:
    # tool calls are read back from the response, never executed
    return params.model_dump_json(by_alias=True)


def build_generation_tools() -> list[Tool]:
    return [
        tool_from_model(
            DeliverCommandInput,
            _echo,
            name=COMMAND_TOOL_NAME,
            description="Return a single shell command for the user request.",
        ),
        tool_from_model(
            YesNoQuestionInput,
            _echo,
            name=QUESTION_TOOL_NAME,
            description="Ask a required yes/no clarification question before generating a command.",
        ),
        tool_from_model(
            TextQuestionInput,
            _echo,
            name=TEXT_QUESTION_TOOL_NAME,
            description="Ask a required free-text clarification question before generating a command.",
        ),
    ]
