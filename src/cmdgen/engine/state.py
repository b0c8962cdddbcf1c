"""Per-request runtime state."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import (
    AttemptsExhaustedError,
    CmdgenError,
    DuplicateQuestionError,
    QuestionBudgetExceededError,
)
from ..prompt import PromptClarification

DEFAULT_MAX_QUESTIONS = 8
DEFAULT_MAX_INPUT_PROMPT_REJECTIONS = 3
GENERIC_FAILURE = "failed to generate a valid command"
TOO_MANY_QUESTIONS = "too many clarification questions from model"


@dataclass
class RuntimeState:
    """Counters, clarifications and feedback for one request. Never reused."""

    max_attempts: int
    max_questions: int = DEFAULT_MAX_QUESTIONS
    max_input_prompt_rejections: int = DEFAULT_MAX_INPUT_PROMPT_REJECTIONS
    clarifications: list[PromptClarification] = field(default_factory=list)
    asked_questions: set[str] = field(default_factory=set)
    feedback: str | None = None
    question_count: int = 0
    command_attempt_count: int = 0
    input_prompt_rejections: int = 0
    last_error: str | None = None

    def __post_init__(self) -> None:
        self.max_attempts = max(1, self.max_attempts)

    def can_attempt_command(self) -> bool:
        return self.command_attempt_count < self.max_attempts

    def mark_command_attempt(self) -> None:
        self.command_attempt_count += 1

    def ensure_question_capacity(self) -> None:
        self.question_count += 1
        if self.question_count > self.max_questions:
            raise QuestionBudgetExceededError(TOO_MANY_QUESTIONS)

    def register_question(self, normalized: str, original: str) -> None:
        if normalized in self.asked_questions:
            raise DuplicateQuestionError(f"model asked duplicate clarification question: {original}")
        self.asked_questions.add(normalized)

    def mark_input_prompt_rejection(self, reason: str) -> None:
        """Record a rejected read-prompt candidate; fatal once the cap is passed."""
        self.input_prompt_rejections += 1
        self.set_feedback_reason(reason)
        if self.input_prompt_rejections > self.max_input_prompt_rejections:
            raise AttemptsExhaustedError(reason)

    def push_clarification(self, question: str, answer: str) -> None:
        self.clarifications.append(PromptClarification(question=question, answer=answer))

    def set_feedback_reason(self, reason: str) -> None:
        self.feedback = reason
        self.last_error = reason

    def clear_feedback(self) -> None:
        self.feedback = None

    def finish_error(self) -> CmdgenError:
        return AttemptsExhaustedError(self.last_error or GENERIC_FAILURE)
