"""Session records persisted between runs."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from ..llm.types import CommandExplanation
from ..validation.report import ValidationReport


def now_unix() -> int:
    return int(datetime.now(UTC).timestamp())


class SessionTurn(BaseModel):
    """One committed request/command pair."""

    timestamp: int
    user_input: str
    command: str
    reason: str = ""
    explanations: list[CommandExplanation] = Field(default_factory=list)
    validation: ValidationReport


class SessionRecord(BaseModel):
    uuid: str
    created_at: int
    updated_at: int
    provider: str
    model: str
    turns: list[SessionTurn] = Field(default_factory=list)

    @classmethod
    def new(cls, provider: str, model: str) -> SessionRecord:
        now = now_unix()
        return cls(uuid=str(uuid.uuid4()), created_at=now, updated_at=now, provider=provider, model=model)

    def push_turn(
        self,
        user_input: str,
        command: str,
        reason: str,
        explanations: list[CommandExplanation],
        validation: ValidationReport,
    ) -> SessionTurn:
        now = now_unix()
        turn = SessionTurn(
            timestamp=now,
            user_input=user_input,
            command=command,
            reason=reason,
            explanations=list(explanations),
            validation=validation,
        )
        self.updated_at = now
        self.turns.append(turn)
        return turn

    def recent_turns(self, limit: int) -> list[SessionTurn]:
        """Last `limit` turns, oldest first."""
        if limit <= 0:
            return []
        return self.turns[-limit:]
