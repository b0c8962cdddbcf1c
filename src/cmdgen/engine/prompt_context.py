"""Request context gathered once and rendered on every model turn."""

from __future__ import annotations

import platform
from dataclasses import dataclass, field

from ..config import Settings, ShellEnvironment
from ..history import load_shell_history
from ..prompt import PromptClarification, PromptInput, PromptTurn, RenderedPrompt, render_prompt
from ..session import SessionRecord, SessionStore


@dataclass(frozen=True)
class PromptStaticContext:
    os: str
    shell: str
    user_input: str
    model: str
    shell_history: list[str] = field(default_factory=list)
    generated_history: list[str] = field(default_factory=list)
    turns: list[PromptTurn] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        *,
        settings: Settings,
        env: ShellEnvironment,
        store: SessionStore,
        model_name: str,
        user_input: str,
        session: SessionRecord,
    ) -> PromptStaticContext:
        return cls(
            os=platform.system().lower() or "unknown",
            shell=env.shell,
            user_input=user_input,
            model=model_name,
            shell_history=load_shell_history(settings.history_lines, env.home),
            generated_history=store.list_recent_commands(settings.generated_history_lines),
            turns=[
                PromptTurn(user_input=turn.user_input, command=turn.command)
                for turn in session.recent_turns(settings.context_turns)
            ],
        )

    def render(
        self,
        session_uuid: str,
        clarifications: list[PromptClarification],
        feedback: str | None,
        explanation_mode: bool,
    ) -> RenderedPrompt:
        return render_prompt(
            PromptInput(
                os=self.os,
                shell=self.shell,
                session_uuid=session_uuid,
                model=self.model,
                user_input=self.user_input,
                shell_history=list(self.shell_history),
                generated_history=list(self.generated_history),
                turns=list(self.turns),
                clarifications=list(clarifications),
                feedback=feedback,
                explanation_mode=explanation_mode,
            )
        )
