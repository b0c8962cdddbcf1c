"""Request orchestration: model turns, clarification, validation and commit."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextvars import copy_context
from functools import partial
from typing import Any, TypeVar

from loguru import logger

from ..config import Settings, ShellEnvironment
from ..errors import ClarificationUnavailableError, GenerationError
from ..llm.types import ClarificationQuestion, CommandCandidate
from ..postprocess import CommandPostProcessor
from ..prompter import ClarificationPrompter
from ..session import SessionRecord, SessionStore
from ..validation import CommandValidator
from .committer import CommandCommitter
from .gateway import GenerationGateway
from .guards import INPUT_PROMPT_FEEDBACK, has_runtime_input_prompt, normalize_question_text
from .prompt_context import PromptStaticContext
from .state import RuntimeState
from .types import EnginePhase, HandleResult

T = TypeVar("T")


class RequestEngine:
    """Turns one natural-language request into one validated, committed command."""

    def __init__(
        self,
        *,
        settings: Settings,
        env: ShellEnvironment,
        gateway: GenerationGateway,
        post_processor: CommandPostProcessor,
        validator: CommandValidator,
        committer: CommandCommitter,
        store: SessionStore,
        explanation: bool = False,
    ) -> None:
        self._settings = settings
        self._env = env
        self._gateway = gateway
        self._post_processor = post_processor
        self._validator = validator
        self._committer = committer
        self._store = store
        self._explanation = explanation

    @property
    def model_name(self) -> str:
        return self._gateway.model_name

    @property
    def store(self) -> SessionStore:
        return self._store

    async def generate(
        self,
        user_input: str,
        session: SessionRecord,
        prompter: ClarificationPrompter | None = None,
    ) -> HandleResult:
        context = PromptStaticContext.build(
            settings=self._settings,
            env=self._env,
            store=self._store,
            model_name=self._gateway.model_name,
            user_input=user_input,
            session=session,
        )
        state = RuntimeState(
            max_attempts=self._settings.max_attempts,
            max_questions=self._settings.max_questions,
            max_input_prompt_rejections=self._settings.max_input_prompt_rejections,
        )

        while state.can_attempt_command():
            rendered = context.render(session.uuid, state.clarifications, state.feedback, self._explanation)
            _log_phase(EnginePhase.AWAITING_MODEL, state)
            output = await self._gateway.generate(rendered.system, rendered.user)

            if isinstance(output, CommandCandidate):
                _log_phase(EnginePhase.COMMAND_RECEIVED, state)
                result = await self._handle_command(user_input, session, context, state, output, prompter)
                if result is not None:
                    _log_phase(EnginePhase.SUCCESS, state)
                    return result
                _log_phase(EnginePhase.RETRY, state)
            elif isinstance(output, ClarificationQuestion):
                _log_phase(EnginePhase.QUESTION_RECEIVED, state)
                await self._handle_question(output, state, prompter)
            else:
                _log_phase(EnginePhase.FAILURE, state)
                raise GenerationError(f"unexpected generation output: {type(output).__name__}")

        _log_phase(EnginePhase.FAILURE, state)
        raise state.finish_error()

    async def _handle_command(
        self,
        user_input: str,
        session: SessionRecord,
        context: PromptStaticContext,
        state: RuntimeState,
        candidate: CommandCandidate,
        prompter: ClarificationPrompter | None,
    ) -> HandleResult | None:
        command = self._post_processor.process(context.shell, candidate.command)
        if prompter is not None and not state.clarifications and has_runtime_input_prompt(command):
            logger.info("engine.input_prompt_rejected command={!r}", command)
            state.mark_input_prompt_rejection(INPUT_PROMPT_FEEDBACK)
            return None

        state.mark_command_attempt()
        report = await _run_blocking(self._validator.validate, command)
        if not report.is_valid():
            state.set_feedback_reason(report.to_feedback_text())
            return None
        return self._committer.commit(
            user_input,
            session,
            command,
            candidate.reason,
            candidate.explanations,
            report,
        )

    async def _handle_question(
        self,
        output: ClarificationQuestion,
        state: RuntimeState,
        prompter: ClarificationPrompter | None,
    ) -> None:
        state.ensure_question_capacity()
        state.register_question(normalize_question_text(output.question), output.question)
        if prompter is None:
            raise ClarificationUnavailableError(
                f"model requested clarification ('{output.question}') but --once mode cannot answer "
                f"{output.kind.answer_mode}; run interactive mode"
            )
        answer = await _run_blocking(prompter.ask, output.kind, output.question)
        state.push_clarification(output.question, answer)
        state.clear_feedback()


async def _run_blocking(func: Callable[..., T], *args: Any) -> T:
    ctx = copy_context()
    return await asyncio.get_event_loop().run_in_executor(None, ctx.run, partial(func, *args))


def _log_phase(phase: EnginePhase, state: RuntimeState) -> None:
    logger.info(
        "engine.phase phase={} attempts={}/{} questions={}",
        phase.value,
        state.command_attempt_count,
        state.max_attempts,
        state.question_count,
    )
