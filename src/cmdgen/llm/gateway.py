"""Generation gateway backed by republic."""

from __future__ import annotations

import asyncio
from contextvars import copy_context
from functools import partial
from typing import Any

from loguru import logger
from republic import LLM, Tool

from ..config import Settings
from ..errors import GenerationError
from ..model.providers import republic_model_id
from .parse import map_tool_output, parse_candidate_text
from .tools import build_generation_tools
from .types import GenerationOutput


class RepublicGateway:
    """Ask the configured model for one command or one clarification question."""

    def __init__(self, settings: Settings, llm: Any | None = None, tools: list[Tool] | None = None) -> None:
        provider, name = settings.split_model()
        self._model_name = republic_model_id(provider, name)
        self._max_tokens = settings.max_tokens
        self._timeout_seconds = settings.model_timeout_seconds
        self._tools = tools if tools is not None else build_generation_tools()
        self._llm = (
            llm
            if llm is not None
            else LLM(
                model=self._model_name,
                api_key=settings.resolved_api_key,
                api_base=settings.api_base,
            )
        )

    @property
    def model_name(self) -> str:
        return self._model_name

    async def generate(self, system_prompt: str, user_prompt: str) -> GenerationOutput:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        call = partial(self._llm.chat.raw, messages=messages, tools=self._tools, max_tokens=self._max_tokens)
        logger.info("llm.request model={} prompt_chars={}", self._model_name, len(user_prompt))
        try:
            async with asyncio.timeout(self._timeout_seconds):
                ctx = copy_context()
                response = await asyncio.get_event_loop().run_in_executor(None, ctx.run, call)
        except TimeoutError as exc:
            raise GenerationError(f"model timeout: no response within {self._timeout_seconds}s") from exc
        except Exception as exc:
            logger.exception("llm.call.error model={}", self._model_name)
            raise GenerationError(f"model call failed: {exc!s}") from exc
        return self._to_output(response)

    def _to_output(self, response: Any) -> GenerationOutput:
        tool_calls = _extract_tool_calls(response)
        if tool_calls:
            name, arguments = tool_calls[0]
            logger.debug("llm.tool_call name={} total={}", name, len(tool_calls))
            return map_tool_output(name, arguments)

        text = _extract_text(response)
        if not text.strip():
            raise GenerationError("model returned neither a tool call nor text")
        logger.debug("llm.text_fallback chars={}", len(text))
        return parse_candidate_text(text)


def _extract_text(response: Any) -> str:
    if isinstance(response, str):
        return response
    choices = getattr(response, "choices", None)
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    if message is None:
        return ""
    return getattr(message, "content", "") or ""


def _extract_tool_calls(response: Any) -> list[tuple[str, Any]]:
    choices = getattr(response, "choices", None)
    if not choices:
        return []
    message = getattr(choices[0], "message", None)
    if message is None:
        return []
    calls: list[tuple[str, Any]] = []
    for tool_call in getattr(message, "tool_calls", None) or []:
        function = getattr(tool_call, "function", None)
        if function is None:
            continue
        calls.append((getattr(function, "name", "") or "", getattr(function, "arguments", "") or ""))
    return calls
