"""Generation gateway contract."""

from __future__ import annotations

from typing import Protocol

from ..llm.types import GenerationOutput


class GenerationGateway(Protocol):
    @property
    def model_name(self) -> str: ...

    async def generate(self, system_prompt: str, user_prompt: str) -> GenerationOutput: ...
