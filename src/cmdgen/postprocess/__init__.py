"""Ordered rewrite stages applied to raw candidates before validation."""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from .alias_prefix import AliasPrefixStage
from .and_or import AndOrPrecedenceStage
from .echo_default import EchoDefaultStage


class CommandPostProcessor(Protocol):
    def process(self, shell: str, command: str) -> str: ...


class PostProcessPipeline:
    """Run stages strictly in sequence, each seeing the previous stage's output."""

    def __init__(self, stages: list[CommandPostProcessor]) -> None:
        self._stages = list(stages)

    @classmethod
    def with_default_stages(cls) -> PostProcessPipeline:
        return cls([AndOrPrecedenceStage(), EchoDefaultStage(), AliasPrefixStage()])

    def process(self, shell: str, command: str) -> str:
        original = command
        for stage in self._stages:
            command = stage.process(shell, command)
        if command != original:
            logger.debug("postprocess.rewrite before={!r} after={!r}", original, command)
        return command


def default_post_processor() -> CommandPostProcessor:
    return PostProcessPipeline.with_default_stages()


__all__ = [
    "AliasPrefixStage",
    "AndOrPrecedenceStage",
    "CommandPostProcessor",
    "EchoDefaultStage",
    "PostProcessPipeline",
    "default_post_processor",
]
