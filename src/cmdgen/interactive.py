"""Interactive request loop."""

from __future__ import annotations

import asyncio
import sys
from contextvars import copy_context
from typing import TextIO

from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console

from .engine import RequestEngine
from .errors import CmdgenError
from .output import print_error, print_generated_result
from .prompter import ClarificationPrompter, StdioPrompter, ToolkitPrompter
from .session import SessionRecord

EXIT_COMMANDS = frozenset({"exit", "quit", "/exit", "/quit"})
GOODBYE = "Good Bye!"
BANNER = "Interactive mode. Type exit to finish."
USER_PROMPT = "> "


def is_exit_command(text: str) -> bool:
    return text in EXIT_COMMANDS


class InteractiveCli:
    """Read requests until exit; engine errors are reported and the loop continues."""

    def __init__(
        self,
        engine: RequestEngine,
        session: SessionRecord,
        *,
        explanation: bool = False,
        console: Console | None = None,
        stdin: TextIO | None = None,
        use_tty: bool | None = None,
    ) -> None:
        self._engine = engine
        self._session = session
        self._explanation = explanation
        self._console = console or Console()
        self._error_console = Console(stderr=True)
        self._stdin = stdin or sys.stdin
        if use_tty is None:
            use_tty = self._stdin.isatty() and sys.stdout.isatty()
        self._use_tty = use_tty
        self._prompt_session: PromptSession[str] | None = PromptSession() if use_tty else None

    async def run(self, *, resumed: bool = False, context_turns: int = 12) -> None:
        if resumed:
            self._print_resumed_context(context_turns)
        self._console.print(BANNER, highlight=False)

        while True:
            line = await self._read_request()
            if line is None:
                break
            request = line.strip()
            if not request:
                continue
            if is_exit_command(request):
                break
            await self._handle(request)
        self._console.print(GOODBYE, highlight=False)

    async def _handle(self, request: str) -> None:
        try:
            result = await self._engine.generate(request, self._session, self._prompter())
        except CmdgenError as exc:
            logger.info("interactive.request_failed error={}", exc)
            print_error(str(exc), self._error_console)
            return
        print_generated_result(result, self._explanation, self._console)

    def _prompter(self) -> ClarificationPrompter:
        if self._prompt_session is not None:
            return ToolkitPrompter(self._prompt_session)
        return StdioPrompter(stdin=self._stdin)

    async def _read_request(self) -> str | None:
        if self._prompt_session is not None:
            try:
                with patch_stdout(raw=True):
                    return await self._prompt_session.prompt_async(USER_PROMPT)
            except (KeyboardInterrupt, EOFError):
                return None

        self._console.print(USER_PROMPT, end="", highlight=False)
        ctx = copy_context()
        line = await asyncio.get_event_loop().run_in_executor(None, ctx.run, self._stdin.readline)
        return line or None

    def _print_resumed_context(self, limit: int) -> None:
        turns = self._session.turns
        if not turns:
            self._console.print("Resumed session has no prior turns.", highlight=False)
            return
        recent = self._session.recent_turns(max(limit, 1))
        self._console.print(
            f"Resumed context (showing {len(recent)} turn(s) of {len(turns)}):",
            markup=False,
            highlight=False,
        )
        for turn in recent:
            self._console.print(f"> {turn.user_input}", markup=False, highlight=False)
            self._console.print(turn.command, markup=False, emoji=False, highlight=False, soft_wrap=True)
        self._console.print("---", highlight=False)
