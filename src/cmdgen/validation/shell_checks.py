"""Checks that ask the configured shell about a command."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable

from loguru import logger

from ..errors import ValidationEngineError

Which = Callable[[str], "str | None"]
AliasLookup = Callable[[str, str], bool]


def syntax_check(shell: str, command: str) -> bool:
    """Parse the command with the shell's no-exec mode."""

    if not command.strip():
        return False
    return _run_quiet([shell, "-n", "-c", command]) == 0


def command_exists(shell: str, head: str, *, which: Which = shutil.which) -> bool:
    """Resolve a head on PATH, falling back to the shell for builtins and functions."""

    if which(head) is not None:
        return True
    snippet = f"command -v -- {shell_escape(head)} >/dev/null 2>&1"
    return _run_quiet([shell, "-c", snippet]) == 0


def is_alias(shell: str, head: str) -> bool:
    """Check both interactive and plain shells, since aliases usually live in rc files."""

    snippet = f"alias {shell_escape(head)} >/dev/null 2>&1"
    try:
        if _run_quiet([shell, "-ic", snippet]) == 0:
            return True
    except ValidationEngineError:
        logger.debug("validation.alias.interactive_unavailable shell={}", shell)
    return _run_quiet([shell, "-c", snippet]) == 0


def shell_escape(raw: str) -> str:
    if not raw:
        return "''"
    escaped = raw.replace("'", "'\"'\"'")
    return f"'{escaped}'"


def _run_quiet(args: list[str]) -> int:
    try:
        # Checks only hand the shell a fixed snippet or run it in -n mode.
        completed = subprocess.run(  # noqa: S603
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as exc:
        raise ValidationEngineError(f"failed to run shell check {args[0]!r}: {exc}") from exc
    return completed.returncode
