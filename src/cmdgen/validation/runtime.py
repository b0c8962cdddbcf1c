"""Whitelist-gated, time-boxed execution of candidate commands."""

from __future__ import annotations

import os
import signal
import subprocess
import uuid
from pathlib import Path

from loguru import logger

from ..config import ShellEnvironment
from ..errors import ValidationEngineError
from .segments import split_segments
from .tokens import WRAPPER_COMMANDS, tokenize_segment
from .types import CommandHead, RuntimeCheck

DEFAULT_MAX_COMMAND_LENGTH = 400
STDERR_SNIPPET_LINES = 3
TIMEOUT_GRACE_SECONDS = 1.0
TIMEOUT_UTILITY_EXIT = 124
RUNTIME_PASSED_NOTE = "runtime check passed"
RUNTIME_SKIPPED_NOTE = "runtime check skipped because command may be stateful or long-running"

UNSAFE_OPERATORS = ("$(", "`", ">>", "<<", ">|", "<(", ">(")
RISKY_HEADS = frozenset({
    "rm",
    "mv",
    "cp",
    "dd",
    "mkfs",
    "reboot",
    "shutdown",
    "halt",
    "poweroff",
    "kill",
    "pkill",
    "killall",
    "chown",
    "chmod",
    "chgrp",
    "ln",
    "sudo",
    "tee",
    "git",
    "docker",
    "kubectl",
    "curl",
    "wget",
    "scp",
    "rsync",
})
RUNTIME_SAFE_HEADS = frozenset({
    "pwd",
    "ls",
    "echo",
    "print",
    "printf",
    "whoami",
    "uname",
    "id",
    "env",
    "which",
    "command",
    "dirname",
    "basename",
    "date",
    "true",
    "false",
    "realpath",
})


def can_runtime_check(
    command: str,
    heads: list[CommandHead],
    *,
    max_length: int = DEFAULT_MAX_COMMAND_LENGTH,
) -> bool:
    """Admit only short commands whose every head is a known read-only utility."""

    if not command.strip() or len(command) > max_length:
        return False
    lowered = command.lower()
    if any(operator in lowered for operator in UNSAFE_OPERATORS):
        return False
    if not heads:
        return False

    names = [head.name.lower() for head in heads]
    if any(name in RISKY_HEADS for name in names):
        return False
    if any(word in RISKY_HEADS for word in _wrapper_words(command)):
        return False
    return all(name in RUNTIME_SAFE_HEADS for name in names)


def runtime_check(env: ShellEnvironment, command: str) -> RuntimeCheck:
    """Run the command from a throwaway script and classify the outcome."""

    try:
        env.scratch_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ValidationEngineError(f"failed to create runtime validation directory: {env.scratch_dir}") from exc

    script_path = env.scratch_dir / f"{uuid.uuid4()}.sh"
    try:
        try:
            script_path.write_text(f"{command}\n", encoding="utf-8")
            script_path.chmod(0o700)
        except OSError as exc:
            raise ValidationEngineError(f"failed to write runtime validation script: {script_path}") from exc
        return _execute(env, script_path)
    finally:
        script_path.unlink(missing_ok=True)


def _execute(env: ShellEnvironment, script_path: Path) -> RuntimeCheck:
    timeout = env.runtime_timeout_seconds
    args = [env.shell, str(script_path)]
    if env.timeout_bin is not None:
        args = [env.timeout_bin, _format_seconds(timeout), *args]

    try:
        # Admission already restricted the script to whitelisted read-only heads.
        process = subprocess.Popen(  # noqa: S603
            args,
            cwd=script_path.parent,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            start_new_session=True,
        )
    except OSError as exc:
        raise ValidationEngineError(f"failed to start runtime validation: {exc}") from exc

    try:
        _, stderr = process.communicate(timeout=timeout + TIMEOUT_GRACE_SECONDS)
    except subprocess.TimeoutExpired:
        _kill_group(process)
        process.communicate()
        logger.warning("runtime.check.timeout seconds={}", timeout)
        return RuntimeCheck(ok=False, note=f"timed out after {_format_seconds(timeout)}s")

    if process.returncode == 0:
        return RuntimeCheck(ok=True, note=RUNTIME_PASSED_NOTE)
    if env.timeout_bin is not None and process.returncode == TIMEOUT_UTILITY_EXIT:
        logger.warning("runtime.check.timeout seconds={} via={}", timeout, env.timeout_bin)
        return RuntimeCheck(ok=False, note=f"timed out after {_format_seconds(timeout)}s")

    note = f"exit status {process.returncode}"
    snippet = " | ".join(stderr.strip().splitlines()[:STDERR_SNIPPET_LINES])
    if snippet:
        note = f"{note}, stderr: {snippet}"
    return RuntimeCheck(ok=False, note=note)


def _wrapper_words(command: str) -> list[str]:
    # `sudo ls` resolves to head `ls`; the wrapper itself must still be vetted
    words: list[str] = []
    for segment in split_segments(command):
        for token in tokenize_segment(segment):
            word = token.cooked.lower()
            if "=" in word and not word.startswith("-"):
                continue
            if word not in WRAPPER_COMMANDS:
                break
            words.append(word)
    return words


def _kill_group(process: subprocess.Popen[str]) -> None:
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        return
    except OSError:
        process.kill()


def _format_seconds(seconds: float) -> str:
    return f"{seconds:g}"
