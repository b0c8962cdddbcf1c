"""Validation pipeline composing static and runtime checks."""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from ..config import ShellEnvironment
from . import shell_checks
from .cd_checks import find_invalid_cd_directories
from .placeholders import find_placeholder_tokens
from .report import ValidationReport
from .runtime import RUNTIME_SKIPPED_NOTE, can_runtime_check, runtime_check
from .shell_checks import AliasLookup
from .tokens import collect_command_heads


class CommandValidator(Protocol):
    def validate(self, command: str) -> ValidationReport: ...


class ShellCommandValidator:
    """Validates candidates against the shell and filesystem of one environment snapshot."""

    def __init__(self, env: ShellEnvironment, alias_lookup: AliasLookup = shell_checks.is_alias) -> None:
        self._env = env
        self._alias_lookup = alias_lookup

    @property
    def env(self) -> ShellEnvironment:
        return self._env

    def validate(self, command: str) -> ValidationReport:
        env = self._env
        shell = env.shell

        syntax_ok = shell_checks.syntax_check(shell, command)
        heads = collect_command_heads(command)

        checked: list[str] = []
        missing: list[str] = []
        aliases: list[str] = []
        seen: set[str] = set()
        for head in heads:
            lowered = head.name.lower()
            if lowered in seen:
                continue
            seen.add(lowered)
            checked.append(head.name)
            if not shell_checks.command_exists(shell, head.name, which=env.which):
                missing.append(head.name)
                continue
            if not head.bypassed and self._alias_lookup(shell, head.name):
                aliases.append(head.name)

        fields = {
            "syntax_ok": syntax_ok,
            "shell": shell,
            "missing_binaries": missing,
            "checked_binaries": checked,
            "alias_conflicts": aliases,
            "invalid_directories": find_invalid_cd_directories(command, cwd=env.cwd, home=env.home),
            "placeholder_tokens": find_placeholder_tokens(command),
        }
        report = ValidationReport(**fields)
        if report.static_checks_passed():
            if can_runtime_check(command, heads, max_length=env.max_runtime_command_length):
                runtime = runtime_check(env, command)
                report = ValidationReport(
                    **fields,
                    runtime_checked=True,
                    runtime_ok=runtime.ok,
                    runtime_note=runtime.note,
                )
            else:
                report = ValidationReport(**fields, runtime_note=RUNTIME_SKIPPED_NOTE)

        logger.info(
            "validation.report valid={} heads={} runtime_checked={} note={}",
            report.is_valid(),
            checked,
            report.runtime_checked,
            report.runtime_note,
        )
        return report


def validate_command(command: str, env: ShellEnvironment | None = None) -> ValidationReport:
    """Validate one command against a fresh (or given) environment snapshot."""

    return ShellCommandValidator(env or ShellEnvironment.from_os()).validate(command)


def default_command_validator(env: ShellEnvironment | None = None) -> CommandValidator:
    return ShellCommandValidator(env or ShellEnvironment.from_os())
