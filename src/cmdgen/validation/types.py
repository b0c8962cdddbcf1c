"""Shared validation dataclasses."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SegmentToken:
    """One shell word of a segment."""

    raw: str  # quoting and escapes intact
    cooked: str  # dequoted value
    start: int  # offset into the segment

    @property
    def end(self) -> int:
        return self.start + len(self.raw)


@dataclass(frozen=True)
class CommandHead:
    """Effective command word of a segment and how it was invoked."""

    name: str
    prefixed_builtin: bool
    prefixed_command: bool
    prefixed_backslash: bool
    token_index: int

    @property
    def bypassed(self) -> bool:
        return self.prefixed_builtin or self.prefixed_command or self.prefixed_backslash


@dataclass(frozen=True)
class RuntimeCheck:
    """Outcome of one runtime check."""

    ok: bool
    note: str | None = None
