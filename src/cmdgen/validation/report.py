"""Validation report model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_FAILURE = "validation failed for an unknown reason"


class ValidationReport(BaseModel):
    """Outcome of every validation check for one candidate command.

    Negative findings live in the lists below; an empty report with
    ``syntax_ok`` set and a passing (or skipped) runtime check is valid.
    """

    model_config = ConfigDict(frozen=True)

    syntax_ok: bool = False
    shell: str = "sh"
    missing_binaries: list[str] = Field(default_factory=list)
    checked_binaries: list[str] = Field(default_factory=list)
    alias_conflicts: list[str] = Field(default_factory=list)
    invalid_directories: list[str] = Field(default_factory=list)
    placeholder_tokens: list[str] = Field(default_factory=list)
    runtime_checked: bool = False
    runtime_ok: bool = True
    runtime_note: str | None = None

    def static_checks_passed(self) -> bool:
        return (
            self.syntax_ok
            and not self.missing_binaries
            and not self.alias_conflicts
            and not self.invalid_directories
            and not self.placeholder_tokens
        )

    def is_valid(self) -> bool:
        return self.static_checks_passed() and (not self.runtime_checked or self.runtime_ok)

    def to_feedback_text(self) -> str:
        """Human-readable reasons, fed back into the next generation attempt."""
        reasons: list[str] = []
        if not self.syntax_ok:
            reasons.append(f"shell syntax check failed by {self.shell}")
        if self.missing_binaries:
            reasons.append(f"unresolved commands: {', '.join(self.missing_binaries)}")
        if self.alias_conflicts:
            reasons.append(f"alias command(s) detected: {', '.join(self.alias_conflicts)} (prefix with builtin or \\\\)")
        if self.invalid_directories:
            reasons.append(f"directory not found for cd: {', '.join(self.invalid_directories)}")
        if self.placeholder_tokens:
            reasons.append(f"placeholder tokens are not allowed: {', '.join(self.placeholder_tokens)}")
        if self.runtime_checked and not self.runtime_ok:
            if self.runtime_note:
                reasons.append(f"runtime validation failed: {self.runtime_note}")
            else:
                reasons.append("runtime validation failed")
        if not reasons:
            return UNKNOWN_FAILURE
        return "; ".join(reasons)


def to_feedback_text(report: ValidationReport) -> str:
    return report.to_feedback_text()
