"""Command validation: segmentation, head resolution, static and runtime checks."""

from .cd_checks import find_invalid_cd_directories
from .placeholders import find_placeholder_tokens
from .report import ValidationReport, to_feedback_text
from .runtime import can_runtime_check, runtime_check
from .segments import rewrite_segments, split_segment_ranges, split_segments
from .shell_checks import command_exists, is_alias, shell_escape, syntax_check
from .tokens import collect_command_heads, extract_head_command, locate_head_token, tokenize_segment
from .types import CommandHead, RuntimeCheck, SegmentToken
from .validator import CommandValidator, ShellCommandValidator, default_command_validator, validate_command

__all__ = [
    "CommandHead",
    "CommandValidator",
    "RuntimeCheck",
    "SegmentToken",
    "ShellCommandValidator",
    "ValidationReport",
    "can_runtime_check",
    "collect_command_heads",
    "command_exists",
    "default_command_validator",
    "extract_head_command",
    "find_invalid_cd_directories",
    "find_placeholder_tokens",
    "is_alias",
    "locate_head_token",
    "rewrite_segments",
    "runtime_check",
    "shell_escape",
    "split_segment_ranges",
    "split_segments",
    "syntax_check",
    "to_feedback_text",
    "tokenize_segment",
    "validate_command",
]
