"""Static existence checks for `cd` targets."""

from __future__ import annotations

from pathlib import Path

from .segments import split_segments
from .tokens import locate_head_token, tokenize_segment
from .types import SegmentToken

DYNAMIC_PATH_MARKERS = ("$", "*", "?", "[", "{", "`", "$(")


def find_invalid_cd_directories(command: str, *, cwd: Path | None = None, home: Path | None = None) -> list[str]:
    """Return `cd` arguments, as written, that do not name an existing directory.

    Arguments whose value depends on expansion (variables, globs, braces,
    substitutions) are skipped because they cannot be resolved statically.
    """

    base = cwd if cwd is not None else Path.cwd()
    invalid: set[str] = set()
    for segment in split_segments(command):
        tokens = tokenize_segment(segment)
        head = locate_head_token(tokens)
        if head is None or head.name != "cd":
            continue

        target = _cd_target(tokens[head.token_index + 1 :])
        if target is None:
            continue
        path = target.cooked.strip()
        if not path or path == "-" or _is_dynamic_path(path):
            continue

        candidate = Path(_expand_tilde(path, home) or path)
        resolved = candidate if candidate.is_absolute() else base / candidate
        if not resolved.is_dir():
            invalid.add(target.raw)
    return sorted(invalid)


def _cd_target(args: list[SegmentToken]) -> SegmentToken | None:
    """First non-flag argument; `--` ends option parsing."""
    for index, token in enumerate(args):
        value = token.cooked.strip()
        if value == "--":
            return args[index + 1] if index + 1 < len(args) else None
        if value.startswith("-") and value != "-":
            continue
        return token
    return None


def _is_dynamic_path(path: str) -> bool:
    return any(marker in path for marker in DYNAMIC_PATH_MARKERS)


def _expand_tilde(path: str, home: Path | None) -> str | None:
    if home is None:
        home = Path.home()
    if path == "~":
        return str(home)
    if path.startswith("~/"):
        return str(home / path[2:])
    return None
