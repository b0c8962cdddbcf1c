"""Top-level command segmentation."""

from __future__ import annotations

from collections.abc import Callable


def split_segment_ranges(command: str) -> list[tuple[int, int]]:
    """Split a command into `(start, end)` ranges at unquoted `;`, `|`, `||` and `&&`.

    Blank ranges are dropped. The text between two consecutive ranges is exactly
    the separator (plus surrounding whitespace) of the original string, so
    callers can rewrite segment interiors and splice the rest back unchanged.
    """

    ranges: list[tuple[int, int]] = []
    current_start = 0
    in_single = False
    in_double = False
    escaped = False
    idx = 0
    length = len(command)

    while idx < length:
        ch = command[idx]
        if escaped:
            escaped = False
            idx += 1
            continue
        if ch == "\\" and not in_single:
            escaped = True
            idx += 1
            continue
        if ch == "'" and not in_double:
            in_single = not in_single
            idx += 1
            continue
        if ch == '"' and not in_single:
            in_double = not in_double
            idx += 1
            continue
        if in_single or in_double:
            idx += 1
            continue

        if ch == ";":
            _push_range(ranges, command, current_start, idx)
            current_start = idx + 1
        elif ch == "|":
            _push_range(ranges, command, current_start, idx)
            width = 2 if command.startswith("||", idx) else 1
            current_start = idx + width
            idx += width
            continue
        elif ch == "&" and command.startswith("&&", idx):
            _push_range(ranges, command, current_start, idx)
            current_start = idx + 2
            idx += 2
            continue
        idx += 1

    _push_range(ranges, command, current_start, length)
    return ranges


def split_segments(command: str) -> list[str]:
    """Return the stripped text of every top-level segment."""

    return [command[start:end].strip() for start, end in split_segment_ranges(command)]


def rewrite_segments(command: str, rewrite: Callable[[str], str]) -> str:
    """Apply `rewrite(segment) -> str` to every segment, keeping separators byte-for-byte."""

    ranges = split_segment_ranges(command)
    if not ranges:
        return command

    parts: list[str] = []
    cursor = 0
    for start, end in ranges:
        if cursor < start:
            parts.append(command[cursor:start])
        parts.append(rewrite(command[start:end]))
        cursor = end
    if cursor < len(command):
        parts.append(command[cursor:])
    return "".join(parts)


def _push_range(ranges: list[tuple[int, int]], command: str, start: int, end: int) -> None:
    if start >= end:
        return
    if command[start:end].strip():
        ranges.append((start, end))
