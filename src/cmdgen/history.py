"""Shell history loading."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

HISTORY_FILES = (".zsh_history", ".bash_history")


def parse_history_line(line: str) -> str | None:
    """Return the command of one history line, unwrapping zsh `: <ts>:0;cmd` entries."""
    trimmed = line.strip()
    if not trimmed or trimmed.startswith("#"):
        return None
    if trimmed.startswith(": ") and ";" in trimmed:
        command = trimmed.split(";", 1)[1].strip()
        if command:
            return command
    return trimmed


def load_shell_history(limit: int, home: Path | None = None) -> list[str]:
    """Last `limit` history entries across zsh and bash, newest first, deduplicated."""
    if limit <= 0:
        return []
    base = home if home is not None else Path.home()

    entries: list[str] = []
    for name in HISTORY_FILES:
        path = base / name
        if not path.is_file():
            continue
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            logger.debug("history.skip_unreadable path={}", path)
            continue
        entries.extend(command for line in content.splitlines() if (command := parse_history_line(line)))

    seen: set[str] = set()
    recent: list[str] = []
    for entry in reversed(entries[-limit:]):
        if entry not in seen:
            seen.add(entry)
            recent.append(entry)
    return recent
