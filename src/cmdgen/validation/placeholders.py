"""Detection of unfilled template slots in generated commands."""

from __future__ import annotations

import shlex

BANNED_WORDS = ("YOUR_VALUE", "REPLACE_ME", "INSERT_VALUE", "PLACEHOLDER")


def find_placeholder_tokens(command: str) -> list[str]:
    found: set[str] = set()
    lowered = command.lower()
    for word in BANNED_WORDS:
        if word.lower() in lowered:
            found.add(word)

    for token in _shell_words(command):
        if len(token) >= 3 and token.startswith("<") and token.endswith(">") and "/" not in token and "\\" not in token:
            found.add(token)
    return sorted(found)


def _shell_words(command: str) -> list[str]:
    try:
        return shlex.split(command)
    except ValueError:
        return []
