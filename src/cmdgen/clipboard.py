"""Clipboard helper."""

from __future__ import annotations

import pyperclip

from .errors import ClipboardError


def copy_text(text: str) -> None:
    """Copy text to the system clipboard."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        raise ClipboardError(f"clipboard unavailable: {exc}") from exc
