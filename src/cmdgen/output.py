"""Rendering of generated commands."""

from __future__ import annotations

import json

from rich.console import Console
from rich.markup import escape

from .engine.types import HandleResult


def print_generated_result(result: HandleResult, explanation_mode: bool, console: Console | None = None) -> None:
    """Print the command (and the explanation items in explanation mode)."""
    console = console or Console()
    console.print(result.command, markup=False, emoji=False, highlight=False, soft_wrap=True)
    console.print()
    if not explanation_mode:
        return
    items = [item.model_dump(by_alias=True) for item in result.explanations]
    if items:
        console.print_json(json.dumps(items, ensure_ascii=False))
    else:
        console.print("[]", markup=False)
    console.print()


def print_error(message: str, console: Console | None = None) -> None:
    console = console or Console(stderr=True)
    console.print(f"[bold red]error:[/bold red] {escape(message)}", highlight=False)


def print_model_list(models: list[str], console: Console | None = None) -> None:
    console = console or Console()
    for entry in models:
        console.print(entry, markup=False, highlight=False)


def print_session_hint(uuid: str, console: Console | None = None) -> None:
    console = console or Console(stderr=True)
    console.print(f"Session UUID: {uuid} (resume with: cmdgen --resume {uuid})", markup=False, highlight=False)
