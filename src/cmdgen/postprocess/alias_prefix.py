"""Force alias-shadowed heads to resolve to the real builtin or executable."""

from __future__ import annotations

from ..validation.segments import rewrite_segments
from ..validation.shell_checks import AliasLookup, is_alias
from ..validation.tokens import locate_head_token, tokenize_segment

KNOWN_SHELL_BUILTINS = frozenset({
    "alias",
    "bg",
    "bind",
    "break",
    "builtin",
    "cd",
    "command",
    "continue",
    "dirs",
    "echo",
    "eval",
    "exec",
    "exit",
    "export",
    "false",
    "fc",
    "fg",
    "getopts",
    "hash",
    "history",
    "jobs",
    "kill",
    "let",
    "local",
    "logout",
    "popd",
    "printf",
    "pushd",
    "pwd",
    "read",
    "readonly",
    "return",
    "set",
    "shift",
    "source",
    "test",
    "times",
    "trap",
    "true",
    "type",
    "typeset",
    "ulimit",
    "umask",
    "unalias",
    "unset",
    "wait",
    ".",
    "[",
})


class AliasPrefixStage:
    """Prefix alias heads with `builtin ` (known builtins) or a backslash."""

    def __init__(self, alias_lookup: AliasLookup = is_alias) -> None:
        self._alias_lookup = alias_lookup

    def process(self, shell: str, command: str) -> str:
        return rewrite_segments(command, lambda segment: self._normalize_segment(shell, segment))

    def _normalize_segment(self, shell: str, segment: str) -> str:
        tokens = tokenize_segment(segment)
        head = locate_head_token(tokens)
        if head is None or head.bypassed:
            return segment
        if not self._alias_lookup(shell, head.name):
            return segment

        prefix = "builtin " if head.name in KNOWN_SHELL_BUILTINS else "\\"
        # insert at the head word itself, after any `(`/`{` glued to it
        token = tokens[head.token_index]
        offset = token.start + (len(token.raw) - len(token.raw.lstrip("({")))
        return f"{segment[:offset]}{prefix}{segment[offset:]}"
